from __future__ import annotations

import logging
from typing import List, Optional

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import vision

from camsentinel.errors import DetectionError
from camsentinel.schemas.detection import BBox, Detection

logger = logging.getLogger(__name__)


class VisionClient:
    """Object localization through the Google Cloud Vision API.

    Responsibilities:
    - Build one OBJECT_LOCALIZATION request per image
    - Map localized object annotations into Detection objects
    - Own the backend connection and release it on `close()`

    The underlying ImageAnnotatorClient is created on first use, so
    constructing a VisionClient never touches the credentials file.

    Usage:
        with VisionClient("service-account.json") as client:
            dets = client.detect(jpeg_bytes)
    """

    def __init__(self, credentials_path: str, timeout: float = 30.0) -> None:
        self._credentials_path = credentials_path
        self._timeout = timeout
        self._client: Optional[vision.ImageAnnotatorClient] = None

    def _ensure_client(self) -> vision.ImageAnnotatorClient:
        if self._client is None:
            self._client = vision.ImageAnnotatorClient.from_service_account_file(self._credentials_path)
        return self._client

    @staticmethod
    def build_request(image_bytes: bytes) -> vision.AnnotateImageRequest:
        return vision.AnnotateImageRequest(
            image=vision.Image(content=image_bytes),
            features=[vision.Feature(type_=vision.Feature.Type.OBJECT_LOCALIZATION)],
        )

    def detect(self, image_bytes: bytes) -> List[Detection]:
        try:
            client = self._ensure_client()
            response = client.batch_annotate_images(
                requests=[self.build_request(image_bytes)], timeout=self._timeout
            )
        except (GoogleAPIError, GoogleAuthError, OSError, ValueError) as exc:
            raise DetectionError(f"Object detection failed: {exc}") from exc

        if not response.responses:
            raise DetectionError("Object detection failed: empty response")
        first = response.responses[0]
        if first.error.message:
            raise DetectionError(f"Object detection failed: {first.error.message}")

        detections = self._parse_annotations(first.localized_object_annotations)
        logger.debug("Backend returned %d localized objects", len(detections))
        return detections

    @staticmethod
    def _parse_annotations(annotations) -> List[Detection]:
        detections: List[Detection] = []
        for ann in annotations:
            bbox = BBox.from_vertices((v.x, v.y) for v in ann.bounding_poly.normalized_vertices)
            # scores arrive as float32; 6 places recovers the backend's value
            confidence = round(float(ann.score), 6)
            detections.append(Detection(label=str(ann.name), confidence=confidence, bbox=bbox))
        return detections

    def close(self) -> None:
        client, self._client = self._client, None
        if client is None:
            return
        try:
            client.transport.close()
        except Exception as exc:
            logger.warning("Error while closing vision client: %s", exc)

    def __enter__(self) -> "VisionClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
