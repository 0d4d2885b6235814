from __future__ import annotations

import logging
from typing import Iterable, Tuple
import zlib

import cv2
import numpy as np

from camsentinel.schemas.detection import Detection
from camsentinel.utils.formatting import format_percent

logger = logging.getLogger(__name__)


def draw_detections(
    image_bgr: np.ndarray,
    detections: Iterable[Detection],
    color: Tuple[int, int, int] | None = None,
) -> np.ndarray:
    """Draw detections onto a BGR image and return a copy.

    - image_bgr: OpenCV image (H, W, 3) in BGR.
    - detections: iterable of Detection objects; those without bbox are skipped.
    - color: optional BGR color for all boxes; if None, color per class.
    """
    out = image_bgr.copy()
    height, width = out.shape[:2]
    for det in detections:
        if det.bbox is None:
            continue
        x1, y1, x2, y2 = det.bbox.to_xyxy(width, height)
        c = _color_for_label(det.label) if color is None else color

        cv2.rectangle(out, (x1, y1), (x2, y2), c, 2)
        label = f"{det.label} {format_percent(det.confidence)}%"
        (tw, th), baseline = cv2.getTextSize(label, cv2.FONT_HERSHEY_SIMPLEX, 0.5, 1)
        ty = max(th + 4, y1)
        cv2.rectangle(out, (x1, ty - th - 4), (x1 + tw + 2, ty + baseline - 4), (0, 0, 0), -1)
        cv2.putText(out, label, (x1 + 1, ty - 5), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1, cv2.LINE_AA)
    return out


def annotate_jpeg(image_bytes: bytes, detections: Iterable[Detection], quality: int = 85) -> bytes:
    """Return JPEG bytes with the detections drawn, or the input if it cannot be decoded."""
    data = np.frombuffer(image_bytes, dtype=np.uint8)
    img = cv2.imdecode(data, cv2.IMREAD_COLOR)
    if img is None:
        logger.warning("Cannot decode frame for annotation; sending it unchanged")
        return image_bytes
    annotated = draw_detections(img, detections)
    ok, buf = cv2.imencode(".jpg", annotated, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
    if not ok:
        logger.warning("JPEG encode failed; sending the original frame")
        return image_bytes
    return buf.tobytes()


def _color_for_label(label: str) -> Tuple[int, int, int]:
    # Map label to a BGR tuple deterministically
    h = zlib.crc32(label.encode("utf-8"))
    return (h % 256, (h >> 8) % 256, (h >> 16) % 256)
