from __future__ import annotations

import logging
from typing import List, Sequence

import requests

from camsentinel.config import DEFAULT_PUSHOVER_API_URL
from camsentinel.schemas.detection import Detection
from camsentinel.services.notifications.base import NotificationEvent, NotificationSender
from camsentinel.utils.formatting import format_message
from camsentinel.utils.visualization import annotate_jpeg

logger = logging.getLogger(__name__)


class PushoverNotifier(NotificationSender):
    """Sends a message with the camera frame attached through Pushover.

    The attachment is always named `image.jpg` with type `image/jpeg`.
    Success means HTTP 200; anything else is logged and reported as False.
    """

    def __init__(
        self,
        app_token: str,
        user_key: str,
        api_url: str = DEFAULT_PUSHOVER_API_URL,
        timeout: float = 15.0,
        annotate_image: bool = False,
    ) -> None:
        self._token = app_token
        self._user = user_key
        self._url = api_url
        self._timeout = timeout
        self._annotate = annotate_image

    def notify(self, image_bytes: bytes, detections: Sequence[Detection]) -> bool:
        dets: List[Detection] = list(detections)
        event = NotificationEvent(
            text=format_message(dets),
            detections=dets,
            image_bytes=image_bytes,
        )
        return self.send(event)

    def send(self, event: NotificationEvent) -> bool:
        data = {"token": self._token, "user": self._user, "message": event.text}
        files = None
        if event.image_bytes:
            image = event.image_bytes
            if self._annotate and event.detections:
                image = annotate_jpeg(image, event.detections)
            files = {"attachment": ("image.jpg", image, "image/jpeg")}
        try:
            r = requests.post(self._url, data=data, files=files, timeout=self._timeout)
        except requests.RequestException as exc:
            logger.error("Pushover send failed: %s", exc)
            return False
        if r.status_code != 200:
            logger.error("Pushover error %s: %s", r.status_code, r.text[:200])
            return False
        logger.info("Pushover notification sent: %s", event.text)
        return True
