from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, List

from camsentinel.schemas.detection import Detection


@dataclass
class NotificationEvent:
    """Generic notification payload.

    - text: message text
    - detections: detections the message was built from
    - image_bytes: optional JPEG bytes to attach
    """

    text: str
    detections: List[Detection] = field(default_factory=list)
    image_bytes: Optional[bytes] = None


class NotificationSender:
    """Base class for notification senders.

    Subclasses implement `send`, returning True only when the transport
    confirmed delivery. Transport failures are reported as False, not raised.
    """

    def send(self, event: NotificationEvent) -> bool:  # pragma: no cover
        raise NotImplementedError
