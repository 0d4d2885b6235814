from .base import NotificationEvent, NotificationSender
from .pushover import PushoverNotifier

__all__ = [
    "NotificationEvent",
    "NotificationSender",
    "PushoverNotifier",
]
