from __future__ import annotations

"""Interfaces (Protocols) for pipeline components.

These enable clean dependency inversion and testability.
"""

from typing import ContextManager, Iterable, List, Protocol, Sequence

from camsentinel.schemas.detection import Detection


class ImageSource(Protocol):
    def fetch(self) -> bytes:
        """Return one still frame; raise FetchError on failure."""
        ...


class ObjectDetector(Protocol):
    def detect(self, image_bytes: bytes) -> List[Detection]: ...
    def close(self) -> None: ...


class Reporter(Protocol):
    def report(self, detections: Iterable[Detection]) -> None: ...
    def report_error(self, err: BaseException) -> None: ...


class Notifier(Protocol):
    def notify(self, image_bytes: bytes, detections: Sequence[Detection]) -> bool: ...


class RateLimiter(Protocol):
    def should_proceed(self, now: int) -> bool: ...
    def record_success(self, now: int) -> None: ...
    def run_lock(self) -> ContextManager[None]: ...
