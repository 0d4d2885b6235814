from __future__ import annotations

"""Single-shot sentinel pipeline.

Sequence: cooldown check, fetch, detect, filter, report, notify, and
cooldown update. Every failure is reported once and ends the run.
"""

from dataclasses import dataclass, field
import enum
import logging
import time
from typing import Collection, List, Optional, Union

from camsentinel.errors import CooldownLockedError, DetectionError, FetchError
from camsentinel.schemas.detection import Detection
from camsentinel.services.interfaces import ImageSource, Notifier, ObjectDetector, RateLimiter, Reporter
from camsentinel.services.object_filter import filter_detections

logger = logging.getLogger(__name__)


class RunOutcome(enum.Enum):
    SKIPPED = "skipped"
    NO_OBJECTS = "no_objects"
    NOTIFIED = "notified"
    NOTIFY_FAILED = "notify_failed"
    ERROR = "error"


@dataclass(frozen=True)
class StepError:
    """Failure of a pipeline step, returned instead of raised."""

    error: Exception


@dataclass
class RunResult:
    outcome: RunOutcome
    detections: List[Detection] = field(default_factory=list)
    error: Optional[Exception] = None


class SentinelPipeline:
    def __init__(
        self,
        limiter: RateLimiter,
        camera: ImageSource,
        detector: ObjectDetector,
        reporter: Reporter,
        notifier: Notifier,
        ignore_labels: Collection[str],
    ) -> None:
        self._limiter = limiter
        self._camera = camera
        self._detector = detector
        self._reporter = reporter
        self._notifier = notifier
        self._ignore = tuple(ignore_labels)

    def run(self, now: Optional[int] = None) -> RunResult:
        now = int(time.time()) if now is None else int(now)
        try:
            with self._limiter.run_lock():
                result = self._run_locked(now)
        except CooldownLockedError as exc:
            logger.info("Skipping run: %s", exc)
            result = RunResult(RunOutcome.SKIPPED)
        except OSError as exc:
            # lock file could not be opened
            result = self._fail(StepError(exc))
        logger.info("Run finished: %s", result.outcome.value)
        return result

    def _run_locked(self, now: int) -> RunResult:
        try:
            if not self._limiter.should_proceed(now):
                return RunResult(RunOutcome.SKIPPED)
            return self._process(now)
        except Exception as exc:
            logger.debug("Unexpected pipeline failure", exc_info=True)
            return self._fail(StepError(exc))
        finally:
            self._detector.close()

    def _process(self, now: int) -> RunResult:
        image = self._fetch()
        if isinstance(image, StepError):
            return self._fail(image)

        detections = self._detect(image)
        if isinstance(detections, StepError):
            return self._fail(detections)

        kept = filter_detections(detections, self._ignore)
        self._reporter.report(kept)
        if not kept:
            return RunResult(RunOutcome.NO_OBJECTS, kept)

        if not self._notifier.notify(image, kept):
            logger.warning("Notification failed; cooldown left unchanged")
            return RunResult(RunOutcome.NOTIFY_FAILED, kept)

        self._limiter.record_success(now)
        return RunResult(RunOutcome.NOTIFIED, kept)

    def _fetch(self) -> Union[bytes, StepError]:
        try:
            return self._camera.fetch()
        except FetchError as exc:
            return StepError(exc)

    def _detect(self, image: bytes) -> Union[List[Detection], StepError]:
        try:
            return list(self._detector.detect(image))
        except DetectionError as exc:
            return StepError(exc)

    def _fail(self, failure: StepError) -> RunResult:
        logger.warning("Run failed: %s", failure.error)
        self._reporter.report_error(failure.error)
        return RunResult(RunOutcome.ERROR, error=failure.error)
