"""
Shared test fixtures for camsentinel tests.
"""

import io
from datetime import datetime
from pathlib import Path
from typing import List

import pytest

from camsentinel.schemas.detection import Detection
from camsentinel.services.cooldown import CooldownStore
from camsentinel.services.pipeline import SentinelPipeline
from camsentinel.services.reporter import ResultReporter

NOW = 1_700_000_000
FIXED_TIME = datetime(2024, 1, 2, 3, 4, 5)


class FakeCamera:
    def __init__(self, image: bytes = b"\xff\xd8jpeg", error: Exception = None):
        self.image = image
        self.error = error
        self.calls = 0

    def fetch(self) -> bytes:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.image


class FakeDetector:
    def __init__(self, detections: List[Detection] = None, error: Exception = None):
        self.detections = detections or []
        self.error = error
        self.calls = 0
        self.closed = 0

    def detect(self, image_bytes: bytes) -> List[Detection]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.detections)

    def close(self) -> None:
        self.closed += 1


class FakeNotifier:
    def __init__(self, success: bool = True):
        self.success = success
        self.calls = []

    def notify(self, image_bytes, detections) -> bool:
        self.calls.append((image_bytes, list(detections)))
        return self.success


@pytest.fixture
def state_file(tmp_path: Path) -> Path:
    return tmp_path / "lastmessage.txt"


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    return tmp_path / "log.txt"


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def store(state_file: Path) -> CooldownStore:
    return CooldownStore(state_file, cooldown_seconds=600)


@pytest.fixture
def reporter(log_file: Path, output: io.StringIO) -> ResultReporter:
    return ResultReporter(log_file, stream=output, clock=lambda: FIXED_TIME)


@pytest.fixture
def make_pipeline(store, reporter):
    def _make(camera=None, detector=None, notifier=None, ignore=("Table", "Chair", "Coffee table", "Furniture")):
        camera = camera or FakeCamera()
        detector = detector or FakeDetector()
        notifier = notifier or FakeNotifier()
        pipeline = SentinelPipeline(
            limiter=store,
            camera=camera,
            detector=detector,
            reporter=reporter,
            notifier=notifier,
            ignore_labels=ignore,
        )
        return pipeline, camera, detector, notifier

    return _make
