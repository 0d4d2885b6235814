"""
Public interfaces for the camera sentinel.
"""

from .schemas.detection import Detection, BBox
from .services.object_filter import filter_detections
from .services.pipeline import RunOutcome, RunResult, SentinelPipeline
from .utils.formatting import format_percent

__all__ = [
    "Detection",
    "BBox",
    "filter_detections",
    "RunOutcome",
    "RunResult",
    "SentinelPipeline",
    "format_percent",
]
