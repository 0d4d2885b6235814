from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple


@dataclass(frozen=True)
class BBox:
    """Axis-aligned bounding box in center-coordinates (xc, yc, w, h).

    Coordinates are normalized to the frame (0..1), as returned by the
    object localization backend.
    """

    xc: float
    yc: float
    w: float
    h: float

    def to_xyxy(self, width: int, height: int) -> Tuple[int, int, int, int]:
        x1 = int(round((self.xc - self.w / 2.0) * width))
        y1 = int(round((self.yc - self.h / 2.0) * height))
        x2 = int(round((self.xc + self.w / 2.0) * width))
        y2 = int(round((self.yc + self.h / 2.0) * height))
        return x1, y1, x2, y2

    @classmethod
    def from_vertices(cls, vertices: Iterable[Tuple[float, float]]) -> Optional["BBox"]:
        pts = list(vertices)
        if not pts:
            return None
        xs = [p[0] for p in pts]
        ys = [p[1] for p in pts]
        x1, x2 = min(xs), max(xs)
        y1, y2 = min(ys), max(ys)
        return cls((x1 + x2) / 2.0, (y1 + y2) / 2.0, x2 - x1, y2 - y1)


@dataclass(frozen=True)
class Detection:
    """Single detection result.

    - label: object name reported by the backend
    - confidence: raw probability (0..1)
    - bbox: optional normalized bounding box, used only for annotation
    """

    label: str
    confidence: float
    bbox: Optional[BBox] = None
