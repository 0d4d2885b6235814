from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from camsentinel.schemas.detection import Detection


def format_percent(confidence: float) -> int:
    """Confidence (0..1) as a whole percentage, rounding halves away from zero.

    Works on the shortest decimal repr of the float, so 0.005 gives 1 and
    0.8675 gives 87 regardless of binary representation error.
    """
    pct = Decimal(repr(float(confidence))) * 100
    return int(pct.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_report_line(det: Detection) -> str:
    return f"{det.label} {format_percent(det.confidence)}%"


def format_message(detections: Iterable[Detection]) -> str:
    return ", ".join(f"{d.label} ({format_percent(d.confidence)}%)" for d in detections)
