from __future__ import annotations

from typing import Collection, Iterable, List

from camsentinel.schemas.detection import Detection


def filter_detections(detections: Iterable[Detection], ignore_labels: Collection[str]) -> List[Detection]:
    """Drop detections whose label is in `ignore_labels` (exact, case-sensitive).

    Order is preserved; duplicates are kept.
    """
    ignored = frozenset(ignore_labels)
    return [d for d in detections if d.label not in ignored]
