"""
Regions module: turn silence intervals into a labelled detection result.

Shared by every detection strategy so the output shape and the
leading/trailing rules stay identical.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .schema import DetectionResult, SilenceRegion

logger = logging.getLogger(__name__)

# Absorbs window-boundary rounding at the clip edges (seconds).
EDGE_TOLERANCE_SEC = 0.01


def classify_edges(
    silences: list[SilenceRegion], duration: float
) -> tuple[Optional[SilenceRegion], Optional[SilenceRegion]]:
    """
    Pick out the regions touching the start and the end of the clip.

    The two checks are independent: a single region spanning the whole clip is
    both leading and trailing.

    Returns:
        Tuple of (leading, trailing); either may be None.
    """
    if not silences:
        return None, None

    first, last = silences[0], silences[-1]
    leading = first if first.start < EDGE_TOLERANCE_SEC else None
    trailing = last if abs(last.end - duration) < EDGE_TOLERANCE_SEC else None
    return leading, trailing


def build_result(intervals: Iterable[tuple[float, float]], duration: float) -> DetectionResult:
    """
    Label chronologically ordered intervals and classify the edges.

    Args:
        intervals: ``(start, end)`` pairs in seconds, ascending and non-overlapping.
        duration: Total clip duration in seconds.

    Returns:
        DetectionResult with ids ``silence-0``, ``silence-1``, ...
    """
    silences = [
        SilenceRegion(id=f"silence-{i}", start=start, end=end)
        for i, (start, end) in enumerate(intervals)
    ]
    leading, trailing = classify_edges(silences, duration)

    logger.debug(
        "Built %d silence region(s) (leading=%s, trailing=%s)",
        len(silences),
        leading.id if leading else None,
        trailing.id if trailing else None,
    )
    return DetectionResult(
        silences=silences,
        leading_silence=leading,
        trailing_silence=trailing,
        duration=duration,
    )
