"""
Trim module: trim points that drop leading and trailing silence.
"""

import logging
import math
from typing import Iterable

from .schema import DetectionResult, SilenceRegion, TrimPoints

logger = logging.getLogger(__name__)

# Fallback selection when the whole clip would be trimmed away.
FALLBACK_MAX_LENGTH_SEC = 0.5
FALLBACK_DURATION_FRACTION = 0.1


def get_total_silence_duration(silences: Iterable[SilenceRegion]) -> float:
    """Sum of the lengths of all silence regions (seconds)."""
    return sum((region.end - region.start for region in silences), 0.0)


def get_optimal_trim_points(result: DetectionResult, audio_duration: float) -> TrimPoints:
    """
    Trim range that excludes leading and trailing silence.

    When the leading and trailing regions meet or overlap (e.g. the clip is
    entirely silent), a short window centred on the clip is returned instead,
    so the range is never empty.

    Args:
        result: Detection result for the clip.
        audio_duration: Clip duration in seconds.

    Returns:
        TrimPoints with ``0 <= start < end <= audio_duration``.

    Raises:
        ValueError: If the duration is not a positive finite number.
    """
    if not math.isfinite(audio_duration) or audio_duration <= 0:
        raise ValueError(f"Invalid audio duration: {audio_duration}")

    start = result.leading_silence.end if result.leading_silence else 0.0
    end = result.trailing_silence.start if result.trailing_silence else audio_duration

    if start >= end:
        middle = audio_duration / 2
        min_length = min(FALLBACK_MAX_LENGTH_SEC, audio_duration * FALLBACK_DURATION_FRACTION)
        start = max(0.0, middle - min_length / 2)
        end = min(audio_duration, middle + min_length / 2)
        logger.info("No audible range found; using centred %.3f s selection", end - start)

    return TrimPoints(start=start, end=end)
