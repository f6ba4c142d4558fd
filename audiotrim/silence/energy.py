"""
Energy module: windowed RMS silence detection against a dB threshold.

The mono signal is cut into fixed, non-overlapping windows. A window is silent
when its RMS is strictly below the linear threshold. Runs of silent windows
become candidate regions; each candidate is kept or dropped on its own
duration, with no re-merging across dropped candidates.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np

from .errors import ConfigurationError
from .mixdown import mix_to_mono
from .regions import build_result
from .schema import DetectionOptions, DetectionResult, SampleBuffer

logger = logging.getLogger(__name__)


def db_to_amplitude(threshold_db: float) -> float:
    """Convert a dBFS threshold to a linear amplitude."""
    return math.pow(10.0, threshold_db / 20.0)


def window_size_in_samples(window_size_ms: float, sample_rate: int) -> int:
    """
    Resolve the analysis window length in samples.

    Raises:
        ConfigurationError: If the window resolves to zero samples.
    """
    size = math.floor((window_size_ms / 1000) * sample_rate)
    if size < 1:
        raise ConfigurationError(
            f"Window of {window_size_ms} ms at {sample_rate} Hz resolves to zero samples"
        )
    return size


def window_rms(mono: np.ndarray, window_size: int) -> np.ndarray:
    """
    RMS of each consecutive window; the final window may be shorter.

    Args:
        mono: Mono signal.
        window_size: Window length in samples (>= 1).

    Returns:
        float64 array of length ``ceil(len(mono) / window_size)``.
    """
    n = len(mono)
    if n == 0:
        return np.empty(0, dtype=np.float64)

    starts = np.arange(0, n, window_size)
    squares = np.square(mono, dtype=np.float64)
    sums = np.add.reduceat(squares, starts)
    lengths = np.diff(np.append(starts, n))
    return np.sqrt(sums / lengths)


def find_silent_runs(silent: np.ndarray) -> list[tuple[int, int]]:
    """
    Group consecutive silent windows.

    A virtual non-silent window after the last one closes any run still open
    at the end of the signal.

    Returns:
        ``(start_window, end_window)`` pairs, end exclusive.
    """
    padded = np.concatenate(([False], np.asarray(silent, dtype=bool), [False])).astype(np.int8)
    edges = np.flatnonzero(np.diff(padded))
    return list(zip(edges[0::2].tolist(), edges[1::2].tolist()))


def detect_silence_in_mono(
    mono: np.ndarray,
    sample_rate: int,
    options: Optional[DetectionOptions] = None,
) -> DetectionResult:
    """
    Detect silent regions in a mono signal.

    Args:
        mono: Mono signal (float32).
        sample_rate: Sample rate (Hz).
        options: Threshold, minimum duration and window size.

    Returns:
        DetectionResult with chronologically ordered regions.

    Raises:
        ConfigurationError: If the window resolves to zero samples.
    """
    options = options or DetectionOptions()
    window_size = window_size_in_samples(options.window_size_ms, sample_rate)
    threshold = db_to_amplitude(options.threshold_db)

    length = len(mono)
    duration = length / sample_rate

    rms = window_rms(mono, window_size)
    silent = rms < threshold

    intervals: list[tuple[float, float]] = []
    dropped = 0
    for start_w, end_w in find_silent_runs(silent):
        start = (start_w * window_size) / sample_rate
        end = min((end_w * window_size) / sample_rate, duration)
        if (end - start) * 1000 >= options.min_duration_ms:
            intervals.append((start, end))
        else:
            dropped += 1

    logger.info(
        "Energy scan: %d windows of %d samples, %d silent, %d region(s) kept, %d too short "
        "(threshold=%.1f dB, min=%.0f ms)",
        len(rms),
        window_size,
        int(silent.sum()),
        len(intervals),
        dropped,
        options.threshold_db,
        options.min_duration_ms,
    )
    return build_result(intervals, duration)


class EnergyDetector:
    """Windowed-RMS detector running on the calling thread."""

    name = "energy"

    def detect(
        self, buffer: SampleBuffer, options: Optional[DetectionOptions] = None
    ) -> DetectionResult:
        options = options or DetectionOptions()
        window_size_in_samples(options.window_size_ms, buffer.sample_rate)
        mono = mix_to_mono(buffer)
        return detect_silence_in_mono(mono, buffer.sample_rate, options)
