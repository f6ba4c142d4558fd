"""
Detector module: strategy selection behind a single ``detect`` contract.

Strategies:
- "energy": windowed RMS on the calling thread.
- "background": the same analysis in a one-shot worker.
- "classifier": complement of Silero VAD speech segments.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Protocol

from audiotrim.core import config

from .background import BackgroundEnergyDetector
from .classifier import ClassifierDetector
from .energy import EnergyDetector
from .errors import ConfigurationError
from .schema import DetectionOptions, DetectionResult, SampleBuffer

logger = logging.getLogger(__name__)


class SilenceDetector(Protocol):
    def detect(
        self, buffer: SampleBuffer, options: Optional[DetectionOptions] = None
    ) -> DetectionResult: ...


DETECTOR_STRATEGIES: dict[str, Callable[[], SilenceDetector]] = {
    "energy": EnergyDetector,
    "background": BackgroundEnergyDetector,
    "classifier": ClassifierDetector,
}


def get_detector(name: Optional[str] = None) -> SilenceDetector:
    """
    Build the detector for a strategy name.

    Args:
        name: Strategy name; defaults to ``AUDIOTRIM_STRATEGY``.

    Raises:
        ConfigurationError: If the name is not a known strategy.
    """
    strategy = (name or config.get_strategy()).lower()
    try:
        factory = DETECTOR_STRATEGIES[strategy]
    except KeyError:
        raise ConfigurationError(
            f"Unknown detector strategy: {strategy}. "
            f"Supported: {', '.join(DETECTOR_STRATEGIES)}"
        ) from None
    return factory()


def detect_silence(
    buffer: SampleBuffer,
    options: Optional[DetectionOptions] = None,
    *,
    strategy: Optional[str] = None,
) -> DetectionResult:
    """
    Detect silence with the selected strategy.

    Args:
        buffer: Decoded audio.
        options: Detection options; defaults come from the environment.
        strategy: Strategy name; defaults to ``AUDIOTRIM_STRATEGY``.

    Returns:
        DetectionResult for the buffer.
    """
    detector = get_detector(strategy)
    options = options or config.default_options()

    t0 = time.perf_counter()
    result = detector.detect(buffer, options)
    elapsed = time.perf_counter() - t0

    logger.info(
        "[%s] %.3fs -> %d silence region(s) in %.2f s of audio",
        getattr(detector, "name", type(detector).__name__),
        elapsed,
        len(result.silences),
        result.duration,
    )
    return result
