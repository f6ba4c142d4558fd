"""Silence detection for audio trimming."""

from .detector import DETECTOR_STRATEGIES, detect_silence, get_detector
from .errors import (
    ClassifierError,
    ConfigurationError,
    DetectionWorkerError,
    SilenceDetectionError,
)
from .schema import (
    SILENCE_THRESHOLDS,
    DetectionOptions,
    DetectionResult,
    SampleBuffer,
    SilenceRegion,
    TrimPoints,
)
from .trim import get_optimal_trim_points, get_total_silence_duration

__all__ = [
    "detect_silence",
    "get_detector",
    "DETECTOR_STRATEGIES",
    "get_optimal_trim_points",
    "get_total_silence_duration",
    "SampleBuffer",
    "SilenceRegion",
    "DetectionOptions",
    "DetectionResult",
    "TrimPoints",
    "SILENCE_THRESHOLDS",
    "SilenceDetectionError",
    "ConfigurationError",
    "DetectionWorkerError",
    "ClassifierError",
]
