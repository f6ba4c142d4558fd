"""Exceptions raised by the silence-detection engine."""


class SilenceDetectionError(Exception):
    """Base class for silence-detection failures."""


class ConfigurationError(SilenceDetectionError, ValueError):
    """Invalid detection options, preset, or strategy name."""


class DetectionWorkerError(SilenceDetectionError):
    """The background worker failed to start or raised during analysis."""


class ClassifierError(SilenceDetectionError):
    """The resampler or speech classifier failed."""
