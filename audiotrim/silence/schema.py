"""
Data model for the silence-detection engine.

Sample buffers are plain numpy containers; everything the engine emits is a
pydantic model so callers can dump results straight to JSON.
"""

from __future__ import annotations

from typing import NamedTuple, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import ConfigurationError

# Threshold presets (dBFS). Lower values treat quieter audio as sound.
SILENCE_THRESHOLDS: dict[str, float] = {
    "quiet": -50.0,
    "default": -40.0,
    "moderate": -30.0,
}

DEFAULT_MIN_DURATION_MS = 300.0
DEFAULT_WINDOW_SIZE_MS = 50.0


class SampleBuffer(NamedTuple):
    """Decoded multi-channel audio, shape ``(channels, frames)``."""

    samples: np.ndarray
    sample_rate: int

    @classmethod
    def from_array(cls, y: np.ndarray, sr: int) -> "SampleBuffer":
        """
        Wrap a decoded array as a read-only buffer.

        Accepts a 1-D mono signal or a 2-D ``(channels, frames)`` array, which
        is the layout ``librosa.load(..., mono=False)`` returns.
        """
        if sr <= 0:
            raise ValueError(f"Invalid sample rate: {sr}")

        arr = np.asarray(y, dtype=np.float32)
        if arr.ndim == 1:
            arr = arr.reshape(1, -1)
        elif arr.ndim != 2:
            raise ValueError(f"Expected 1-D or 2-D audio, got shape {arr.shape}")

        view = arr.view()
        view.flags.writeable = False
        return cls(samples=view, sample_rate=int(sr))

    @property
    def num_channels(self) -> int:
        return int(self.samples.shape[0])

    @property
    def length(self) -> int:
        """Frame count."""
        return int(self.samples.shape[1])

    @property
    def duration(self) -> float:
        """Total duration in seconds."""
        return self.length / self.sample_rate


class SpeechSegment(NamedTuple):
    """Speech span reported by a classifier, in sample indices."""

    start: int
    end: int


class SilenceRegion(BaseModel):
    """A contiguous stretch of silence, in seconds."""

    id: str
    start: float
    end: float

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_bounds(self) -> "SilenceRegion":
        if not 0 <= self.start < self.end:
            raise ValueError(f"Invalid silence bounds: start={self.start}, end={self.end}")
        return self

    @property
    def duration(self) -> float:
        return self.end - self.start


class DetectionResult(BaseModel):
    """
    Ordered silence regions plus the leading/trailing classification.

    ``leading_silence`` and ``trailing_silence`` are never independent data:
    when set they are elements of ``silences``.
    """

    silences: list[SilenceRegion] = Field(default_factory=list)
    leading_silence: Optional[SilenceRegion] = None
    trailing_silence: Optional[SilenceRegion] = None
    duration: float = Field(ge=0.0)

    @model_validator(mode="after")
    def _check_edges(self) -> "DetectionResult":
        if self.leading_silence is not None:
            if not self.silences or self.leading_silence != self.silences[0]:
                raise ValueError("leading_silence must be the first silence region")
        if self.trailing_silence is not None:
            if not self.silences or self.trailing_silence != self.silences[-1]:
                raise ValueError("trailing_silence must be the last silence region")
        return self


class DetectionOptions(BaseModel):
    """Tuning knobs for the energy-threshold detector."""

    threshold_db: float = Field(default=SILENCE_THRESHOLDS["default"], allow_inf_nan=False)
    min_duration_ms: float = Field(default=DEFAULT_MIN_DURATION_MS, ge=0.0, allow_inf_nan=False)
    window_size_ms: float = Field(default=DEFAULT_WINDOW_SIZE_MS, gt=0.0, allow_inf_nan=False)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @classmethod
    def from_preset(cls, preset: str = "default", **overrides: float) -> "DetectionOptions":
        """Build options from a named threshold preset plus explicit overrides."""
        if preset not in SILENCE_THRESHOLDS:
            raise ConfigurationError(
                f"Unknown threshold preset: {preset}. "
                f"Supported: {', '.join(SILENCE_THRESHOLDS)}"
            )
        unknown = sorted(set(overrides) - set(cls.model_fields))
        if unknown:
            raise ConfigurationError(
                f"Unknown detection option(s): {', '.join(unknown)}. "
                f"Supported: {', '.join(cls.model_fields)}"
            )
        values: dict[str, float] = {"threshold_db": SILENCE_THRESHOLDS[preset]}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


class TrimPoints(BaseModel):
    """Suggested trim range, in seconds."""

    start: float
    end: float

    @model_validator(mode="after")
    def _check_range(self) -> "TrimPoints":
        if not 0 <= self.start < self.end:
            raise ValueError(f"Invalid trim range: start={self.start}, end={self.end}")
        return self

    @property
    def duration(self) -> float:
        return self.end - self.start


class DetectionReport(BaseModel):
    """Command-line output: detection result plus derived trim data."""

    strategy: str
    sample_rate: int
    channels: int
    result: DetectionResult
    trim: TrimPoints
    total_silence_sec: float
    processing_time_sec: float


class DetectionError(BaseModel):
    """Error response when the command-line run fails."""

    success: bool = False
    error: str
    error_code: str
