"""Shared fixtures for silence-detection tests."""

from __future__ import annotations

import os
from typing import Callable

import numpy as np
import pytest

from audiotrim.silence.schema import SampleBuffer

SAMPLE_RATE = 16_000

# Keep the environment from leaking into defaults.
for _key in [k for k in os.environ if k.startswith("AUDIOTRIM_")]:
    del os.environ[_key]


def make_signal(spans: list[tuple[float, float]], sr: int = SAMPLE_RATE) -> np.ndarray:
    """Build a mono signal from ``(seconds, amplitude)`` spans of constant level."""
    parts = [np.full(int(round(sec * sr)), amp, dtype=np.float32) for sec, amp in spans]
    return np.concatenate(parts) if parts else np.zeros(0, dtype=np.float32)


@pytest.fixture()
def sample_rate() -> int:
    return SAMPLE_RATE


@pytest.fixture()
def buffer_from() -> Callable[..., SampleBuffer]:
    """Factory: ``buffer_from([(seconds, amplitude), ...], channels=1)``."""

    def _make(
        spans: list[tuple[float, float]], channels: int = 1, sr: int = SAMPLE_RATE
    ) -> SampleBuffer:
        mono = make_signal(spans, sr)
        return SampleBuffer.from_array(np.tile(mono, (channels, 1)), sr)

    return _make


@pytest.fixture()
def silent_buffer(buffer_from: Callable[..., SampleBuffer]) -> SampleBuffer:
    """Ten seconds of digital silence."""
    return buffer_from([(10.0, 0.0)])


@pytest.fixture()
def gap_buffer(buffer_from: Callable[..., SampleBuffer]) -> SampleBuffer:
    """Silent [0,1), loud [1,4), silent [4,4.2), loud [4.2,10)."""
    return buffer_from([(1.0, 0.0), (3.0, 0.5), (0.2, 0.0), (5.8, 0.5)])
