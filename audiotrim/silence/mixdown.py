"""
Mixdown module: average all channels of a buffer into one mono signal.
"""

import logging

import numpy as np

from .schema import SampleBuffer

logger = logging.getLogger(__name__)


def mix_to_mono(buffer: SampleBuffer) -> np.ndarray:
    """
    Mix a multi-channel buffer down to mono.

    Each output sample is the unweighted mean of every channel at that frame.
    The input buffer is not modified.

    Args:
        buffer: Decoded audio buffer.

    Returns:
        Mono signal (float32) with one sample per frame.

    Raises:
        ValueError: If the buffer has no channels.
    """
    if buffer.num_channels == 0:
        raise ValueError("Audio buffer has no channels")

    if buffer.num_channels == 1:
        mono = np.array(buffer.samples[0], dtype=np.float32)
    else:
        mono = buffer.samples.mean(axis=0, dtype=np.float64).astype(np.float32)

    logger.debug("Mixed %d channel(s) to mono: %d samples", buffer.num_channels, len(mono))
    return mono
