"""
Classifier module: silence as the complement of detected speech.

The buffer is resampled to 16 kHz mono, an external voice-activity classifier
labels the speech spans, and every sufficiently long gap between them (plus
the head and tail of the clip) is reported as silence.

Both collaborators sit behind small protocols so the inversion logic can be
exercised with synthetic segments:

- ``Resampler``: buffer -> mono signal at a target rate (default: librosa).
- ``SpeechClassifier``: mono 16 kHz signal -> speech segments in samples
  (default: the Silero VAD bundled with faster-whisper).
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence

import librosa
import numpy as np

from .errors import ClassifierError
from .mixdown import mix_to_mono
from .regions import build_result
from .schema import DetectionOptions, DetectionResult, SampleBuffer, SpeechSegment

logger = logging.getLogger(__name__)

CLASSIFIER_SAMPLE_RATE = 16000
MIN_SILENCE_SEC = 0.3


class Resampler(Protocol):
    def to_mono(self, buffer: SampleBuffer, target_sr: int) -> np.ndarray: ...


class SpeechClassifier(Protocol):
    def speech_segments(self, audio: np.ndarray, sample_rate: int) -> list[SpeechSegment]: ...


class LibrosaResampler:
    """Mix down, then band-limited resample with ``librosa.resample``."""

    def __init__(self, res_type: str = "soxr_hq"):
        self._res_type = res_type

    def to_mono(self, buffer: SampleBuffer, target_sr: int) -> np.ndarray:
        mono = mix_to_mono(buffer)
        if buffer.sample_rate == target_sr or len(mono) == 0:
            return mono

        y = librosa.resample(
            mono,
            orig_sr=buffer.sample_rate,
            target_sr=target_sr,
            res_type=self._res_type,
        )
        logger.info(
            "Resampled %d -> %d Hz: %d -> %d samples",
            buffer.sample_rate,
            target_sr,
            len(mono),
            len(y),
        )
        return y.astype(np.float32)


class SileroSpeechClassifier:
    """
    Speech segmentation with the Silero VAD shipped in faster-whisper.

    The model is loaded on first use.
    """

    def __init__(
        self,
        threshold: float = 0.5,
        min_speech_duration_ms: int = 250,
        min_silence_duration_ms: int = 100,
        speech_pad_ms: int = 30,
    ):
        self._vad_kwargs = {
            "threshold": threshold,
            "min_speech_duration_ms": min_speech_duration_ms,
            "min_silence_duration_ms": min_silence_duration_ms,
            "speech_pad_ms": speech_pad_ms,
        }

    def speech_segments(self, audio: np.ndarray, sample_rate: int) -> list[SpeechSegment]:
        if sample_rate != CLASSIFIER_SAMPLE_RATE:
            raise ValueError(
                f"Silero VAD expects {CLASSIFIER_SAMPLE_RATE} Hz input, got {sample_rate} Hz"
            )
        if len(audio) == 0:
            return []

        from faster_whisper.vad import VadOptions, get_speech_timestamps

        stamps = get_speech_timestamps(audio, vad_options=VadOptions(**self._vad_kwargs))
        segments = [SpeechSegment(start=int(s["start"]), end=int(s["end"])) for s in stamps]
        logger.debug("Silero VAD: %d speech segment(s)", len(segments))
        return segments


def segments_to_seconds(
    segments: Sequence[SpeechSegment], sample_rate: int, duration: float
) -> list[tuple[float, float]]:
    """Convert sample-index segments to seconds, clipped to ``[0, duration]``."""
    spans = []
    for seg in segments:
        start = min(max(seg.start / sample_rate, 0.0), duration)
        end = min(max(seg.end / sample_rate, 0.0), duration)
        spans.append((start, end))
    return spans


def invert_speech_segments(
    speech: Sequence[tuple[float, float]],
    duration: float,
    min_silence_sec: float = MIN_SILENCE_SEC,
) -> list[tuple[float, float]]:
    """
    Complement of the speech spans over ``[0, duration]``.

    Every candidate (head, each gap, tail, or the whole clip when there is no
    speech) is kept only if it lasts at least ``min_silence_sec``.

    Args:
        speech: Ordered, non-overlapping ``(start, end)`` spans in seconds.
        duration: Clip duration in seconds.
        min_silence_sec: Minimum reportable silence.

    Returns:
        Silence ``(start, end)`` intervals in chronological order.
    """

    def _keep(start: float, end: float) -> bool:
        length = end - start
        return length > 0 and length >= min_silence_sec

    if not speech:
        return [(0.0, duration)] if _keep(0.0, duration) else []

    silences = []

    first_start = speech[0][0]
    if _keep(0.0, first_start):
        silences.append((0.0, first_start))

    for (_, prev_end), (next_start, _) in zip(speech, speech[1:]):
        if _keep(prev_end, next_start):
            silences.append((prev_end, next_start))

    last_end = speech[-1][1]
    if _keep(last_end, duration):
        silences.append((last_end, duration))

    return silences


class ClassifierDetector:
    """
    Voice-activity based detector.

    There is no threshold knob; ``options`` is accepted only so the strategy
    has the same call signature as the energy detectors.
    """

    name = "classifier"

    def __init__(
        self,
        resampler: Optional[Resampler] = None,
        classifier: Optional[SpeechClassifier] = None,
    ):
        self._resampler = resampler or LibrosaResampler()
        self._classifier = classifier or SileroSpeechClassifier()

    def detect(
        self, buffer: SampleBuffer, options: Optional[DetectionOptions] = None
    ) -> DetectionResult:
        if buffer.num_channels == 0:
            raise ValueError("Audio buffer has no channels")

        duration = buffer.duration
        try:
            audio = self._resampler.to_mono(buffer, CLASSIFIER_SAMPLE_RATE)
            segments = self._classifier.speech_segments(audio, CLASSIFIER_SAMPLE_RATE)
        except Exception as e:
            logger.exception("Speech classifier failed")
            raise ClassifierError(f"Speech classifier failed: {e}") from e

        speech = segments_to_seconds(segments, CLASSIFIER_SAMPLE_RATE, duration)
        intervals = invert_speech_segments(speech, duration)
        logger.info(
            "Classifier scan: %d speech segment(s), %d silence region(s) over %.2f s",
            len(speech),
            len(intervals),
            duration,
        )
        return build_result(intervals, duration)
