"""Unit tests for ``audiotrim.silence.background``."""

from __future__ import annotations

from concurrent.futures import Future
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from audiotrim.silence.background import BackgroundEnergyDetector, DetectionRequest
from audiotrim.silence.energy import EnergyDetector
from audiotrim.silence.errors import ConfigurationError, DetectionWorkerError
from audiotrim.silence.schema import DetectionOptions, SampleBuffer


class TestDetectionRequest:
    """The mono signal moves into the worker exactly once."""

    def test_take_once(self) -> None:
        mono = np.zeros(4, dtype=np.float32)
        request = DetectionRequest(mono, 16_000, DetectionOptions())

        assert request.consumed is False
        assert request.take() is mono
        assert request.consumed is True

    def test_second_take_raises(self) -> None:
        request = DetectionRequest(np.zeros(4, dtype=np.float32), 16_000, DetectionOptions())
        request.take()
        with pytest.raises(RuntimeError, match="already consumed"):
            request.take()


class TestSubmit:
    """Request/response round trip through the worker."""

    def test_matches_synchronous_result(self, gap_buffer: SampleBuffer) -> None:
        expected = EnergyDetector().detect(gap_buffer)
        future = BackgroundEnergyDetector().submit(gap_buffer)

        assert isinstance(future, Future)
        assert future.result(timeout=10).model_dump() == expected.model_dump()

    def test_detect_blocks_for_result(self, silent_buffer: SampleBuffer) -> None:
        result = BackgroundEnergyDetector().detect(silent_buffer)
        assert len(result.silences) == 1
        assert result.leading_silence == result.trailing_silence == result.silences[0]

    def test_request_is_consumed_by_worker(self, silent_buffer: SampleBuffer) -> None:
        executor = MagicMock()
        BackgroundEnergyDetector(executor_factory=lambda: executor).submit(silent_buffer)

        fn, request = executor.submit.call_args.args
        fn(request)
        assert request.consumed is True
        executor.shutdown.assert_called_once_with(wait=False)

    def test_invalid_options_raise_synchronously(self, silent_buffer: SampleBuffer) -> None:
        factory = MagicMock()
        detector = BackgroundEnergyDetector(executor_factory=factory)

        with pytest.raises(ConfigurationError):
            detector.submit(silent_buffer, DetectionOptions(window_size_ms=0.01))
        factory.assert_not_called()

    def test_independent_calls(self, silent_buffer: SampleBuffer, gap_buffer: SampleBuffer) -> None:
        detector = BackgroundEnergyDetector()
        a = detector.submit(silent_buffer)
        b = detector.submit(gap_buffer)

        assert a.result(timeout=10).silences[0].end == pytest.approx(10.0)
        assert b.result(timeout=10).silences[0].end == pytest.approx(1.0)


class TestFailures:
    """Worker failures surface as ``DetectionWorkerError``."""

    def test_worker_start_failure(self, silent_buffer: SampleBuffer) -> None:
        def _broken() -> None:
            raise OSError("can't start new thread")

        future = BackgroundEnergyDetector(executor_factory=_broken).submit(silent_buffer)

        with pytest.raises(DetectionWorkerError, match="Worker error: can't start new thread") as exc:
            future.result()
        assert isinstance(exc.value.__cause__, OSError)

    def test_worker_exception_is_wrapped(self, silent_buffer: SampleBuffer) -> None:
        with patch(
            "audiotrim.silence.background.detect_silence_in_mono",
            side_effect=MemoryError("out of memory"),
        ):
            detector = BackgroundEnergyDetector()
            with pytest.raises(DetectionWorkerError, match="out of memory") as exc:
                detector.detect(silent_buffer)

        assert isinstance(exc.value.__cause__, MemoryError)

    def test_no_retry(self, silent_buffer: SampleBuffer) -> None:
        with patch(
            "audiotrim.silence.background.detect_silence_in_mono",
            side_effect=RuntimeError("boom"),
        ) as mock_detect:
            with pytest.raises(DetectionWorkerError):
                BackgroundEnergyDetector().detect(silent_buffer)

        mock_detect.assert_called_once()


class TestDetectAsync:
    """Awaiting the worker from asyncio."""

    @pytest.mark.asyncio
    async def test_detect_async(self, gap_buffer: SampleBuffer) -> None:
        result = await BackgroundEnergyDetector().detect_async(gap_buffer)
        assert [(r.start, r.end) for r in result.silences] == [(0.0, 1.0)]

    @pytest.mark.asyncio
    async def test_detect_async_failure(self, silent_buffer: SampleBuffer) -> None:
        def _broken() -> None:
            raise RuntimeError("no worker")

        detector = BackgroundEnergyDetector(executor_factory=_broken)
        with pytest.raises(DetectionWorkerError):
            await detector.detect_async(silent_buffer)
