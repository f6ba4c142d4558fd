"""
Background module: run the energy detector in a one-shot worker.

Each call mixes the buffer to mono on the caller's side, moves the mono signal
into a ``DetectionRequest`` and hands that request to a fresh single-thread
executor. The executor is shut down as soon as the request is queued, so it
lives exactly as long as the one analysis. The caller gets a
``concurrent.futures.Future``; there is no streaming, no retry and no
cancellation.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, Optional

import numpy as np

from .energy import detect_silence_in_mono, window_size_in_samples
from .errors import DetectionWorkerError
from .mixdown import mix_to_mono
from .schema import DetectionOptions, DetectionResult, SampleBuffer

logger = logging.getLogger(__name__)


def _default_executor() -> Executor:
    return ThreadPoolExecutor(max_workers=1, thread_name_prefix="silence-worker")


class DetectionRequest:
    """
    Single-use carrier for a mono signal.

    The signal can be taken out exactly once; afterwards the request holds no
    reference to it.
    """

    def __init__(self, mono: np.ndarray, sample_rate: int, options: DetectionOptions):
        self._mono: Optional[np.ndarray] = mono
        self.sample_rate = sample_rate
        self.options = options

    @property
    def consumed(self) -> bool:
        return self._mono is None

    def take(self) -> np.ndarray:
        if self._mono is None:
            raise RuntimeError("Detection request already consumed")
        mono, self._mono = self._mono, None
        return mono


def _run_request(request: DetectionRequest) -> DetectionResult:
    """Worker entry point."""
    try:
        mono = request.take()
        return detect_silence_in_mono(mono, request.sample_rate, request.options)
    except Exception as e:
        logger.exception("Silence worker failed")
        raise DetectionWorkerError(f"Worker error: {e}") from e


def _failed(error: BaseException) -> Future:
    future: Future = Future()
    future.set_exception(error)
    return future


class BackgroundEnergyDetector:
    """
    Energy detector offloaded to a background worker.

    Args:
        executor_factory: Builds the worker context for one call. Defaults to a
            single-thread ``ThreadPoolExecutor``.
    """

    name = "background"

    def __init__(self, executor_factory: Optional[Callable[[], Executor]] = None):
        self._executor_factory = executor_factory or _default_executor

    def submit(
        self, buffer: SampleBuffer, options: Optional[DetectionOptions] = None
    ) -> Future:
        """
        Dispatch one detection and return its pending result.

        Invalid options raise immediately. Worker failures, including a worker
        that cannot be started, resolve the future with ``DetectionWorkerError``.
        """
        options = options or DetectionOptions()
        window_size_in_samples(options.window_size_ms, buffer.sample_rate)

        request = DetectionRequest(mix_to_mono(buffer), buffer.sample_rate, options)

        try:
            executor = self._executor_factory()
        except Exception as e:
            logger.error("Failed to start silence worker: %s", e)
            err = DetectionWorkerError(f"Worker error: {e}")
            err.__cause__ = e
            return _failed(err)

        try:
            future = executor.submit(_run_request, request)
        except Exception as e:
            logger.error("Failed to dispatch to silence worker: %s", e)
            err = DetectionWorkerError(f"Worker error: {e}")
            err.__cause__ = e
            return _failed(err)
        finally:
            executor.shutdown(wait=False)

        logger.debug("Dispatched %d samples to silence worker", buffer.length)
        return future

    def detect(
        self, buffer: SampleBuffer, options: Optional[DetectionOptions] = None
    ) -> DetectionResult:
        """Dispatch and block until the worker responds."""
        return self.submit(buffer, options).result()

    async def detect_async(
        self, buffer: SampleBuffer, options: Optional[DetectionOptions] = None
    ) -> DetectionResult:
        """Dispatch and await the worker from an event loop."""
        return await asyncio.wrap_future(self.submit(buffer, options))
