"""
Pipeline module: load an audio file, detect silence, report trim points.

CLI: python -m audiotrim.silence.pipeline path/to/audio.wav [--strategy energy]
     [--preset default] [--threshold-db -40] [--min-duration-ms 300]
     [--window-size-ms 50]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Optional

import librosa

from audiotrim.core import config

from .detector import DETECTOR_STRATEGIES, detect_silence
from .errors import SilenceDetectionError
from .schema import (
    SILENCE_THRESHOLDS,
    DetectionError,
    DetectionOptions,
    DetectionReport,
    SampleBuffer,
)
from .trim import get_optimal_trim_points, get_total_silence_duration

logger = logging.getLogger(__name__)

VALID_EXTENSIONS = {".wav", ".mp3", ".m4a", ".ogg", ".flac"}
FLOAT_PRECISION = 3


def load_buffer(input_path: str | Path) -> SampleBuffer:
    """
    Decode an audio file at its native rate, keeping all channels.

    Raises:
        ValueError: If the file is missing, unsupported, undecodable or empty.
    """
    path = Path(input_path).resolve()
    if not path.exists():
        raise ValueError(f"File not found: {path}")

    ext = path.suffix.lower()
    if ext not in VALID_EXTENSIONS:
        raise ValueError(
            f"Unsupported format: {ext}. Supported: {', '.join(sorted(VALID_EXTENSIONS))}"
        )

    try:
        y, sr = librosa.load(str(path), sr=None, mono=False)
    except Exception as e:
        err_msg = str(e).lower()
        if "ffmpeg" in err_msg or "audioread" in err_msg or "decoder" in err_msg:
            raise ValueError(
                f"FFmpeg failed to decode audio. Ensure FFmpeg is installed and on PATH: {e}"
            ) from e
        raise ValueError(f"Corrupted or invalid audio file: {e}") from e

    if y.size == 0:
        raise ValueError("Audio file is empty")

    buffer = SampleBuffer.from_array(y, int(sr))
    logger.info(
        "Loaded %s: %d channel(s), %d frames at %d Hz (%.2f s)",
        path.name,
        buffer.num_channels,
        buffer.length,
        buffer.sample_rate,
        buffer.duration,
    )
    return buffer


def _round(value: float) -> float:
    return round(value, FLOAT_PRECISION)


def run_pipeline(
    input_path: str | Path,
    *,
    strategy: Optional[str] = None,
    options: Optional[DetectionOptions] = None,
) -> DetectionReport:
    """
    Detect silence in an audio file and derive trim points.

    Args:
        input_path: Path to the audio file.
        strategy: Detector strategy; defaults to ``AUDIOTRIM_STRATEGY``.
        options: Detection options; defaults come from the environment.

    Returns:
        DetectionReport with regions, trim points and total silence.
    """
    t0 = time.perf_counter()
    buffer = load_buffer(input_path)
    strategy = strategy or config.get_strategy()

    result = detect_silence(buffer, options, strategy=strategy)
    trim = get_optimal_trim_points(result, buffer.duration)
    total_silence = get_total_silence_duration(result.silences)

    logger.info(
        "Trim %.3f-%.3f s (%.3f s of silence in total)", trim.start, trim.end, total_silence
    )
    return DetectionReport(
        strategy=strategy,
        sample_rate=buffer.sample_rate,
        channels=buffer.num_channels,
        result=result,
        trim=trim,
        total_silence_sec=_round(total_silence),
        processing_time_sec=_round(time.perf_counter() - t0),
    )


def _build_options(args: argparse.Namespace) -> DetectionOptions:
    env = config.default_options()
    return DetectionOptions.from_preset(
        args.preset or config.get_threshold_preset(),
        min_duration_ms=(
            args.min_duration_ms if args.min_duration_ms is not None else env.min_duration_ms
        ),
        window_size_ms=(
            args.window_size_ms if args.window_size_ms is not None else env.window_size_ms
        ),
        threshold_db=args.threshold_db,
    )


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        description="Detect silent regions in an audio file and suggest trim points."
    )
    parser.add_argument("audio_path", help="Path to input audio file (.wav, .mp3, .m4a, .ogg, .flac)")
    parser.add_argument(
        "--strategy",
        choices=sorted(DETECTOR_STRATEGIES),
        default=None,
        help="Detection strategy (default: AUDIOTRIM_STRATEGY or energy)",
    )
    parser.add_argument(
        "--preset",
        choices=list(SILENCE_THRESHOLDS),
        default=None,
        help="Threshold preset (default: AUDIOTRIM_THRESHOLD_PRESET or default)",
    )
    parser.add_argument(
        "--threshold-db", type=float, default=None, help="Override the preset threshold (dBFS)"
    )
    parser.add_argument(
        "--min-duration-ms", type=float, default=None, help="Shortest reportable silence (ms)"
    )
    parser.add_argument(
        "--window-size-ms", type=float, default=None, help="RMS analysis window (ms)"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=config.get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        report = run_pipeline(
            args.audio_path,
            strategy=args.strategy,
            options=_build_options(args),
        )
        print(json.dumps(report.model_dump(), indent=2))
    except ValueError as e:
        logger.error("%s", e)
        err = DetectionError(error=str(e), error_code="VALIDATION_ERROR")
        print(json.dumps(err.model_dump(), indent=2))
        sys.exit(1)
    except SilenceDetectionError as e:
        logger.error("%s", e)
        err = DetectionError(error=str(e), error_code="DETECTION_ERROR")
        print(json.dumps(err.model_dump(), indent=2))
        sys.exit(1)
    except Exception as e:
        logger.exception("Silence detection failed: %s", e)
        err = DetectionError(error=f"Silence detection failed: {e}", error_code="DETECTION_ERROR")
        print(json.dumps(err.model_dump(), indent=2))
        sys.exit(1)


if __name__ == "__main__":
    main()
