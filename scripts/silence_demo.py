#!/usr/bin/env python3
"""
Run silence detection on a file, or on a synthetic clip when no file is given.
Run from repo root: python scripts/silence_demo.py [path/to/audio.wav]
The synthetic clip is 1 s silence, 3 s tone, 0.2 s silence, 5.8 s tone, 1 s silence.
"""
from __future__ import annotations

import json
import sys

import numpy as np

SAMPLE_RATE = 16000


def _synthetic_buffer():
    from audiotrim.silence import SampleBuffer

    def tone(sec: float) -> np.ndarray:
        t = np.arange(int(sec * SAMPLE_RATE)) / SAMPLE_RATE
        return (0.3 * np.sin(2 * np.pi * 440 * t)).astype(np.float32)

    def silence(sec: float) -> np.ndarray:
        return np.zeros(int(sec * SAMPLE_RATE), dtype=np.float32)

    left = np.concatenate([silence(1.0), tone(3.0), silence(0.2), tone(5.8), silence(1.0)])
    right = left * 0.5
    return SampleBuffer.from_array(np.stack([left, right]), SAMPLE_RATE)


def main() -> int:
    try:
        from audiotrim.silence import (
            detect_silence,
            get_optimal_trim_points,
            get_total_silence_duration,
        )
        from audiotrim.silence.pipeline import load_buffer
    except ModuleNotFoundError as e:
        print(f"Missing dependency: {e}. Run: pip install -e .", file=sys.stderr)
        return 1

    try:
        buffer = load_buffer(sys.argv[1]) if len(sys.argv) > 1 else _synthetic_buffer()
    except ValueError as e:
        print(f"Could not load audio: {e}", file=sys.stderr)
        return 1

    print(f"Analysing {buffer.duration:.2f} s, {buffer.num_channels} channel(s) @ {buffer.sample_rate} Hz")
    for strategy in ("energy", "background"):
        try:
            result = detect_silence(buffer, strategy=strategy)
        except Exception as e:
            print(f"[{strategy}] failed: {e}", file=sys.stderr)
            return 1
        trim = get_optimal_trim_points(result, buffer.duration)
        print(f"\n--- {strategy} ---")
        for region in result.silences:
            print(f"  {region.id}: {region.start:.3f}-{region.end:.3f} s")
        print(f"  total silence: {get_total_silence_duration(result.silences):.3f} s")
        print(f"  trim: {trim.start:.3f}-{trim.end:.3f} s")

    print("\n--- Full JSON (background) ---")
    print(json.dumps(result.model_dump(), indent=2), flush=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
