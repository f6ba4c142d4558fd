#!/usr/bin/env python3
"""
Bootstrap script: verify Python version, ffmpeg, and the AUDIOTRIM_* configuration.
Run from repo root after `pip install -e .`: python scripts/bootstrap.py
Exits 0 if all checks pass; 1 with friendly error messages otherwise.
"""
from __future__ import annotations

import shutil
import subprocess
import sys

REQUIRED_PYTHON = (3, 10)


def _python_ok() -> tuple[bool, str]:
    if sys.version_info < REQUIRED_PYTHON:
        return False, (
            f"Python {REQUIRED_PYTHON[0]}.{REQUIRED_PYTHON[1]}+ required; "
            f"current: {sys.version_info.major}.{sys.version_info.minor}"
        )
    return True, f"Python {sys.version_info.major}.{sys.version_info.minor} OK"


def _ffmpeg_ok() -> tuple[bool, str]:
    ffmpeg = shutil.which("ffmpeg")
    if not ffmpeg:
        return False, (
            "ffmpeg not found on PATH. librosa needs it to decode MP3/M4A input.\n"
            "  macOS:  brew install ffmpeg\n"
            "  Ubuntu/Debian:  sudo apt install ffmpeg\n"
            "  Windows:  choco install ffmpeg  or download from https://ffmpeg.org"
        )
    try:
        out = subprocess.run(
            [ffmpeg, "-version"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if out.returncode != 0:
            return False, "ffmpeg -version failed"
        first_line = (out.stdout or out.stderr or "").split("\n")[0].strip()
        return True, first_line or "ffmpeg found"
    except Exception as e:
        return False, f"ffmpeg check failed: {e}"


def _config_ok() -> tuple[bool, str]:
    try:
        from audiotrim.core import config
        from audiotrim.silence import get_detector
    except ModuleNotFoundError as e:
        return False, f"Missing dependency: {e}. Run: pip install -e ."

    try:
        get_detector(config.get_strategy())
        options = config.default_options()
    except ValueError as e:
        return False, f"Invalid AUDIOTRIM_* setting: {e}"
    return True, (
        f"strategy={config.get_strategy()}, threshold={options.threshold_db} dB, "
        f"min={options.min_duration_ms} ms, window={options.window_size_ms} ms"
    )


def main() -> int:
    checks: list[tuple[str, bool, str]] = []
    ok, msg = _python_ok()
    checks.append(("Python", ok, msg))
    ok, msg = _ffmpeg_ok()
    checks.append(("ffmpeg", ok, msg))
    ok, msg = _config_ok()
    checks.append(("Configuration", ok, msg))

    # Print what passed first (stdout), then any failures (stderr)
    for name, ok, msg in checks:
        if ok:
            print(f"  {name}: {msg}")
    sys.stdout.flush()

    errors = [(n, m) for n, o, m in checks if not o]
    if errors:
        for name, msg in errors:
            print(f"  [{name}] {msg}", file=sys.stderr)
        print(file=sys.stderr)
        print("Bootstrap failed. Fix the above and run it again.", file=sys.stderr)
        return 1
    print("\nBootstrap OK. Run: audiotrim-silence path/to/audio.wav")
    return 0


if __name__ == "__main__":
    sys.exit(main())
