#!/usr/bin/env python3
# =============================================================================
# tb_generate.py - Audio File -> DFT Test-Bench Stimulus
# =============================================================================
#
# Decodes an audio file, encodes every left-channel sample as an 11-bit
# signed fixed-point code and writes the DFT_tb stimulus module.
#
# Usage:
#   python -m ATBG.SGM.tb_generate                 (uses ./testC.mp3)
#   python -m ATBG.SGM.tb_generate <path_to_audio>
#
# The stimulus is always written to ./DFT_tb.v.
#
# Exit status:
#   0  document written, at least one sample converted
#   1  decode failure, no samples on the primary channel, or write failure
#      (nothing is written in the first two cases)
#
# =============================================================================

from __future__ import annotations
import sys, os, argparse

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from ATBG.SMM.constants import (
    SAMPLE_RATE, STEREO, PRIMARY_CHANNEL,
    DEFAULT_AUDIO_FILE, OUTPUT_FILE,
)
from ATBG.SDM.audio_source import DecodeError, describe_source, iter_sample_events
from ATBG.SGM.sequencer import generate

DIVIDER = "=" * 68


def write_stimulus(document: str, output_path: str) -> None:
    """Write the finished document; returns only once the file is closed."""
    with open(output_path, "w", newline="\n") as f:
        f.write(document)


def run_generate(audio_path: str, output_path: str = OUTPUT_FILE) -> bool:
    """
    Run the full decode -> quantize -> sequence -> write pipeline.
    Returns True if a non-empty stimulus file was written.
    """
    print(f"\n{DIVIDER}")
    print(f"  DFT Test-Bench Generator")
    print(DIVIDER)

    try:
        info = describe_source(audio_path)
    except DecodeError as exc:
        print(f"  [!!] {exc}")
        return False

    print(f"  File     : {os.path.basename(audio_path)}")
    print(f"  Rate     : {info.sample_rate} Hz")
    print(f"  Channels : {info.channels}")
    print(f"  Duration : {info.duration:.2f} s  ({info.frames:,} frames)")
    print(f"  Format   : {info.format}")
    print(f"  Decode   : {'stereo' if STEREO else 'mono'} @ {SAMPLE_RATE} Hz, "
          f"channel {PRIMARY_CHANNEL} encoded")

    try:
        result = generate(iter_sample_events(audio_path, STEREO, SAMPLE_RATE))
    except DecodeError as exc:
        print(f"  [!!] {exc}")
        print(f"  [!!] Nothing written to {output_path}")
        return False

    if result.accepted == 0:
        print(f"  [!!] No samples on channel {PRIMARY_CHANNEL} "
              f"({result.observed} events decoded)")
        print(f"  [!!] Nothing written to {output_path}")
        return False

    try:
        write_stimulus(result.document, output_path)
    except OSError as exc:
        print(f"  [!!] Cannot write {output_path}: {exc}")
        return False

    print(f"  Output   : {output_path}")
    print(f"\n  Done converting {result.accepted} data")
    print(f"{DIVIDER}\n")
    return True


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------
def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Generate the DFT_tb stimulus module from an audio file",
    )
    parser.add_argument(
        "audio", nargs="?", default=DEFAULT_AUDIO_FILE,
        help=f"Path to the source audio file, default {DEFAULT_AUDIO_FILE}",
    )
    args = parser.parse_args(argv)

    ok = run_generate(args.audio)
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
