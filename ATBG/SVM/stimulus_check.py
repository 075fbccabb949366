#!/usr/bin/env python3
# =============================================================================
# stimulus_check.py - Stimulus Document Checker
# =============================================================================
#
# Inverse of the stimulus sequencer.  Parses a generated DFT_tb.v back into
# its 11-bit codes and the sample values they represent, and checks the
# document against the fixed test-bench layout.
#
# Usage:
#   python -m ATBG.SVM.stimulus_check <path_to_tb>
#   python -m ATBG.SVM.stimulus_check <path_to_tb> --dump 20
#
# Checks:
#   [1] Preamble      - identical to the sequencer's fixed preamble
#   [2] Body          - repeated (assignment, clock high, clock low) triplets
#   [3] Codes         - every code is CODE_WIDTH characters of '0'/'1'
#   [4] Postamble     - identical to the sequencer's fixed postamble
#
# =============================================================================

from __future__ import annotations
import sys, os, argparse, re
from typing import NamedTuple

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from ATBG.SMM.constants import CODE_WIDTH, SCALE, DATA_SIGNAL
from ATBG.SGM.sequencer import (
    PREAMBLE, POSTAMBLE,
    CLOCK_HIGH_LINE, CLOCK_LOW_LINE, LINES_PER_SAMPLE,
)

_ASSIGN_RE = re.compile(
    rf"^\s*{DATA_SIGNAL}\s*=\s*{CODE_WIDTH}'sb(?P<code>[^;]*);\s*$"
)

DIVIDER = "=" * 68


class StimulusReport(NamedTuple):
    ok:     bool
    codes:  list[str]    # codes in document order
    values: list[int]    # signed integers recovered from the codes
    errors: list[str]    # human-readable problems, empty when ok


def decode_code(code: str) -> int:
    """
    Interpret a binary string as a signed two's-complement integer.

    Raises ValueError unless `code` is exactly CODE_WIDTH characters of 0/1.
    """
    if len(code) != CODE_WIDTH or set(code) - {"0", "1"}:
        raise ValueError(
            f"expected {CODE_WIDTH} characters of '0'/'1', got {code!r}"
        )
    value = int(code, 2)
    if code[0] == "1":
        value -= 1 << CODE_WIDTH
    return value


def check_document(text: str) -> StimulusReport:
    """Parse and verify a stimulus document.  Never raises on bad content."""
    lines  = text.split("\n")
    errors: list[str] = []
    codes:  list[str] = []
    values: list[int] = []

    # A well-formed document ends with exactly one newline
    if lines and lines[-1] == "":
        lines = lines[:-1]
    else:
        errors.append("document does not end with a newline")

    n_pre, n_post = len(PREAMBLE), len(POSTAMBLE)
    if len(lines) < n_pre + n_post:
        errors.append(
            f"document has {len(lines)} lines, fewer than preamble + postamble "
            f"({n_pre + n_post})"
        )
        return StimulusReport(False, codes, values, errors)

    if tuple(lines[:n_pre]) != PREAMBLE:
        errors.append("preamble does not match the fixed test-bench header")
    if tuple(lines[len(lines) - n_post:]) != POSTAMBLE:
        errors.append("postamble does not match the fixed $stop trailer")

    body = lines[n_pre:len(lines) - n_post]
    if len(body) % LINES_PER_SAMPLE:
        errors.append(
            f"body has {len(body)} lines, not a multiple of {LINES_PER_SAMPLE}"
        )

    for i in range(0, len(body) - len(body) % LINES_PER_SAMPLE, LINES_PER_SAMPLE):
        line_no = n_pre + i + 1
        assign, high, low = body[i:i + LINES_PER_SAMPLE]

        m = _ASSIGN_RE.match(assign)
        if not m:
            errors.append(f"line {line_no}: expected {DATA_SIGNAL} assignment, got {assign!r}")
            continue
        try:
            values.append(decode_code(m.group("code")))
            codes.append(m.group("code"))
        except ValueError as exc:
            errors.append(f"line {line_no}: {exc}")

        if high != CLOCK_HIGH_LINE:
            errors.append(f"line {line_no + 1}: expected clock-high pulse, got {high!r}")
        if low != CLOCK_LOW_LINE:
            errors.append(f"line {line_no + 2}: expected clock-low pulse, got {low!r}")

    return StimulusReport(not errors, codes, values, errors)


def run_check(path: str, dump: int) -> bool:
    """
    Check one stimulus file and print a report.
    Returns True if the document matches the test-bench layout.
    """
    print(f"\n{DIVIDER}")
    print(f"  DFT Stimulus Checker")
    print(DIVIDER)

    if not os.path.exists(path):
        print(f"  [!!] File not found: {path}")
        return False

    with open(path, "r", newline="") as f:
        text = f.read()

    report = check_document(text)

    print(f"  File     : {os.path.basename(path)}")
    print(f"  Lines    : {text.count(chr(10)):,}")
    print(f"  Samples  : {len(report.codes):,}")

    if report.values:
        lo, hi = min(report.values), max(report.values)
        print(f"  Range    : {lo} .. {hi}  ({lo / SCALE:+.3f} .. {hi / SCALE:+.3f})")

    if dump and report.codes:
        print(f"\n  -- Codes (first {dump}) --")
        for idx, (code, value) in enumerate(zip(report.codes[:dump], report.values)):
            print(f"  {idx:6d}  {code}  {value:6d}  {value / SCALE:+.3f}")

    print(f"\n{DIVIDER}")
    if report.ok:
        print(f"  VERDICT: PASS - stimulus layout is intact")
    else:
        print(f"  VERDICT: FAIL - {len(report.errors)} problem(s)")
        for e in report.errors[:20]:
            print(f"    - {e}")
        if len(report.errors) > 20:
            print(f"    ... {len(report.errors) - 20} more")
    print(f"{DIVIDER}\n")

    return report.ok


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------
def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Check a generated DFT stimulus file",
    )
    parser.add_argument("tb", help="Path to the generated test bench (DFT_tb.v)")
    parser.add_argument(
        "--dump", type=int, default=0, metavar="N",
        help="Print the first N decoded codes",
    )
    args = parser.parse_args(argv)

    ok = run_check(args.tb, args.dump)
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
