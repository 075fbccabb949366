#!/usr/bin/env python3
# =============================================================================
# validate.py - SGM Self-Validation Suite
# =============================================================================
#
# Run directly:  python -m ATBG.SVM.validate
#             or python ATBG/SVM/validate.py (from project root)
#
# Tests:
#   1. Constants integrity   - code range, scale headroom, policy names
#   2. Quantizer             - reference codes, sign/value sweep, boundaries
#   3. Sequencer             - line counts, channel filter, idempotence
#   4. Checker round trip    - generated documents decode back to the input
#   5. Audio source          - synthetic WAV decodes to the expected events
# =============================================================================

import sys
import os
import tempfile

# Allow running from project root without installing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import numpy as np

from ATBG.SMM.constants import (
    CODE_WIDTH, CODE_MIN, CODE_MAX, CODE_MASK, SCALE,
    OVERFLOW, OVERFLOW_POLICIES, CLOCK_DELAY, SAMPLE_RATE,
)
from ATBG.SGM.quantizer import encode, quantize, negate_bits, round_half_away
from ATBG.SGM.sequencer import (
    PREAMBLE, POSTAMBLE, CLOCK_HIGH_LINE, CLOCK_LOW_LINE,
    StimulusBuilder, generate, assignment_line,
)
from ATBG.SVM.stimulus_check import check_document, decode_code

PASS = "[PASS]"
FAIL = "[FAIL]"
INFO = "[INFO]"

failures = 0

def check(label: str, condition: bool, detail: str = "") -> bool:
    global failures
    if condition:
        print(f"  {PASS} {label}")
    else:
        print(f"  {FAIL} {label}{(' -- ' + detail) if detail else ''}")
        failures += 1
    return condition


# =============================================================================
# TEST 1 - Constants Integrity
# =============================================================================
print("\n" + "="*60)
print("TEST 1 - Constants Integrity")
print("="*60)

check("CODE_WIDTH = 11",             CODE_WIDTH == 11)
check("CODE_MIN = -1024",            CODE_MIN == -1024, f"got {CODE_MIN}")
check("CODE_MAX = 1023",             CODE_MAX == 1023,  f"got {CODE_MAX}")
check("CODE_MASK = 2**11 - 1",       CODE_MASK == 2047)
check("SCALE = 1000",                SCALE == 1000)
check("Full-scale fits in range",    CODE_MIN <= -SCALE and SCALE <= CODE_MAX)
check("Default overflow is known",   OVERFLOW in OVERFLOW_POLICIES)
check("Clock delay = 2",             CLOCK_DELAY == 2)
check("Decode rate = 44100",         SAMPLE_RATE == 44_100)


# =============================================================================
# TEST 2 - Quantizer
# =============================================================================
print("\n" + "="*60)
print("TEST 2 - Quantizer")
print("="*60)

reference = {
     1.0: "01111101000",
     0.5: "00111110100",
     0.0: "00000000000",
    -0.5: "11000001100",
    -1.0: "10000011000",
}
for sample, expected in reference.items():
    got = encode(sample)
    check(f"encode({sample:+.1f}) = {expected}", got == expected, f"got {got}")

# --- Rounding rule ---
check("round_half_away(2.5) = 3",    round_half_away(2.5) == 3)
check("round_half_away(-2.5) = -3",  round_half_away(-2.5) == -3)
check("round_half_away(-0.4) = 0",   round_half_away(-0.4) == 0)

# --- Sweep the nominal range ---
sweep = np.linspace(-1.0, 1.0, 4001)
bad_width = bad_sign = bad_value = 0
for s in sweep.tolist():
    code = encode(s)
    if len(code) != CODE_WIDTH or set(code) - {"0", "1"}:
        bad_width += 1
        continue
    expected = round_half_away(s * SCALE)
    if (code[0] == "1") != (expected < 0):
        bad_sign += 1
    if decode_code(code) != expected:
        bad_value += 1

print(f"  {INFO} Swept {len(sweep)} samples in [-1.0, 1.0]")
check("Sweep: every code is 11 chars of 0/1", bad_width == 0, f"{bad_width} bad")
check("Sweep: MSB matches sign",              bad_sign == 0,  f"{bad_sign} bad")
check("Sweep: codes decode to round(s*1000)", bad_value == 0, f"{bad_value} bad")

# --- Boundaries: no truncation needed at the extremes ---
check("1.023 -> 1023 = 01111111111",  encode(1.023) == "01111111111")
check("-1.024 -> -1024 = 10000000000", encode(-1.024) == "10000000000")
check("negate_bits(1024) fits 11 bits", negate_bits(1024) <= CODE_MASK)

# --- Overflow policies ---
check("saturate: 1.5 -> 1023",  quantize(1.5, "saturate") == CODE_MAX)
check("saturate: -1.5 -> -1024", quantize(-1.5, "saturate") == CODE_MIN)
check("wrap: 1.5 -> 1500 - 2048", quantize(1.5, "wrap") == 1500 - 2048)
check("wrap: -1.5 -> -1500 + 2048", quantize(-1.5, "wrap") == -1500 + 2048)


# =============================================================================
# TEST 3 - Sequencer
# =============================================================================
print("\n" + "="*60)
print("TEST 3 - Sequencer")
print("="*60)

rng = np.random.default_rng(1234)
values = rng.uniform(-1.0, 1.0, 500).tolist()
events = []
for v in values:
    events.append((v, 0))
    events.append((-v, 1))

result = generate(iter(events))
lines = result.document.split("\n")[:-1]
check("Accepted = channel-0 events",   result.accepted == len(values),
      f"got {result.accepted}")
check("Observed = all events",          result.observed == len(events))
check("Line count = pre + 3n + post",
      len(lines) == len(PREAMBLE) + 3 * len(values) + len(POSTAMBLE),
      f"got {len(lines)}")

body = lines[len(PREAMBLE):len(lines) - len(POSTAMBLE)]
check("Body: n assignment lines",
      sum(1 for l in body if l.strip().startswith("data_in")) == len(values))
check("Body: n clock-high lines",  body.count(CLOCK_HIGH_LINE) == len(values))
check("Body: n clock-low lines",   body.count(CLOCK_LOW_LINE) == len(values))
check("Idempotent: second run identical",
      generate(iter(events)).document == result.document)

only_left = generate((v, 0) for v in values)
check("Other channels add nothing", only_left.document == result.document)

scenario = generate([(0.5, 0), (-0.5, 0), (0.0, 0)]).document
expected_body = [
    assignment_line("00111110100"), CLOCK_HIGH_LINE, CLOCK_LOW_LINE,
    assignment_line("11000001100"), CLOCK_HIGH_LINE, CLOCK_LOW_LINE,
    assignment_line("00000000000"), CLOCK_HIGH_LINE, CLOCK_LOW_LINE,
]
check("Scenario [0.5, -0.5, 0.0]",
      scenario == "\n".join(PREAMBLE + tuple(expected_body) + POSTAMBLE) + "\n")

builder = StimulusBuilder()
builder.finish()
try:
    builder.add_sample(0.1)
    check("Finished builder rejects samples", False, "no exception raised")
except RuntimeError:
    check("Finished builder rejects samples", True)


# =============================================================================
# TEST 4 - Checker Round Trip
# =============================================================================
print("\n" + "="*60)
print("TEST 4 - Checker Round Trip")
print("="*60)

report = check_document(result.document)
check("Generated document passes checker", report.ok, "; ".join(report.errors[:3]))
check("Recovered values match input",
      report.values == [round_half_away(v * SCALE) for v in values])

tampered = result.document.replace(CLOCK_LOW_LINE, "", 1)
check("Tampered document fails checker", not check_document(tampered).ok)


# =============================================================================
# TEST 5 - Audio Source (requires soundfile)
# =============================================================================
print("\n" + "="*60)
print("TEST 5 - Audio Source")
print("="*60)

try:
    import soundfile as sf
    from ATBG.SDM.audio_source import iter_sample_events
    have_sf = True
except ImportError:
    have_sf = False
    print(f"  {INFO} soundfile not available - skipping audio source checks")
    print(f"  {INFO} Install with: pip install soundfile")

if have_sf:
    tone = 0.5 * np.sin(2 * np.pi * 440 * np.arange(2000) / SAMPLE_RATE)
    stereo = np.column_stack([tone, -tone]).astype(np.float32)
    with tempfile.TemporaryDirectory() as td:
        path = os.path.join(td, "tone.wav")
        sf.write(path, stereo, SAMPLE_RATE, subtype="FLOAT")
        decoded = list(iter_sample_events(path, blocksize=512))

    check("One event per channel per frame", len(decoded) == 2 * len(tone),
          f"got {len(decoded)}")
    check("Channels alternate 0, 1",
          [e.channel for e in decoded[:4]] == [0, 1, 0, 1])
    left = [e.value for e in decoded if e.channel == 0]
    check("Left channel preserved",
          np.allclose(left, stereo[:, 0], atol=1e-6))


# =============================================================================
# Summary
# =============================================================================
print("\n" + "="*60)
if failures == 0:
    print(f"  ALL TESTS PASSED")
else:
    print(f"  {failures} TEST(S) FAILED")
print("="*60 + "\n")
sys.exit(0 if failures == 0 else 1)
