# =============================================================================
# quantizer.py - Sample Quantizer (float sample -> 11-bit two's complement)
# =============================================================================
#
# Converts one floating-point audio sample into the binary literal that is
# assigned to the DUT's `data_in` port (`reg signed [10:0]`).
#
# ENCODING RULES:
#   1. scaled = round(sample * SCALE), rounding half away from zero.
#   2. scaled outside [CODE_MIN, CODE_MAX] is handled by the overflow policy
#      ("saturate" clamps, "wrap" keeps the low CODE_WIDTH bits).
#   3. scaled >= 0 : plain binary, zero-padded to CODE_WIDTH bits.
#   4. scaled <  0 : two's complement of |scaled|:
#        invert the bits of |scaled|, sign-extend with 1s to CODE_WIDTH bits,
#        add 1, and keep the LOW CODE_WIDTH bits if the sum grew wider.
#
# Reference codes (SCALE = 1000, CODE_WIDTH = 11):
#     1.0  ->  1000 -> 01111101000
#     0.5  ->   500 -> 00111110100
#     0.0  ->     0 -> 00000000000
#    -0.5  ->  -500 -> 11000001100
#    -1.0  -> -1000 -> 10000011000

from __future__ import annotations
import math

from ATBG.SMM.constants import (
    CODE_WIDTH, CODE_MIN, CODE_MAX, CODE_MASK,
    SCALE, OVERFLOW, OVERFLOW_POLICIES,
)


def round_half_away(x: float) -> int:
    """Round to the nearest integer; exact .5 ties go away from zero."""
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def _check_policy(overflow: str) -> None:
    if overflow not in OVERFLOW_POLICIES:
        raise ValueError(
            f"overflow must be one of {OVERFLOW_POLICIES}, got {overflow!r}"
        )


def quantize(sample: float, overflow: str = OVERFLOW) -> int:
    """
    Scale and round one sample to a signed integer inside the code range.

    Args:
        sample:   Float sample, nominally in [-1.0, 1.0].
        overflow: "saturate" or "wrap" (see SMM/constants.py).

    Returns:
        Integer in [CODE_MIN, CODE_MAX].
    """
    _check_policy(overflow)
    scaled = round_half_away(sample * SCALE)

    if CODE_MIN <= scaled <= CODE_MAX:
        return scaled
    if overflow == "saturate":
        return max(CODE_MIN, min(CODE_MAX, scaled))

    # wrap: reinterpret the low CODE_WIDTH bits as a signed value
    wrapped = scaled & CODE_MASK
    if wrapped > CODE_MAX:
        wrapped -= 1 << CODE_WIDTH
    return wrapped


def negate_bits(magnitude: int, width: int = CODE_WIDTH) -> int:
    """
    Two's-complement negation of a positive magnitude, before truncation.

    Inverts the bits of `magnitude`, sign-extends the result with 1s up to
    `width` bits and adds 1.  The returned integer can be wider than `width`
    bits; the caller keeps the low `width` bits.

    Example (width 11):
        1000 = 1111101000 -> 0000010111 -> 10000010111 -> +1 = 10000011000
    """
    if magnitude <= 0:
        raise ValueError(f"magnitude must be positive, got {magnitude}")

    n_bits   = magnitude.bit_length()
    inverted = ~magnitude & ((1 << n_bits) - 1)

    # sign extend: fill bit positions n_bits .. width-1 with 1s
    if n_bits < width:
        inverted |= ((1 << width) - 1) ^ ((1 << n_bits) - 1)

    return inverted + 1


def to_twos_complement(value: int, width: int = CODE_WIDTH) -> str:
    """
    Render an already-scaled integer as a `width`-character binary string,
    MSB first.  Negative values use two's complement; values wider than
    `width` keep their low-order bits.
    """
    mask = (1 << width) - 1

    if value >= 0:
        return format(value & mask, f"0{width}b")

    bits = negate_bits(-value, width)
    if bits > mask:
        # More than `width` bits: keep the low-order bits only
        bits &= mask
    return format(bits, f"0{width}b")


def encode(sample: float, overflow: str = OVERFLOW) -> str:
    """
    Encode one float sample as an 11-bit signed two's-complement string.

    Args:
        sample:   Float sample, nominally in [-1.0, 1.0].
        overflow: "saturate" (default) or "wrap".

    Returns:
        Exactly CODE_WIDTH characters of '0'/'1'; the first is the sign bit.
    """
    return to_twos_complement(quantize(sample, overflow), CODE_WIDTH)
