# =============================================================================
# sequencer.py - Stimulus Sequencer
# =============================================================================
#
# Folds an ordered stream of (value, channel) sample events into a Verilog
# stimulus document for the DFT test bench.
#
# DOCUMENT LAYOUT:
#   PREAMBLE    module header, DUT instance, one reset clock cycle
#   BODY        3 lines per accepted sample:
#                   data_in = 11'sb<code>;
#                   clk = 1'b1; #2;
#                   clk = 1'b0; #2;
#   POSTAMBLE   $stop, end of initial block and module
#
# ORDERING GUARANTEE:
#   Body lines appear in exactly the order samples arrive.  Events on any
#   channel other than PRIMARY_CHANNEL are counted and dropped.  There is no
#   buffering, reordering or batching; each accepted sample is encoded once,
#   synchronously, as it is pulled from the stream.

from __future__ import annotations
from typing import Iterable, NamedTuple

from ATBG.SMM.constants import (
    CODE_WIDTH, CLOCK_DELAY, PRIMARY_CHANNEL,
    TB_MODULE, DUT_MODULE, DUT_PORTS,
    DATA_SIGNAL, CLOCK_SIGNAL,
    TRANSFER_IN_INIT, P_INIT, STIMULUS_HEADER,
    OVERFLOW,
)
from .quantizer import encode


_MODULE_INDENT    = " " * 4
_STATEMENT_INDENT = " " * 8


def _clock(level: int) -> str:
    return f"{_STATEMENT_INDENT}{CLOCK_SIGNAL} = 1'b{level}; #{CLOCK_DELAY};"


PREAMBLE: tuple[str, ...] = (
    STIMULUS_HEADER,
    f"module {TB_MODULE} ();",
    f"{_MODULE_INDENT}reg {CLOCK_SIGNAL}, rst;",
    f"{_MODULE_INDENT}reg signed [{CODE_WIDTH - 1}:0] {DATA_SIGNAL};",
    f"{_MODULE_INDENT}reg transfer_in;",
    f"{_MODULE_INDENT}reg signed [3:0] p;",
    f"{_MODULE_INDENT}wire [6:0] data_out;",
    f"{_MODULE_INDENT}wire transfer_out;",
    "",
    "",
    f"{_MODULE_INDENT}{DUT_MODULE} DUT({', '.join(DUT_PORTS)});",
    "",
    f"{_MODULE_INDENT}initial begin",
    f"{_STATEMENT_INDENT}rst = 1'b1;",
    f"{_STATEMENT_INDENT}transfer_in = {TRANSFER_IN_INIT};",
    f"{_STATEMENT_INDENT}p = {P_INIT};",
    _clock(0),
    _clock(1),
    f"{_STATEMENT_INDENT}rst = 1'b0;",
    _clock(0),
)

POSTAMBLE: tuple[str, ...] = (
    "",
    f"{_STATEMENT_INDENT}$stop;",
    f"{_MODULE_INDENT}end",
    "endmodule",
)

CLOCK_HIGH_LINE = _clock(1)
CLOCK_LOW_LINE  = _clock(0)
LINES_PER_SAMPLE = 3


def assignment_line(code: str) -> str:
    """The `data_in = 11'sb<code>;` statement for one encoded sample."""
    return f"{_STATEMENT_INDENT}{DATA_SIGNAL} = {CODE_WIDTH}'sb{code};"


class StimulusResult(NamedTuple):
    document: str   # complete stimulus text, '\n' line endings
    accepted: int   # samples encoded (PRIMARY_CHANNEL events)
    observed: int   # events seen on all channels


class StimulusBuilder:
    """
    Append-only stimulus buffer.  Owns its lines exclusively; the document is
    produced once by finish() and the builder is closed afterwards.

    Usage:
        builder = StimulusBuilder()
        builder.add_sample(0.5)
        builder.add_sample(-0.5)
        text = builder.finish()
    """

    def __init__(self, overflow: str = OVERFLOW) -> None:
        self.overflow = overflow
        self._lines: list[str] = list(PREAMBLE)
        self._accepted = 0
        self._document: str | None = None

    # ── Buffer state ─────────────────────────────────────────────────────────

    @property
    def accepted(self) -> int:
        """Number of samples appended so far."""
        return self._accepted

    @property
    def line_count(self) -> int:
        """Lines in the buffer, postamble included once finished."""
        return len(self._lines)

    @property
    def finished(self) -> bool:
        return self._document is not None

    # ── Appending ────────────────────────────────────────────────────────────

    def add_code(self, code: str) -> None:
        """Append the value/clock-high/clock-low triplet for one encoded sample."""
        if self.finished:
            raise RuntimeError("stimulus already finished; builder is closed")
        if len(code) != CODE_WIDTH or set(code) - {"0", "1"}:
            raise ValueError(
                f"code must be {CODE_WIDTH} characters of '0'/'1', got {code!r}"
            )
        self._lines.append(assignment_line(code))
        self._lines.append(CLOCK_HIGH_LINE)
        self._lines.append(CLOCK_LOW_LINE)
        self._accepted += 1

    def add_sample(self, value: float) -> str:
        """Encode one sample, append its triplet and return the code."""
        code = encode(value, self.overflow)
        self.add_code(code)
        return code

    # ── Finalising ───────────────────────────────────────────────────────────

    def finish(self) -> str:
        """
        Append the postamble and return the document.  Calling finish() again
        returns the same text; no further samples can be added.
        """
        if self._document is None:
            self._lines.extend(POSTAMBLE)
            self._document = "\n".join(self._lines) + "\n"
        return self._document


def generate(
    samples: Iterable[tuple[float, int]],
    channel: int = PRIMARY_CHANNEL,
    overflow: str = OVERFLOW,
) -> StimulusResult:
    """
    Build a complete stimulus document from an ordered sample-event stream.

    Args:
        samples:  Iterable of (value, channel) pairs, consumed exactly once.
                  SampleEvent tuples from ATBG.SDM.audio_source fit directly.
        channel:  The channel that is encoded; all others are dropped.
        overflow: Overflow policy handed to the quantizer.

    Returns:
        StimulusResult(document, accepted, observed)

    Exceptions raised by the stream (e.g. DecodeError) propagate unchanged;
    no partial document is returned.
    """
    builder  = StimulusBuilder(overflow=overflow)
    observed = 0

    for value, ch in samples:
        observed += 1
        if ch == channel:
            builder.add_sample(value)

    return StimulusResult(builder.finish(), builder.accepted, observed)
