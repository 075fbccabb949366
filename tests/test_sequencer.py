import pytest

from ATBG.SGM.sequencer import (
    PREAMBLE, POSTAMBLE, CLOCK_HIGH_LINE, CLOCK_LOW_LINE, LINES_PER_SAMPLE,
    StimulusBuilder, assignment_line, generate,
)
from ATBG.SDM.audio_source import SampleEvent


EXPECTED_EMPTY = """\
//This is an auto-generated file
module DFT_tb ();
    reg clk, rst;
    reg signed [10:0] data_in;
    reg transfer_in;
    reg signed [3:0] p;
    wire [6:0] data_out;
    wire transfer_out;


    DFT DUT(clk, rst, data_in, transfer_in, p, data_out, transfer_out);

    initial begin
        rst = 1'b1;
        transfer_in = 1'b1;
        p = 3'b100;
        clk = 1'b0; #2;
        clk = 1'b1; #2;
        rst = 1'b0;
        clk = 1'b0; #2;

        $stop;
    end
endmodule
"""


def body_of(document):
    lines = document.split("\n")[:-1]
    return lines[len(PREAMBLE):len(lines) - len(POSTAMBLE)]


def test_template_literal():
    assert generate([]).document == EXPECTED_EMPTY


def test_sample_triplet_format():
    assert assignment_line("01111101000") == "        data_in = 11'sb01111101000;"
    assert CLOCK_HIGH_LINE == "        clk = 1'b1; #2;"
    assert CLOCK_LOW_LINE == "        clk = 1'b0; #2;"


def test_scenario_half_minus_half_zero():
    result = generate([(0.5, 0), (-0.5, 0), (0.0, 0)])
    assert body_of(result.document) == [
        "        data_in = 11'sb00111110100;", CLOCK_HIGH_LINE, CLOCK_LOW_LINE,
        "        data_in = 11'sb11000001100;", CLOCK_HIGH_LINE, CLOCK_LOW_LINE,
        "        data_in = 11'sb00000000000;", CLOCK_HIGH_LINE, CLOCK_LOW_LINE,
    ]
    assert result.document.startswith("\n".join(PREAMBLE) + "\n")
    assert result.document.endswith("\n".join(POSTAMBLE) + "\n")
    assert result.accepted == 3


def test_line_count_invariant():
    samples = [(i / 100 - 0.5, 0) for i in range(100)]
    result = generate(samples)
    lines = result.document.split("\n")[:-1]
    assert len(lines) == len(PREAMBLE) + LINES_PER_SAMPLE * 100 + len(POSTAMBLE)

    body = body_of(result.document)
    assert sum(1 for l in body if "data_in = 11'sb" in l) == 100
    assert body.count(CLOCK_HIGH_LINE) == 100
    assert body.count(CLOCK_LOW_LINE) == 100


def test_other_channels_are_dropped():
    left = [0.1, -0.2, 0.3, -0.4]
    interleaved = []
    for v in left:
        interleaved.append(SampleEvent(v, 0))
        interleaved.append(SampleEvent(0.9, 1))

    mixed = generate(iter(interleaved))
    only_left = generate((v, 0) for v in left)

    assert mixed.document == only_left.document
    assert mixed.accepted == 4
    assert mixed.observed == 8


def test_alternate_primary_channel():
    result = generate([(0.1, 0), (0.2, 1)], channel=1)
    assert body_of(result.document)[0] == assignment_line("00011001000")
    assert result.accepted == 1


def test_generate_is_idempotent():
    samples = [((i * 37 % 200) / 100 - 1.0, i % 2) for i in range(400)]
    assert generate(samples).document == generate(samples).document


def test_single_pass_over_generator():
    pulled = []

    def stream():
        for v in (0.25, -0.25):
            pulled.append(v)
            yield (v, 0)

    result = generate(stream())
    assert pulled == [0.25, -0.25]
    assert result.accepted == 2


def test_stream_errors_propagate():
    def broken():
        yield (0.1, 0)
        raise RuntimeError("decoder died")

    with pytest.raises(RuntimeError, match="decoder died"):
        generate(broken())


def test_builder_line_count_and_close():
    builder = StimulusBuilder()
    assert builder.line_count == len(PREAMBLE)
    assert builder.add_sample(-1.0) == "10000011000"
    assert builder.accepted == 1
    assert builder.line_count == len(PREAMBLE) + 3

    text = builder.finish()
    assert builder.finished
    assert builder.finish() is text
    assert builder.line_count == len(PREAMBLE) + 3 + len(POSTAMBLE)

    with pytest.raises(RuntimeError):
        builder.add_sample(0.0)


def test_builder_rejects_bad_codes():
    builder = StimulusBuilder()
    with pytest.raises(ValueError):
        builder.add_code("0101")
    with pytest.raises(ValueError):
        builder.add_code("0000000000x")
    assert builder.accepted == 0


def test_builder_overflow_policy():
    saturating = StimulusBuilder()
    wrapping = StimulusBuilder(overflow="wrap")
    assert saturating.add_sample(1.5) == "01111111111"
    assert wrapping.add_sample(1.5) == "10111011100"
