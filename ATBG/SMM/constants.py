# =============================================================================
# constants.py - SMM Fixed-Point and Test-Bench Constants
# =============================================================================
#
# Every width, scale and timing value below is baked into the DFT design under
# test (data_in is declared `reg signed [10:0]`).  DO NOT change these without
# changing the RTL at the same time.

# -----------------------------------------------------------------------------
# FIXED-POINT CODE  (data_in port)
# -----------------------------------------------------------------------------

CODE_WIDTH = 11                          # bits - data_in is [10:0]
CODE_MIN   = -(1 << (CODE_WIDTH - 1))    # = -1024
CODE_MAX   = (1 << (CODE_WIDTH - 1)) - 1 # =  1023
CODE_MASK  = (1 << CODE_WIDTH) - 1       # = 2047

SCALE = 1000    # sample * SCALE, then rounded - a full-scale sample is ±1000
# NOTE: SCALE is decimal, not a power of two.  ±1000 sits inside the 11-bit
#       range, so nominal [-1.0, 1.0] input can never overflow.

# Rounding rule for sample * SCALE.  Only exact .5 boundaries are affected:
#   "half_away_from_zero" :  0.5 -> 1,  -0.5 -> -1,  2.5 -> 3
ROUNDING = "half_away_from_zero"

# Overflow policy for rounded values outside [CODE_MIN, CODE_MAX]:
#   "saturate" : clamp to CODE_MIN / CODE_MAX          (default)
#   "wrap"     : keep the low CODE_WIDTH bits of the two's-complement value
OVERFLOW          = "saturate"
OVERFLOW_POLICIES = ("saturate", "wrap")


# -----------------------------------------------------------------------------
# TEST-BENCH TIMING AND NAMES
# -----------------------------------------------------------------------------

CLOCK_DELAY = 2        # delay units per clock half-period (`#2`)

TB_MODULE   = "DFT_tb"
DUT_MODULE  = "DFT"
DUT_PORTS   = ("clk", "rst", "data_in", "transfer_in", "p", "data_out", "transfer_out")
DATA_SIGNAL = "data_in"
CLOCK_SIGNAL = "clk"

# Control inputs asserted during reset (literal Verilog values).
# p is declared [3:0] but driven with a 3-bit literal - this matches the DUT.
TRANSFER_IN_INIT = "1'b1"
P_INIT           = "3'b100"

STIMULUS_HEADER = "//This is an auto-generated file"


# -----------------------------------------------------------------------------
# DECODER CONFIGURATION  (audio source → sample events)
# -----------------------------------------------------------------------------

SAMPLE_RATE     = 44_100   # Hz - decode rate handed to the audio source
STEREO          = True     # decode as 2 channels (mono sources are duplicated)
BLOCK_SIZE      = 4096     # frames per streamed read
PRIMARY_CHANNEL = 0        # only this channel reaches the quantizer ("left")


# -----------------------------------------------------------------------------
# DEFAULT PATHS
# -----------------------------------------------------------------------------

DEFAULT_AUDIO_FILE = "./testC.mp3"
OUTPUT_FILE        = "./DFT_tb.v"
