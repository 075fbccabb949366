# =============================================================================
# SGM - Stimulus Generation Module
# Subfolder of ATBG (Audio Test-Bench Generator)
# =============================================================================
#
# Generates the deterministic DFT_tb stimulus document from a sample stream,
# using the fixed-point and timing constants in ATBG/SMM/constants.py.
#
# Modules:
#   quantizer.py    - float sample → 11-bit two's-complement string
#   sequencer.py    - folds samples into preamble / triplets / postamble
#   tb_generate.py  - CLI: audio file → ./DFT_tb.v
#
# Decoding lives in ATBG/SDM/
# Verification tools live in ATBG/SVM/
# =============================================================================
