# =============================================================================
# ATBG/SVM/__init__.py - Stimulus Verification Module
# =============================================================================
#
# Tools for checking that a generated stimulus document matches the DFT
# test-bench layout and that its codes decode back to the expected values.
#
# Sub-modules:
#   stimulus_check.py  - parses DFT_tb.v back into codes (CLI + importable)
#   validate.py        - self-validation suite for the SGM stack
# =============================================================================
