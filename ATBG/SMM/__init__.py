# =============================================================================
# ATBG/SMM/__init__.py - Stimulus Mapping Module
# =============================================================================
#
# The SMM is the single source of truth for the DFT test-bench contract:
# fixed-point width and scale, rounding and overflow policy, clock timing,
# port names, decoder configuration and default paths.
#
# All other ATBG sub-modules (SGM, SDM, SVM) import exclusively from here.
# Never define hardware constants outside this module.
#
# Sub-modules:
#   constants.py  - all widths, timing constants and names
# =============================================================================
