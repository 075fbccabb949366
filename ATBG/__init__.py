# =============================================================================
# Audio Test-Bench Generator (ATBG)
# =============================================================================
#
# Turns real audio into deterministic stimulus for the DFT hardware model.
#
# RESPONSIBLE for:
#   - Sample decoding
#       Any libsndfile-readable file becomes an ordered stream of
#       (value, channel) events at a fixed decode rate.
#   - Fixed-point encoding
#       Each left-channel sample is scaled by 1000, rounded half away from
#       zero and written as an 11-bit signed two's-complement literal.
#   - Stimulus sequencing
#       One assignment plus one full clock pulse per sample, between a fixed
#       reset preamble and a $stop postamble.  Identical input gives a
#       byte-identical DFT_tb.v.
#
# NOT responsible for:
#   - Checking that the DUT produces correct results
#   - Any test-bench template other than DFT_tb
#   - Channels other than channel 0
#
# ── DATA FLOW ─────────────────────────────────────────────────────────────────
#   SDM  audio file   → SampleEvent(value, channel) stream
#   SGM  quantizer    → "01111101000"
#   SGM  sequencer    → DFT_tb.v text
#   SVM  checker      → codes/values recovered from DFT_tb.v
#
# ── Module layout ─────────────────────────────────────────────────────────────
#   SMM/constants.py        widths, scale, policies, timing, names, paths
#   SDM/audio_source.py     soundfile decoding, channel layout, resampling
#   SGM/quantizer.py        float sample → 11-bit two's-complement string
#   SGM/sequencer.py        StimulusBuilder, generate()
#   SGM/tb_generate.py      command-line entry point
#   SVM/stimulus_check.py   document parser and checker (CLI + importable)
#   SVM/validate.py         self-validation suite
# =============================================================================
