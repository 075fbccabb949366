# =============================================================================
# ATBG/SDM/__init__.py - Sample Decoding Module
# =============================================================================
#
# Turns an audio file into the ordered sample-event stream consumed by the
# stimulus sequencer.  Decoding is done by soundfile (libsndfile); resampling
# to the configured rate by scipy.
#
# Sub-modules:
#   audio_source.py  - SampleEvent stream, source info, DecodeError
# =============================================================================
