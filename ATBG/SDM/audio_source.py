# =============================================================================
# audio_source.py - Audio File -> Sample Event Stream
# =============================================================================
#
# Decodes an audio file with soundfile (libsndfile) and yields one
# SampleEvent(value, channel) per channel per sample period, in order:
#
#     frame 0: (L0, 0), (R0, 1)
#     frame 1: (L1, 0), (R1, 1)
#     ...
#
# Values are float32 samples in [-1.0, 1.0].
#
# CHANNEL LAYOUT (stereo=True, the default):
#   mono source      -> the single channel is duplicated to channels 0 and 1
#   stereo source    -> unchanged
#   >2 channels      -> first two channels only
# stereo=False averages every source channel into channel 0.
#
# SAMPLE RATE:
#   If the file's native rate equals `sample_rate` the file is streamed in
#   blocks of BLOCK_SIZE frames.  Otherwise the whole file is read and
#   resampled with scipy.signal.resample_poly before any event is emitted.

from __future__ import annotations
import math
from typing import Iterator, NamedTuple

import numpy as np
import soundfile as sf
from scipy.signal import resample_poly

from ATBG.SMM.constants import SAMPLE_RATE, STEREO, BLOCK_SIZE


class SampleEvent(NamedTuple):
    value:   float   # sample in [-1.0, 1.0]
    channel: int     # 0 = left / primary


class SourceInfo(NamedTuple):
    path:        str
    sample_rate: int
    channels:    int
    frames:      int
    duration:    float   # seconds
    format:      str     # e.g. "WAV / PCM_16"


class DecodeError(RuntimeError):
    """The audio source could not be opened or decoded."""


def describe_source(path: str) -> SourceInfo:
    """Read the container header without decoding any audio."""
    try:
        info = sf.info(path)
    except (RuntimeError, OSError) as exc:
        raise DecodeError(f"cannot open {path!r}: {exc}") from exc

    duration = info.frames / info.samplerate if info.samplerate else 0.0
    return SourceInfo(
        path=path,
        sample_rate=info.samplerate,
        channels=info.channels,
        frames=info.frames,
        duration=duration,
        format=f"{info.format} / {info.subtype}",
    )


def _layout(block: np.ndarray, stereo: bool) -> np.ndarray:
    """Map a (frames, source_channels) block to the decoded channel layout."""
    if not stereo:
        return block.mean(axis=1, keepdims=True)
    if block.shape[1] == 1:
        return np.repeat(block, 2, axis=1)
    return block[:, :2]


def _resample(data: np.ndarray, source_rate: int, target_rate: int) -> np.ndarray:
    g = math.gcd(source_rate, target_rate)
    out = resample_poly(data, target_rate // g, source_rate // g, axis=0)
    # Polyphase filtering can overshoot full scale on transients
    return np.clip(out, -1.0, 1.0).astype(np.float32)


def iter_blocks(
    path: str,
    stereo: bool = STEREO,
    sample_rate: int = SAMPLE_RATE,
    blocksize: int = BLOCK_SIZE,
) -> Iterator[np.ndarray]:
    """
    Yield decoded (frames, channels) float32 blocks in file order.

    Raises:
        DecodeError on any open/read failure, including mid-stream failures.
        ValueError  on a non-positive sample_rate or blocksize.
    """
    if sample_rate <= 0:
        raise ValueError(f"sample_rate must be positive, got {sample_rate}")
    if blocksize <= 0:
        raise ValueError(f"blocksize must be positive, got {blocksize}")

    info = describe_source(path)

    try:
        if info.sample_rate == sample_rate:
            for block in sf.blocks(path, blocksize=blocksize,
                                   dtype="float32", always_2d=True):
                yield _layout(block, stereo)
        else:
            data, sr = sf.read(path, dtype="float32", always_2d=True)
            yield _layout(_resample(data, sr, sample_rate), stereo)
    except (RuntimeError, OSError) as exc:
        raise DecodeError(f"decoding {path!r} failed: {exc}") from exc


def iter_sample_events(
    path: str,
    stereo: bool = STEREO,
    sample_rate: int = SAMPLE_RATE,
    blocksize: int = BLOCK_SIZE,
) -> Iterator[SampleEvent]:
    """
    Lazy, single-pass stream of SampleEvent for every channel of every frame.

    Args:
        path:        Audio file path (anything libsndfile can read).
        stereo:      True = 2 channels, False = mono downmix on channel 0.
        sample_rate: Decode rate in Hz; the file is resampled if it differs.
        blocksize:   Frames per streamed read.
    """
    for block in iter_blocks(path, stereo, sample_rate, blocksize):
        for frame in block.tolist():
            for channel, value in enumerate(frame):
                yield SampleEvent(value, channel)
