import numpy as np
import pytest
import soundfile as sf

from ATBG.SDM.audio_source import (
    DecodeError, SampleEvent, describe_source, iter_blocks, iter_sample_events,
)


def write_wav(path, data, sr=44_100):
    sf.write(str(path), np.asarray(data, dtype=np.float32), sr, subtype="FLOAT")
    return str(path)


@pytest.fixture
def stereo_wav(tmp_path):
    left = np.linspace(-0.5, 0.5, 1000)
    right = np.full(1000, 0.25)
    return write_wav(tmp_path / "stereo.wav", np.column_stack([left, right]))


def test_describe_source(stereo_wav):
    info = describe_source(stereo_wav)
    assert info.sample_rate == 44_100
    assert info.channels == 2
    assert info.frames == 1000
    assert info.duration == pytest.approx(1000 / 44_100)
    assert info.format.startswith("WAV")


def test_events_interleave_channels_per_frame(stereo_wav):
    events = list(iter_sample_events(stereo_wav, blocksize=128))
    assert len(events) == 2000
    assert all(isinstance(e, SampleEvent) for e in events[:4])
    assert [e.channel for e in events[:6]] == [0, 1, 0, 1, 0, 1]

    left = np.array([e.value for e in events if e.channel == 0])
    right = np.array([e.value for e in events if e.channel == 1])
    assert np.allclose(left, np.linspace(-0.5, 0.5, 1000), atol=1e-6)
    assert np.allclose(right, 0.25)


def test_block_size_does_not_change_stream(stereo_wav):
    small = list(iter_sample_events(stereo_wav, blocksize=7))
    large = list(iter_sample_events(stereo_wav, blocksize=4096))
    assert small == large


def test_mono_source_is_duplicated_in_stereo_mode(tmp_path):
    path = write_wav(tmp_path / "mono.wav", np.full(10, 0.125))
    events = list(iter_sample_events(path))
    assert len(events) == 20
    assert events[:2] == [SampleEvent(0.125, 0), SampleEvent(0.125, 1)]


def test_mono_mode_averages_channels(stereo_wav):
    events = list(iter_sample_events(stereo_wav, stereo=False))
    assert len(events) == 1000
    assert {e.channel for e in events} == {0}
    assert events[0].value == pytest.approx((-0.5 + 0.25) / 2, abs=1e-6)


def test_extra_channels_are_dropped(tmp_path):
    data = np.column_stack([np.full(5, 0.1), np.full(5, 0.2), np.full(5, 0.3)])
    path = write_wav(tmp_path / "three.wav", data)
    events = list(iter_sample_events(path))
    assert len(events) == 10
    assert {e.channel for e in events} == {0, 1}


def test_resampling_to_configured_rate(tmp_path):
    tone = 0.5 * np.sin(2 * np.pi * 100 * np.arange(22_050) / 22_050)
    path = write_wav(tmp_path / "half_rate.wav", tone, sr=22_050)

    blocks = list(iter_blocks(path, sample_rate=44_100))
    assert len(blocks) == 1
    assert blocks[0].shape == (44_100, 2)
    assert np.max(np.abs(blocks[0])) <= 1.0


def test_missing_file_raises_decode_error(tmp_path):
    with pytest.raises(DecodeError):
        describe_source(str(tmp_path / "missing.wav"))
    with pytest.raises(DecodeError):
        list(iter_sample_events(str(tmp_path / "missing.wav")))


def test_garbage_file_raises_decode_error(tmp_path):
    path = tmp_path / "noise.wav"
    path.write_bytes(b"definitely not audio" * 10)
    with pytest.raises(DecodeError):
        list(iter_sample_events(str(path)))


def test_bad_configuration(stereo_wav):
    with pytest.raises(ValueError):
        list(iter_sample_events(stereo_wav, sample_rate=0))
    with pytest.raises(ValueError):
        list(iter_sample_events(stereo_wav, blocksize=0))
