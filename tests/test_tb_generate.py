import numpy as np
import pytest
import soundfile as sf

from ATBG.SMM.constants import OUTPUT_FILE
from ATBG.SDM.audio_source import DecodeError, SampleEvent
from ATBG.SGM import tb_generate
from ATBG.SGM.sequencer import generate
from ATBG.SGM.tb_generate import main, run_generate
from ATBG.SVM.stimulus_check import check_document


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write_wav(path, data, sr=44_100):
    sf.write(str(path), np.asarray(data, dtype=np.float32), sr, subtype="FLOAT")
    return str(path)


def test_writes_left_channel_stimulus(workdir, capsys):
    left = [0.5, -0.5, 0.0, 0.25]
    right = [0.9, 0.9, 0.9, 0.9]
    audio = write_wav(workdir / "clip.wav", np.column_stack([left, right]))

    with pytest.raises(SystemExit) as exc:
        main([audio])
    assert exc.value.code == 0

    text = (workdir / OUTPUT_FILE).read_text()
    assert text == generate((v, 0) for v in left).document

    report = check_document(text)
    assert report.ok
    assert report.values == [500, -500, 0, 250]
    assert "Done converting 4 data" in capsys.readouterr().out


def test_default_audio_path_missing(workdir):
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 1
    assert not (workdir / OUTPUT_FILE).exists()


def test_decode_failure_writes_nothing(workdir, capsys):
    bad = workdir / "broken.wav"
    bad.write_bytes(b"not a riff header" * 16)
    assert run_generate(str(bad)) is False
    assert not (workdir / OUTPUT_FILE).exists()
    assert "[!!]" in capsys.readouterr().out


def test_mid_stream_decode_failure_writes_nothing(workdir, monkeypatch):
    audio = write_wav(workdir / "clip.wav", [0.1, 0.2])

    def failing_stream(*args, **kwargs):
        yield SampleEvent(0.1, 0)
        raise DecodeError("stream cut short")

    monkeypatch.setattr(tb_generate, "iter_sample_events", failing_stream)
    assert run_generate(audio) is False
    assert not (workdir / OUTPUT_FILE).exists()


def test_no_primary_channel_samples_writes_nothing(workdir, monkeypatch, capsys):
    audio = write_wav(workdir / "clip.wav", [0.1, 0.2])
    monkeypatch.setattr(
        tb_generate, "iter_sample_events",
        lambda *args, **kwargs: iter([SampleEvent(0.3, 1), SampleEvent(0.4, 1)]),
    )
    assert run_generate(audio) is False
    assert not (workdir / OUTPUT_FILE).exists()
    assert "2 events decoded" in capsys.readouterr().out


def test_write_failure_is_reported(workdir):
    audio = write_wav(workdir / "clip.wav", [0.1, 0.2])
    out = workdir / "no_such_dir" / "DFT_tb.v"
    assert run_generate(audio, str(out)) is False


def test_repeat_runs_are_byte_identical(workdir):
    tone = 0.8 * np.sin(2 * np.pi * 440 * np.arange(500) / 44_100)
    audio = write_wav(workdir / "tone.wav", tone)

    assert run_generate(audio, "first.v")
    assert run_generate(audio, "second.v")
    assert (workdir / "first.v").read_bytes() == (workdir / "second.v").read_bytes()
