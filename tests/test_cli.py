import logging

import pytest
import soundfile as sf

import wav_files_tempo
from conftest import sine_int16


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(wav_files_tempo, "setup_logger", lambda *a, **k: logging.getLogger("wav_files_tempo"))
    for name in ("WAV_TEMPO_WORKERS", "WAV_TEMPO_LOG_LEVEL", "WAV_TEMPO_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)


def test_main_converts_tree_and_exits_zero_despite_failures(tmp_path, write_wav, capsys):
    src = tmp_path / "in"
    write_wav(src / "sub" / "a.wav", sine_int16(duration=0.5))
    write_wav(src / "stereo.wav", sine_int16(duration=0.5).repeat(2).reshape(-1, 2))
    dst = tmp_path / "out"

    code = wav_files_tempo.main(["-i", str(src), "-o", str(dst), "-t", "0.5"])

    assert code == 0
    assert abs(sf.info(str(dst / "sub" / "a.wav")).frames - 16000) <= 2
    assert not (dst / "stereo.wav").exists()
    assert "2 file(s): 1 ok, 1 failed" in capsys.readouterr().out


def test_tempo_defaults_to_one(tmp_path):
    args = wav_files_tempo.build_parser().parse_args(["-i", "a", "-o", "b"])
    assert args.tempo == 1.0
    assert args.workers == 1
    assert args.ignore_case is False


def test_long_option_spellings(tmp_path):
    args = wav_files_tempo.build_parser().parse_args(["--input-dir", "a", "--output-dir", "b", "--tempo", "1.2"])
    assert (args.input_dir, args.output_dir, args.tempo) == ("a", "b", 1.2)


@pytest.mark.parametrize("bad", ["0", "-1", "nan", "fast"])
def test_bad_tempo_is_usage_error(bad):
    with pytest.raises(SystemExit) as info:
        wav_files_tempo.build_parser().parse_args(["-i", "a", "-o", "b", "-t", bad])
    assert info.value.code == 2


def test_unusable_output_dir_exits_nonzero(tmp_path, write_wav):
    src = tmp_path / "in"
    write_wav(src / "a.wav")
    blocker = tmp_path / "out"
    blocker.write_text("")

    assert wav_files_tempo.main(["-i", str(src), "-o", str(blocker)]) == 1


def test_missing_input_dir_exits_zero_with_empty_output(tmp_path, capsys):
    assert wav_files_tempo.main(["-i", str(tmp_path / "missing"), "-o", str(tmp_path / "out")]) == 0
    assert (tmp_path / "out").is_dir()
    assert "0 file(s)" in capsys.readouterr().out


def test_workers_default_comes_from_env(monkeypatch):
    monkeypatch.setenv("WAV_TEMPO_WORKERS", "3")
    args = wav_files_tempo.build_parser().parse_args(["-i", "a", "-o", "b"])
    assert args.workers == 3
