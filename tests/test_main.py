import io
import json

import pytest

from morseflow import main as cli


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MORSEFLOW_LOG", str(tmp_path / "cli.log"))
    monkeypatch.delenv("MORSEFLOW_CONFIG", raising=False)


def test_encode(capsys):
    assert cli.main(["--encode", "sos", "sos"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "... --- ... / ... --- ..."
    assert out[1].endswith("at 20:12 WPM")


def test_encode_honours_speed_option(capsys):
    cli.main(["--encode", "--speed", "20", "e"])
    assert capsys.readouterr().out.splitlines()[1] == "0.1 s at 20 WPM"


def test_invalid_speed_is_a_usage_error(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--encode", "--speed", ":", "e"])
    assert excinfo.value.code == 2
    assert "Invalid speed" in capsys.readouterr().err


def test_silent_playback_echoes_characters(capsys, tmp_path):
    assert cli.main(["--silent", "--speed", "60", "e t"]) == 0
    assert capsys.readouterr().out == "E T\n"
    assert "Playback finished" in (tmp_path / "cli.log").read_text(encoding="utf-8")


def test_text_from_stdin(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("ee\n"))
    assert cli.main(["--silent", "--speed", "60"]) == 0
    assert capsys.readouterr().out == "EE\n"


def test_config_file_option(capsys, tmp_path):
    user = tmp_path / "fast.json"
    user.write_text(json.dumps({"morse": {"speed": "40:30"}}), encoding="utf-8")
    cli.main(["--config", str(user), "--encode", "e"])
    assert capsys.readouterr().out.splitlines()[1].endswith("at 40:30 WPM")
