import json
from pathlib import Path

import pytest

from data_intake import main as cli


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    # basicConfig(force=True) would replace pytest's capture handlers
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)


def test_prints_descriptor_json(staging_dir, capsys):
    code = cli.main(["data:,Test", "--temp-dir", str(staging_dir)])

    assert code == 0
    record = json.loads(capsys.readouterr().out)
    assert record["mime_type"] == "text/plain"
    assert record["size"] == 4
    # Staged files are kept by default on the command line
    assert Path(record["path"]).exists()


def test_auto_delete_flag_removes_staged_file(staging_dir, capsys):
    cli.main(["data:,Test", "--temp-dir", str(staging_dir), "--auto-delete"])

    record = json.loads(capsys.readouterr().out)
    assert not Path(record["path"]).exists()
    assert list(staging_dir.iterdir()) == []


def test_prints_data_uri(staging_dir, capsys):
    cli.main(["SGk=", "--base64", "--temp-dir", str(staging_dir), "--output", "uri"])
    assert capsys.readouterr().out.strip() == "data:text/plain;base64,SGk="


def test_batch_continues_after_failure(staging_dir, png_file, capsys):
    code = cli.main(["not-a-valid-uri-or-path", str(png_file), "--temp-dir", str(staging_dir)])

    assert code == 1
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])["extension"] == "png"


def test_invalid_algorithm_exits_nonzero(staging_dir):
    assert cli.main(["data:,Test", "--temp-dir", str(staging_dir), "--algo", "nope"]) == 1


def test_name_requires_single_input():
    with pytest.raises(SystemExit):
        cli.parse_args(["a", "b", "--name", "x"])
