import json
from pathlib import Path

from savestate.cli import main
from savestate.codec import write_shape
from savestate.shapes import Map, Table


def test_show_prints_decoded_payload(tmp_path: Path, capsys):
    path = tmp_path / "OptionsDictionaryData.json"
    write_shape(path, Map({"volume": "5"}))
    assert main(["show", str(path)]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out == {"kind": "map", "data": {"entries": {"volume": "5"}}}


def test_show_with_wrong_kind_fails(tmp_path: Path, capsys):
    path = tmp_path / "xData.json"
    write_shape(path, Map({}))
    assert main(["show", str(path), "--kind", "table"]) == 1
    assert "ERROR" in capsys.readouterr().out


def test_check_reports_each_file(tmp_path: Path, capsys):
    good = tmp_path / "goodData.json"
    write_shape(good, Table(fields={"hp": "1"}, rows={"a": {"hp": "1"}}))
    bad = tmp_path / "badData.json"
    bad.write_text("not json")
    missing = tmp_path / "missingData.json"

    assert main(["check", str(good)]) == 0
    assert main(["check", str(good), str(bad), str(missing)]) == 1
    out = capsys.readouterr().out
    assert f"OK: {good} (table)" in out
    assert f"CORRUPT: {bad}" in out
    assert f"ERROR: {missing}" in out
