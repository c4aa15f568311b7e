"""Tests for the command line exporter."""

import json

import pytest

from card_reader.cli import main
from png_factory import build_png, encode_card, text_chunk


@pytest.fixture
def card_file(tmp_path):
    path = tmp_path / "aria.png"
    path.write_bytes(build_png(text_chunk("chara", encode_card({"name": "Aria", "description": "A knight."}))))
    return path


def test_export_writes_both_files(card_file, tmp_path):
    out_dir = tmp_path / "exports"
    assert main(["export", str(card_file), "--output-dir", str(out_dir)]) == 0

    json_files = list(out_dir.glob("Aria_*.json"))
    txt_files = list(out_dir.glob("Aria_*_read.txt"))
    assert len(json_files) == 1 and len(txt_files) == 1
    assert json.loads(json_files[0].read_text(encoding="utf-8"))["name"] == "Aria"
    assert txt_files[0].read_text(encoding="utf-8").startswith("Name: Aria\n")


def test_show_prints_document(card_file, capsys):
    main(["show", str(card_file)])
    assert "[Description]\nA knight." in capsys.readouterr().out


def test_show_json(card_file, capsys):
    main(["show", "--json", str(card_file)])
    assert json.loads(capsys.readouterr().out) == {"name": "Aria", "description": "A knight."}


def test_not_a_card_exits(tmp_path):
    path = tmp_path / "plain.png"
    path.write_bytes(build_png())
    with pytest.raises(SystemExit) as exc_info:
        main(["show", str(path)])
    assert "No character card data" in str(exc_info.value)


def test_missing_file_exits(tmp_path):
    with pytest.raises(SystemExit):
        main(["show", str(tmp_path / "missing.png")])
