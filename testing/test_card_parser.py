"""
End-to-end tests for the card reading pipeline.

Tests cover:
- Concrete V2, V3 and corrupted-payload scenarios
- Pipeline stage tracking on success and failure
- Raw JSON export shape and export file names
- Determinism
"""

import json
from datetime import datetime

import pytest

from card_reader.cards import (
    CharacterCardExporter,
    CharacterCardParser,
    DecodeError,
    FormatError,
    NotFoundError,
    PipelineStage,
    read_card,
)
from png_factory import build_png, encode_card, pillow_card, text_chunk


class TestScenarios:
    """Reference scenarios."""

    def test_v2_card(self):
        data = build_png(text_chunk("chara", encode_card({"name": "Aria", "description": "A knight."})))
        bundle = read_card(data)

        card = bundle.card.data
        assert card.name == "Aria"
        assert card.description == "A knight."
        assert card.creator is None and card.tags is None and card.first_message is None
        assert bundle.document.labels == ["Name", "Description"]

    def test_v3_preferred_over_v2(self):
        data = build_png(
            text_chunk("chara", encode_card({"name": "Old"})),
            text_chunk("ccv3", encode_card({"data": {"name": "Rin", "tags": ["a", "b"]}})),
        )
        bundle = read_card(data)

        assert bundle.card.format.value == "chara_card_v3"
        assert bundle.card_name == "Rin"
        assert "Tags: a, b\n" in bundle.readable_text

    def test_invalid_base64(self):
        data = build_png(text_chunk("chara", "%%% not base64 %%%"))
        parser = CharacterCardParser()
        with pytest.raises(DecodeError):
            parser.parse(data)
        assert parser.stage is PipelineStage.FAILED

    def test_pillow_written_card(self):
        bundle = read_card(pillow_card(chara=encode_card({"name": "Aria", "creator": "quill"})))
        assert bundle.card_name == "Aria"
        assert "Created By: quill" in bundle.readable_text


class TestStages:
    """Stage tracking."""

    def test_success_ends_assembled(self):
        parser = CharacterCardParser()
        parser.parse(build_png(text_chunk("chara", encode_card({"name": "Aria"}))))
        assert parser.stage is PipelineStage.ASSEMBLED
        assert parser.error is None

    def test_not_png(self):
        parser = CharacterCardParser()
        with pytest.raises(FormatError) as exc_info:
            parser.parse(b"definitely not a png")
        assert exc_info.value.stage is PipelineStage.SCANNING
        assert parser.stage is PipelineStage.FAILED
        assert parser.error is exc_info.value

    def test_no_card(self):
        parser = CharacterCardParser()
        with pytest.raises(NotFoundError) as exc_info:
            parser.parse(build_png(text_chunk("Comment", "just a picture")))
        assert exc_info.value.stage is PipelineStage.LOCATED

    def test_decode_error_stage(self):
        with pytest.raises(DecodeError) as exc_info:
            read_card(build_png(text_chunk("ccv3", encode_card({"no": "data"}))))
        assert exc_info.value.stage is PipelineStage.DECODED

    def test_truncated_png(self):
        data = build_png(text_chunk("chara", encode_card({"name": "Aria"})))
        with pytest.raises(FormatError):
            read_card(data[:40])

    def test_bad_crc_only_fails_when_verifying(self):
        good = text_chunk("chara", encode_card({"name": "Aria"}))
        corrupted = good[:-4] + b"\x00\x00\x00\x00"
        assert read_card(build_png(corrupted)).card_name == "Aria"
        with pytest.raises(FormatError):
            read_card(build_png(corrupted), verify_crc=True)


class TestRawExport:
    """The raw export keeps the card's original shape."""

    def test_v2_raw_is_flat(self):
        source = {
            "name": "Aria",
            "first_mes": "Hail!",
            "mes_example": "<START>",
            "character_book": None,
        }
        bundle = read_card(build_png(text_chunk("chara", encode_card(source))))
        assert json.loads(bundle.raw_json) == source

    def test_v3_raw_keeps_envelope(self):
        source = {
            "spec": "chara_card_v3",
            "spec_version": "3.0",
            "data": {
                "name": "Rin",
                "tags": ["a", "b"],
                "first_mes": "Hi.",
                "extensions": {"talkativeness": "0.5"},
            },
        }
        bundle = read_card(build_png(text_chunk("ccv3", encode_card(source))))
        raw = json.loads(bundle.raw_json)
        assert raw == source
        assert list(raw) == ["spec", "spec_version", "data"]

    def test_v2_first_message_key_kept_verbatim(self):
        source = {"name": "A", "first_message": "y"}
        bundle = read_card(build_png(text_chunk("chara", encode_card(source))))
        assert json.loads(bundle.raw_json) == source
        assert "First Message" not in bundle.document.labels

    def test_v3_nested_spec_survives_envelope_spec(self):
        source = {
            "spec": "chara_card_v3",
            "spec_version": "3.0",
            "data": {"name": "R", "spec": "chara_card_v2"},
        }
        bundle = read_card(build_png(text_chunk("ccv3", encode_card(source))))
        assert json.loads(bundle.raw_json) == source
        assert "Spec: chara_card_v3 (3.0)\n" in bundle.readable_text

    def test_v3_nested_only_spec_stays_nested(self):
        source = {"data": {"name": "R", "spec": "chara_card_v3", "spec_version": "3.0"}}
        bundle = read_card(build_png(text_chunk("ccv3", encode_card(source))))
        raw = json.loads(bundle.raw_json)
        assert raw == source
        assert list(raw) == ["data"]

    def test_raw_json_keeps_unicode(self):
        bundle = read_card(build_png(text_chunk("chara", encode_card({"name": "凛"}))))
        assert '"凛"' in bundle.raw_json

    def test_raw_json_pretty_printed(self):
        bundle = read_card(build_png(text_chunk("chara", encode_card({"name": "Aria"}))))
        assert bundle.raw_json == '{\n  "name": "Aria"\n}'


class TestDeterminism:
    """Repeated reads give identical results."""

    def test_same_input_same_output(self):
        data = build_png(text_chunk("ccv3", encode_card({
            "spec": "chara_card_v3",
            "data": {"name": "Rin", "description": "Quiet.", "tags": ["x"]},
        })))
        first, second = read_card(data), read_card(data)
        assert first.raw_json == second.raw_json
        assert first.readable_text == second.readable_text
        assert first.card == second.card


class TestExportFilenames:
    """Delivery file names."""

    def test_names_include_timestamp(self):
        bundle = read_card(build_png(text_chunk("chara", encode_card({"name": "Aria"}))))
        names = CharacterCardExporter.export_filenames(bundle, now=datetime(2024, 1, 1, 9, 5, 7))
        assert names == ("Aria_090507.json", "Aria_090507_read.txt")

    def test_unsafe_characters_replaced(self):
        assert CharacterCardExporter.sanitize_filename('a/b\\c:d*e?f"g<h>i|j') == "a_b_c_d_e_f_g_h_i_j"

    def test_blank_name_falls_back(self):
        assert CharacterCardExporter.sanitize_filename("   ") == "character"
        assert CharacterCardExporter.sanitize_filename("") == "character"

    def test_unnamed_card(self):
        bundle = read_card(build_png(text_chunk("chara", encode_card({"description": "x"}))))
        json_name, _ = CharacterCardExporter.export_filenames(bundle, now=datetime(2024, 1, 1))
        assert json_name == "character_000000.json"
