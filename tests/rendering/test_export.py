"""
Tests for JSON document export/import and the CSV study list.
"""

import json
from datetime import date

import pytest

from conftest import punct, word
from hwaet.core.errors import ImportValidationError
from hwaet.core.models import Token
from hwaet.rendering.export import (
    csv_cell,
    definition_block,
    export_filename,
    export_json,
    export_study_csv,
    flagged_indices,
    load_document,
)


class TestJsonExport:
    def test_pretty_printed_with_all_fields(self, hwaet_sentence):
        text = export_json(hwaet_sentence)

        data = json.loads(text)
        assert text.startswith("[\n  {")
        assert "Hē" in text  # not ascii-escaped
        assert set(data[0]) == {
            "original",
            "modernTranslation",
            "lemma",
            "partOfSpeech",
            "grammaticalInfo",
            "etymology",
            "isPunctuation",
            "isFlagged",
            "sources",
        }

    def test_empty_document_is_noop(self):
        assert export_json([]) is None

    def test_filename_is_date_stamped(self):
        assert export_filename(date(2024, 3, 9)) == "hwæt_analysis_2024-03-09.json"


class TestLoadDocument:
    def test_accepts_exported_document(self, hwaet_sentence):
        assert load_document(export_json(hwaet_sentence)) == hwaet_sentence

    def test_accepts_decoded_data(self):
        tokens = load_document([Token.line_break().model_dump()])

        assert tokens[0].is_line_break

    def test_empty_array(self):
        assert load_document("[]") == []

    @pytest.mark.parametrize(
        "raw",
        [
            '{"original": "a", "lemma": "a"}',
            '"text"',
            '[{"lemma": "a"}]',
            '[{"original": "a"}]',
            "[1]",
            "not json at all",
        ],
    )
    def test_rejects_invalid(self, raw):
        with pytest.raises(ImportValidationError, match="Invalid file format"):
            load_document(raw)

    def test_rejects_undecodable_bytes(self):
        with pytest.raises(ImportValidationError, match="Invalid file format"):
            load_document(b"\xff\xfe[")

    def test_rejects_invalid_later_element(self, hwaet_sentence):
        data = json.loads(export_json(hwaet_sentence))
        data.append({"original": "x"})

        with pytest.raises(ImportValidationError):
            load_document(data)


class TestStudyCsv:
    def test_rows_follow_document_order(self, hwaet_sentence):
        tokens = [t.model_copy(update={"isFlagged": i in (4, 0)}) for i, t in enumerate(hwaet_sentence)]

        lines = export_study_csv(tokens).split("\n")

        assert lines[0] == '"Lemma (Root)","Context Sentence (Front)","Definition & Grammar (Back)"'
        assert lines[1].startswith('"hē","<b>Hē</b> cwæð.",')
        assert lines[2].startswith('"ēode","Þā <b>ēode</b>.",')
        assert len(lines) == 3

    def test_quotes_doubled_and_single_line(self):
        token = word("cwæð", lemma="cweþan", modernTranslation='said "thus"', etymology="PGmc\n*kweþaną", isFlagged=True)

        csv_text = export_study_csv([word("Hē"), token, punct(".")])

        row = csv_text.split("\n")[1]
        assert 'said ""thus""' in row
        assert row.endswith('<small>PGmc*kweþaną</small>"')
        assert len(csv_text.split("\n")) == 2

    def test_nothing_flagged_is_noop(self, hwaet_sentence):
        assert export_study_csv(hwaet_sentence) is None

    def test_flagged_indices(self, hwaet_sentence):
        tokens = [t.model_copy(update={"isFlagged": i in (3, 1)}) for i, t in enumerate(hwaet_sentence)]

        assert flagged_indices(tokens) == [1, 3]


def test_csv_cell_wraps_every_value():
    assert csv_cell("plain") == '"plain"'
    assert csv_cell('a "b"') == '"a ""b"""'


def test_definition_block():
    token = word("cwæð", modernTranslation="said", grammaticalInfo="3rd sg. pret.", partOfSpeech="Verb")

    assert definition_block(token) == (
        "<p><b>Meaning:</b> said</p><p><b>Grammar:</b> 3rd sg. pret.</p><p><i>Verb</i></p>"
    )
