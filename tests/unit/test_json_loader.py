"""Tests for the JSON corpus loader."""

import json
from pathlib import Path

import pytest

from shrek_ai.config.settings import Settings
from shrek_ai.core.errors import CorpusLoadError
from shrek_ai.infrastructure.document_loaders import JsonCorpusLoader, parse_documents


def _write(tmp_path: Path, payload) -> Path:
    path = tmp_path / "documents.json"
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return path


class TestJsonCorpusLoader:
    """Test reading and validating the corpus file."""

    def test_loads_documents_in_order(self, tmp_path):
        path = _write(
            tmp_path,
            [
                {"id": "1", "title": "One", "content": "first"},
                {"id": "2", "title": "Two", "content": "second", "extra": True},
            ],
        )

        docs = JsonCorpusLoader(path).load()

        assert [d.id for d in docs] == ["1", "2"]
        assert docs[1].title == "Two"
        assert docs[1].content == "second"
        assert all(d.embedding is None for d in docs)

    def test_empty_array(self, tmp_path):
        assert JsonCorpusLoader(_write(tmp_path, [])).load() == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(CorpusLoadError, match="Cannot read"):
            JsonCorpusLoader(tmp_path / "absent.json").load()

    def test_malformed_json(self, tmp_path):
        with pytest.raises(CorpusLoadError, match="Malformed"):
            JsonCorpusLoader(_write(tmp_path, "[{not json")).load()

    def test_non_utf8_bytes(self, tmp_path):
        path = tmp_path / "documents.json"
        path.write_bytes(b'[{"id": "a", "title": "A", "content": "\xff\xfe"}]')

        with pytest.raises(CorpusLoadError, match="Malformed"):
            JsonCorpusLoader(path).load()

    def test_bundled_corpus_loads(self):
        docs = JsonCorpusLoader(Settings().corpus_path).load()

        assert len(docs) >= 3
        assert len({d.id for d in docs}) == len(docs)


class TestParseDocuments:
    """Test record validation."""

    @pytest.mark.parametrize(
        "records",
        [
            {"id": "1", "title": "One", "content": "x"},
            "documents",
            [["1", "One", "x"]],
            [{"id": "1", "title": "One"}],
            [{"id": 1, "title": "One", "content": "x"}],
            [{"id": "1", "title": None, "content": "x"}],
        ],
    )
    def test_rejects_malformed_records(self, records):
        with pytest.raises(CorpusLoadError):
            parse_documents(records)

    def test_rejects_duplicate_ids(self):
        records = [
            {"id": "1", "title": "One", "content": "x"},
            {"id": "1", "title": "Again", "content": "y"},
        ]

        with pytest.raises(CorpusLoadError, match="duplicate"):
            parse_documents(records)
