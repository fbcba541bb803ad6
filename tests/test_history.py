"""
Tests for the section history sidecar.

Run with: pytest tests/test_history.py -v
"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from mdxtr.history import (
    HistoryEntry,
    build_history,
    decode_history,
    hash_map,
    load_history,
    position_map,
    save_history,
)
from mdxtr.sections import split_sections


class TestLoad:

    def test_missing_file(self, tmp_path):
        assert load_history(tmp_path / ".a.mdx.sections.json") == []

    def test_malformed_json(self, tmp_path):
        p = tmp_path / "h.json"
        p.write_text("{not json", encoding="utf-8")
        assert load_history(p) == []

    def test_wrong_shape(self, tmp_path):
        p = tmp_path / "h.json"
        p.write_text(json.dumps([{"id": "x"}]), encoding="utf-8")
        assert load_history(p) == []

    def test_array_form_sorted_by_index(self, tmp_path):
        p = tmp_path / "h.json"
        p.write_text(
            json.dumps([{"id": "b", "hash": "22222222", "index": 1}, {"id": "a", "hash": "11111111", "index": 0}]),
            encoding="utf-8",
        )
        entries = load_history(p)
        assert [(e.id, e.index) for e in entries] == [("a", 0), ("b", 1)]

    def test_permission_error_degrades_to_empty(self, tmp_path, monkeypatch):
        def denied(self, *args, **kwargs):
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "exists", denied)
        assert load_history(tmp_path / "locked" / ".a.mdx.sections.json") == []

    def test_legacy_object_form(self, tmp_path):
        p = tmp_path / "h.json"
        p.write_text(json.dumps({"__frontmatter__": "aaaaaaaa", "section-0-intro": "bbbbbbbb"}), encoding="utf-8")
        entries = load_history(p)
        assert entries == [
            HistoryEntry(id="__frontmatter__", hash="aaaaaaaa", index=0),
            HistoryEntry(id="section-0-intro", hash="bbbbbbbb", index=1),
        ]


class TestDecode:

    def test_scalar_rejected(self):
        with pytest.raises(ValidationError):
            decode_history(42)

    def test_legacy_requires_string_hashes(self):
        with pytest.raises(ValidationError):
            decode_history({"a": ["not", "a", "hash"]})


class TestSave:

    def test_save_then_load(self, tmp_path):
        sections = split_sections("Intro\n\n## One\n\nA\n\n## Two\n\nB")
        p = tmp_path / "nested" / ".doc.mdx.sections.json"
        save_history(p, sections)

        raw = json.loads(p.read_text(encoding="utf-8"))
        assert [e["index"] for e in raw] == [0, 1, 2]
        assert set(raw[0]) == {"id", "hash", "index"}
        assert load_history(p) == build_history(sections)

    def test_save_replaces_previous_layout(self, tmp_path):
        p = tmp_path / "h.json"
        save_history(p, split_sections("## One\n\nA\n\n## Two\n\nB\n\n## Three\n\nC"))
        save_history(p, split_sections("## One\n\nA"))
        assert [e.id for e in load_history(p)] == ["section-0-one"]


class TestMaps:

    def test_hash_map(self):
        entries = [HistoryEntry(id="a", hash="h1", index=0), HistoryEntry(id="b", hash="h2", index=1)]
        assert hash_map(entries) == {"a": "h1", "b": "h2"}

    def test_position_map_keeps_duplicates_in_order(self):
        entries = [
            HistoryEntry(id="c", hash="same", index=2),
            HistoryEntry(id="a", hash="same", index=0),
            HistoryEntry(id="b", hash="other", index=1),
        ]
        assert position_map(entries) == {"same": [0, 2], "other": [1]}
