# src/mdxtr/history.py
"""
Section history sidecar (.<name>.sections.json).

Purpose:
- Persist, per source document, the section layout of the last translation pass:
  an ordered list of {id, hash, index}.
- The index is the only place where section positions are recorded; position
  matching (smart_diff) relies on it to find reusable translations.

Formats:
- Current:  [{"id": "...", "hash": "...", "index": 0}, ...]   (read/write)
- Legacy:   {"<section id>": "<hash>", ...}                    (read only)
  Legacy files are normalized on load, with positions taken from key order.

Design choices:
- A missing or broken sidecar is never fatal: it simply means "no history",
  which makes the next pass translate everything.
- The file is fully rewritten on save (no merging with the previous layout).
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Sequence

from pydantic import BaseModel, RootModel, TypeAdapter, ValidationError

from mdxtr.sections import Section

logger = logging.getLogger("mdxtr.history")


class HistoryEntry(BaseModel):
    id: str
    hash: str
    index: int


class LegacyHistory(RootModel[Dict[str, str]]):
    pass


_ENTRIES = TypeAdapter(List[HistoryEntry])


def decode_history(raw: object) -> List[HistoryEntry]:
    """
    Normalize a decoded JSON value into an ordered list of entries.
    Tries the array form first, then the legacy object form.
    Raises ValidationError if neither shape matches.
    """
    if isinstance(raw, list):
        entries = _ENTRIES.validate_python(raw)
        return sorted(entries, key=lambda e: e.index)

    legacy = LegacyHistory.model_validate(raw)
    return [HistoryEntry(id=sid, hash=h, index=i) for i, (sid, h) in enumerate(legacy.root.items())]


def load_history(path: Path) -> List[HistoryEntry]:
    try:
        if not path.exists():
            return []
        raw = json.loads(path.read_text(encoding="utf-8"))
        return decode_history(raw)
    except (OSError, ValueError, ValidationError) as e:
        # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
        logger.warning("Ignoring unreadable section history %s: %s", path, e)
        return []


def build_history(sections: Sequence[Section]) -> List[HistoryEntry]:
    return [HistoryEntry(id=s.id, hash=s.hash, index=i) for i, s in enumerate(sections)]


def save_history(path: Path, sections: Sequence[Section]) -> None:
    """
    Overwrite the sidecar with the current source layout.
    Failures are logged, not raised: the translated files are already written.
    """
    entries = [e.model_dump() for e in build_history(sections)]
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            json.dump(entries, f, indent=2, ensure_ascii=False)
    except OSError as e:
        logger.warning("Failed to save section history %s: %s", path, e)


def hash_map(entries: Sequence[HistoryEntry]) -> Dict[str, str]:
    """id -> hash, as used by change detection."""
    return {e.id: e.hash for e in entries}


def position_map(entries: Sequence[HistoryEntry]) -> Dict[str, List[int]]:
    """hash -> positions (ascending). Identical sections share a hash, hence the list."""
    out: Dict[str, List[int]] = {}
    for e in sorted(entries, key=lambda e: e.index):
        out.setdefault(e.hash, []).append(e.index)
    return out
