# src/mdxtr/changes.py
"""
Change detection against the stored id -> hash map.

Identity based: a renamed heading shows up as one added id plus one deleted id,
even if the section body did not change. That is fine here because the result
only drives reporting and the "skip unchanged documents" gate; deciding what
can be reused is done by position matching (smart_diff).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from mdxtr.sections import Section


@dataclass
class SectionChanges:
    added: List[str] = field(default_factory=list)
    modified: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.modified or self.deleted)

    def summary(self) -> str:
        return f"+{len(self.added)} ~{len(self.modified)} -{len(self.deleted)} ={len(self.unchanged)}"


def detect_section_changes(sections: Sequence[Section], stored: Dict[str, str]) -> SectionChanges:
    changes = SectionChanges()
    current_ids = set()
    for s in sections:
        current_ids.add(s.id)
        if s.id not in stored:
            changes.added.append(s.id)
        elif stored[s.id] != s.hash:
            changes.modified.append(s.id)
        else:
            changes.unchanged.append(s.id)

    changes.deleted = [sid for sid in stored if sid not in current_ids]
    return changes
