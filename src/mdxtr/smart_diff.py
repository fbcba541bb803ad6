# src/mdxtr/smart_diff.py
"""
Position/hash matching ("smart diff").

Purpose:
- For every current source section, decide whether an existing translation can
  be reused (keep) or must be regenerated (translate).

How it works:
- The previous pass recorded, for each source section, its hash and position.
- A current section whose hash was seen before is unchanged content. Its old
  position tells us where its translation sits in the target document, because
  the target was rebuilt from the source layout at that time.
- A current section with an unseen hash is new or edited and is always translated.

This tolerates heading renames (new id, same hash) and inserted/deleted
sections (positions shift, hashes do not). It assumes the target document was
not reordered by hand since the last pass; that case is not detected.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Sequence

from mdxtr.history import HistoryEntry, position_map
from mdxtr.sections import Section

Action = Literal["keep", "translate"]


@dataclass(frozen=True)
class SectionMapping:
    source_index: int
    target_index: Optional[int]
    action: Action


def translate_all(sections: Sequence[Section]) -> List[SectionMapping]:
    return [SectionMapping(source_index=i, target_index=None, action="translate") for i in range(len(sections))]


def match_sections(
    sections: Sequence[Section],
    history: Sequence[HistoryEntry],
    target_sections: Sequence[Section],
) -> List[SectionMapping]:
    positions: Dict[str, List[int]] = position_map(history)
    # Per hash, how many recorded positions have already been claimed.
    claimed: Dict[str, int] = {}

    plan: List[SectionMapping] = []
    for i, section in enumerate(sections):
        candidates = positions.get(section.hash, [])
        n = claimed.get(section.hash, 0)
        if n >= len(candidates):
            plan.append(SectionMapping(source_index=i, target_index=None, action="translate"))
            continue

        claimed[section.hash] = n + 1
        p = candidates[n]
        if p < len(target_sections):
            plan.append(SectionMapping(source_index=i, target_index=p, action="keep"))
        else:
            # Target is shorter than the recorded layout (e.g. an interrupted earlier pass).
            plan.append(SectionMapping(source_index=i, target_index=None, action="translate"))
    return plan


def plan_sections(
    sections: Sequence[Section],
    history: Sequence[HistoryEntry],
    target_sections: Optional[Sequence[Section]],
    force: bool = False,
) -> List[SectionMapping]:
    """
    Entry point used by the orchestrator.
    No target document, no history, or force -> everything is translated.
    """
    if force or not history or not target_sections:
        return translate_all(sections)
    return match_sections(sections, history, target_sections)


def apply_plan(
    sections: Sequence[Section],
    plan: Sequence[SectionMapping],
    target_sections: Sequence[Section],
) -> List[Optional[Section]]:
    """
    Resolve "keep" mappings into sections carrying the reused translated content
    under the current source id/title. "translate" slots are left as None.
    """
    out: List[Optional[Section]] = []
    for m in plan:
        if m.action == "keep" and m.target_index is not None:
            out.append(sections[m.source_index].with_content(target_sections[m.target_index].content))
        else:
            out.append(None)
    return out
