# src/mdxtr/orchestrator.py
"""
Incremental translation orchestrator.

Per source document:
1) Split the source into sections and load the section history sidecar
2) Detect changes against the stored id -> hash map; skip the document if
   nothing changed (unless forced)
3) For each target language (batched, languages in a batch run concurrently):
   - split the existing translation, if any
   - plan keep/translate per section (smart_diff)
   - translate only the "translate" sections, one provider call per section
   - rebuild and write the target document
4) Save the new history once all languages are done, whatever their outcome

Concurrency model:
- Single event loop. Documents are processed one after another; within a
  document, at most batch_size languages are in flight, with a pause between
  batches. Each language only touches its own target path.
- A failing language never cancels its siblings (gather(return_exceptions=True)).
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from mdxtr.changes import SectionChanges, detect_section_changes
from mdxtr.discover import SourceDocument, history_path, target_path
from mdxtr.history import HistoryEntry, hash_map, load_history, save_history
from mdxtr.sections import Section, rebuild_document, split_sections
from mdxtr.settings import Locale, Settings
from mdxtr.smart_diff import apply_plan, plan_sections
from mdxtr.translate import TranslationError, Translator

logger = logging.getLogger("mdxtr.orchestrator")


@dataclass
class RunStats:
    success: int = 0
    skipped: int = 0
    failed: int = 0

    def add(self, other: "RunStats") -> None:
        self.success += other.success
        self.skipped += other.skipped
        self.failed += other.failed


@dataclass(frozen=True)
class LanguageResult:
    locale: Locale
    translated: int
    reused: int


def read_target_sections(path: Path) -> Optional[List[Section]]:
    """Existing translation split into sections; None if absent or unreadable."""
    try:
        if not path.exists():
            return None
        return split_sections(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Could not read existing translation %s: %s", path, e)
        return None


async def translate_section(
    translator: Translator,
    section: Section,
    source: Locale,
    target: Locale,
) -> Section:
    result = await translator.translate(source.label, target.label, {section.id: section.content})
    # Units are stored trimmed; a leading space would push "## " off its line start.
    content = (result.get(section.id) or "").strip()
    if not content:
        raise TranslationError(f"Translation missing for section '{section.id}'.")
    return section.with_content(content)


async def translate_language(
    translator: Translator,
    settings: Settings,
    doc: SourceDocument,
    sections: Sequence[Section],
    history: Sequence[HistoryEntry],
    locale: Locale,
    force: bool = False,
) -> LanguageResult:
    out_path = target_path(settings.project_path, locale.code, doc.relative_path)
    existing = None if force else read_target_sections(out_path)

    plan = plan_sections(sections, history, existing, force=force)
    final = apply_plan(sections, plan, existing or [])

    translated = 0
    for i, slot in enumerate(final):
        if slot is None:
            final[i] = await translate_section(translator, sections[i], settings.source, locale)
            translated += 1

    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(rebuild_document([s for s in final if s is not None]), encoding="utf-8")

    return LanguageResult(locale=locale, translated=translated, reused=len(final) - translated)


async def run_language_batches(
    translator: Translator,
    settings: Settings,
    doc: SourceDocument,
    sections: Sequence[Section],
    history: Sequence[HistoryEntry],
    force: bool = False,
) -> RunStats:
    stats = RunStats()
    targets = list(settings.targets)
    size = settings.batch_size

    for start in range(0, len(targets), size):
        batch = targets[start : start + size]
        results = await asyncio.gather(
            *(translate_language(translator, settings, doc, sections, history, loc, force) for loc in batch),
            return_exceptions=True,
        )
        for loc, res in zip(batch, results):
            if isinstance(res, BaseException):
                if not isinstance(res, Exception):
                    raise res
                stats.failed += 1
                logger.error("  %s/%s: %s", loc.code, doc.relative_path, res)
            else:
                stats.success += 1
                logger.info(
                    "  %s/%s: translated %d, reused %d",
                    loc.code,
                    doc.relative_path,
                    res.translated,
                    res.reused,
                )

        if start + size < len(targets) and settings.batch_delay > 0:
            await asyncio.sleep(settings.batch_delay)

    return stats


async def translate_document(
    translator: Translator,
    settings: Settings,
    doc: SourceDocument,
    force: bool = False,
) -> RunStats:
    n_targets = len(settings.targets)
    hist_path = history_path(settings.project_path, settings.source.code, doc.relative_path)

    try:
        sections = split_sections(doc.path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error("Failed to read %s: %s", doc.path, e)
        return RunStats(failed=n_targets)

    if not sections:
        logger.info("%s: empty document, skipped", doc.relative_path)
        return RunStats(skipped=n_targets)

    history = load_history(hist_path)
    changes: SectionChanges = detect_section_changes(sections, hash_map(history))

    if not changes.has_changes and not force:
        logger.info("%s: no changes, skipped", doc.relative_path)
        return RunStats(skipped=n_targets)

    if force:
        logger.info("%s: forced full translation", doc.relative_path)
    else:
        logger.info("%s: changes %s", doc.relative_path, changes.summary())

    stats = await run_language_batches(translator, settings, doc, sections, history, force=force)

    # The history describes the source layout, so it is saved even if some languages failed.
    save_history(hist_path, sections)
    return stats


async def translate_documents(
    translator: Translator,
    settings: Settings,
    documents: Sequence[SourceDocument],
    force: bool = False,
) -> RunStats:
    total = RunStats()
    for doc in documents:
        total.add(await translate_document(translator, settings, doc, force=force))
    return total
