# main.py
"""
Entry point: incremental, section-level translation of MDX docs.

Usage:
  python main.py                      # translate changed sections of every document
  python main.py guide/intro.mdx      # only documents whose path contains the filter
  python main.py --force              # re-translate everything

Workflow (per source document, see mdxtr.orchestrator):
1) Split into sections (frontmatter, prologue, one per "## " heading)
2) Compare section hashes with the history sidecar; skip unchanged documents
3) Reuse existing translations by hash/position, translate only what changed
4) Rebuild each target document and update the history sidecar

Configuration comes from .env / environment (see mdxtr.settings) and an optional
translation-config.json in the project directory.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import uuid
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from mdxtr.discover import filter_documents, find_source_documents
from mdxtr.llm import get_client
from mdxtr.logging_utils import setup_logging
from mdxtr.orchestrator import RunStats, translate_documents
from mdxtr.settings import Settings, load_settings
from mdxtr.translate import LLMTranslator

# Load configuration from .env (API key, base URL, target languages, model).
load_dotenv()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Section-level incremental translation of MDX documents.")
    parser.add_argument("filters", nargs="*", help="Only process documents whose relative path contains one of these.")
    parser.add_argument("-f", "--force", action="store_true", help="Re-translate every section, ignoring history.")
    parser.add_argument("--project", type=Path, default=Path.cwd(), help="Docs root holding the language folders.")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--log-file", type=Path, default=None)
    return parser


async def run(settings: Settings, filters: List[str], force: bool, run_id: str) -> Optional[RunStats]:
    documents = find_source_documents(settings.project_path, settings.source.code, settings.extensions)
    if not documents:
        print(f"No source documents found under {settings.project_path / settings.source.code}")
        return None

    if filters:
        documents = filter_documents(documents, filters, settings.source.code)
        if not documents:
            print("No documents match the given filters.")
            return None
        print(f"Selected {len(documents)} document(s)\n")
    else:
        print(f"Found {len(documents)} source document(s)\n")

    translator = LLMTranslator(
        get_client(settings),
        model=settings.model,
        config=settings.translation,
        run_id=run_id,
    )
    return await translate_documents(translator, settings, documents, force=force)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    run_id = uuid.uuid4().hex[:12]
    setup_logging(level=args.log_level, log_file=args.log_file, run_id=run_id)

    try:
        settings = load_settings(args.project.resolve())
    except ValueError as e:
        print("\nERROR:", str(e), file=sys.stderr)
        return 1

    print("=" * 60)
    print(f"MDX translation {'(forced)' if args.force else '(incremental)'}")
    print(f"Project: {settings.project_path}")
    print(f"Languages: {settings.source.code} -> {', '.join(t.code for t in settings.targets) or '(none)'}")
    if args.filters:
        print(f"Filters: {', '.join(args.filters)}")
    print("=" * 60 + "\n")

    if not settings.targets:
        print("No target languages configured (TARGET_LANGS).")
        return 0

    try:
        stats = asyncio.run(run(settings, args.filters, args.force, run_id))
    except Exception as e:
        print("\nERROR:", str(e), file=sys.stderr)
        return 1

    if stats is not None:
        print("\n" + "=" * 50)
        print(f"Success: {stats.success}, Skipped: {stats.skipped}, Failed: {stats.failed}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
