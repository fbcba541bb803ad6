# src/mdxtr/discover.py
"""
Source document discovery and path layout.

Layout:
  <project>/<source>/guide/intro.mdx                  source document
  <project>/<source>/guide/.intro.mdx.sections.json   section history sidecar
  <project>/<target>/guide/intro.mdx                  translated counterpart
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Sequence

logger = logging.getLogger("mdxtr.discover")

_SKIP_DIRS = {"node_modules"}


@dataclass(frozen=True)
class SourceDocument:
    path: Path
    relative_path: str  # posix style, relative to the source root


def find_source_documents(project_path: Path, source_code: str, extensions: Iterable[str]) -> List[SourceDocument]:
    root = project_path / source_code
    if not root.is_dir():
        logger.warning("Source directory %s does not exist", root)
        return []

    exts = {e.lower() for e in extensions}
    out: List[SourceDocument] = []

    def _onerror(err: OSError) -> None:
        logger.warning("Failed to scan %s: %s", err.filename, err)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_onerror):
        # Prune in place so os.walk does not descend into hidden dirs / node_modules.
        dirnames[:] = [d for d in dirnames if not d.startswith(".") and d not in _SKIP_DIRS]
        for name in filenames:
            if Path(name).suffix.lower() not in exts:
                continue
            path = Path(dirpath) / name
            out.append(SourceDocument(path=path, relative_path=path.relative_to(root).as_posix()))

    return sorted(out, key=lambda d: d.relative_path)


def normalize_filter(pattern: str, source_code: str) -> str:
    pattern = pattern.replace("\\", "/")
    prefix = f"{source_code}/"
    if pattern.startswith(prefix):
        pattern = pattern[len(prefix):]
    return pattern


def filter_documents(documents: Sequence[SourceDocument], patterns: Sequence[str], source_code: str) -> List[SourceDocument]:
    """Substring match on the relative path. No patterns -> everything."""
    if not patterns:
        return list(documents)
    normalized = [normalize_filter(p, source_code) for p in patterns]
    return [d for d in documents if any(p in d.relative_path for p in normalized)]


def history_path(project_path: Path, source_code: str, relative_path: str) -> Path:
    rel = PurePosixPath(relative_path)
    return project_path / source_code / rel.parent / f".{rel.name}.sections.json"


def target_path(project_path: Path, locale_code: str, relative_path: str) -> Path:
    return project_path / locale_code / PurePosixPath(relative_path)
