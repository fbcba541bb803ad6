"""Shared fixtures: a fake translator and a throwaway docs tree."""

import logging
from pathlib import Path
from typing import Dict, List, Set, Tuple

import pytest

from mdxtr.settings import Locale, Settings


class FakeTranslator:
    """
    In-memory translator following the provider contract.
    Output is "<content> [<target>]" so tests can tell translated text apart
    (a suffix keeps "## " headings at the start of their line).
    """

    def __init__(self, fail_for: Set[str] = frozenset()):
        self.calls: List[Tuple[str, str, Dict[str, str]]] = []
        self.fail_for = set(fail_for)

    async def translate(self, source_lang: str, target_lang: str, texts: Dict[str, str]) -> Dict[str, str]:
        self.calls.append((source_lang, target_lang, dict(texts)))
        if target_lang in self.fail_for:
            raise RuntimeError(f"provider down for {target_lang}")
        return {k: f"{v} [{target_lang}]" for k, v in texts.items()}

    def calls_for(self, target_lang: str) -> List[Dict[str, str]]:
        return [texts for _, lang, texts in self.calls if lang == target_lang]


@pytest.fixture
def translator() -> FakeTranslator:
    return FakeTranslator()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    (tmp_path / "en").mkdir()
    return Settings(
        project_path=tmp_path,
        source=Locale("en", "English"),
        targets=(Locale("zh", "Chinese"), Locale("ja", "Japanese")),
        batch_delay=0,
    )


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def restore_logging():
    """setup_logging() replaces the root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
