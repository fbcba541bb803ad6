# src/mdxtr/settings.py
"""
Run configuration.

Purpose:
- Collect everything a translation run needs (languages, model, API access,
  batching, do-not-translate rules) into one immutable value.
- Sources: environment variables (usually loaded from .env by main.py) and
  translation-config.json at the project root.

Design principles:
- Loaded once in main() and passed explicitly; no module reads os.environ on its own.
- A broken translation-config.json falls back to defaults with a warning.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from mdxtr.schema import TranslationConfig

logger = logging.getLogger("mdxtr.settings")

CONFIG_FILENAME = "translation-config.json"

# Language code -> language name passed to the translator.
# NOTE: "tw" is used for the Traditional Chinese docs tree.
LANGUAGE_NAMES: Dict[str, str] = {
    "en": "English",
    "zh": "Chinese",
    "tw": "Traditional Chinese",
    "ja": "Japanese",
    "ko": "Korean",
    "fr": "French",
    "de": "German",
    "es": "Spanish",
    "it": "Italian",
}


@dataclass(frozen=True)
class Locale:
    code: str
    label: str


@dataclass(frozen=True)
class Settings:
    project_path: Path
    source: Locale
    targets: Tuple[Locale, ...]
    model: str = "gpt-4.1-mini"
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    batch_size: int = 6
    batch_delay: float = 0.2  # seconds
    extensions: Tuple[str, ...] = (".mdx",)
    translation: TranslationConfig = field(default_factory=TranslationConfig)


def locale_for(code: str) -> Locale:
    code = code.strip().lower()
    return Locale(code=code, label=LANGUAGE_NAMES.get(code, code))


def parse_target_langs(raw: str, source_code: str) -> Tuple[Locale, ...]:
    """
    "zh, ja,ko" -> (Locale("zh", "Chinese"), Locale("ja", "Japanese"), Locale("ko", "Korean"))
    Duplicates and the source language are dropped; order is preserved.
    """
    seen = set()
    out: List[Locale] = []
    for c in raw.split(","):
        c = c.strip().lower()
        if not c or c == source_code or c in seen:
            continue
        seen.add(c)
        out.append(locale_for(c))
    return tuple(out)


def parse_extensions(raw: str) -> Tuple[str, ...]:
    exts = []
    for e in raw.split(","):
        e = e.strip().lower()
        if e:
            exts.append(e if e.startswith(".") else f".{e}")
    return tuple(exts) or (".mdx",)


def load_translation_config(path: Path) -> TranslationConfig:
    if not path.exists():
        return TranslationConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return TranslationConfig.model_validate(raw)
    except (OSError, ValueError, ValidationError) as e:
        logger.warning("Could not load %s, using defaults: %s", path, e)
        return TranslationConfig()


def load_settings(project_path: Path, env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables:
      SOURCE_LANG (default en), TARGET_LANGS (default zh), TRANSLATE_MODEL,
      OPENAI_API_KEY, OPENAI_BASE_URL, TRANSLATE_BATCH_SIZE, TRANSLATE_BATCH_DELAY_MS,
      DOC_EXTENSIONS (default .mdx)
    Raises ValueError on malformed numeric values.
    """
    env = os.environ if env is None else env

    source = locale_for(env.get("SOURCE_LANG", "en") or "en")
    targets = parse_target_langs(env.get("TARGET_LANGS", "zh"), source.code)

    batch_size = int(env.get("TRANSLATE_BATCH_SIZE", "6"))
    if batch_size < 1:
        raise ValueError("TRANSLATE_BATCH_SIZE must be >= 1")
    delay_ms = float(env.get("TRANSLATE_BATCH_DELAY_MS", "200"))
    if delay_ms < 0:
        raise ValueError("TRANSLATE_BATCH_DELAY_MS must be >= 0")

    return Settings(
        project_path=project_path,
        source=source,
        targets=targets,
        model=env.get("TRANSLATE_MODEL") or "gpt-4.1-mini",
        api_key=env.get("OPENAI_API_KEY") or None,
        base_url=env.get("OPENAI_BASE_URL") or None,
        batch_size=batch_size,
        batch_delay=delay_ms / 1000.0,
        extensions=parse_extensions(env.get("DOC_EXTENSIONS", ".mdx")),
        translation=load_translation_config(project_path / CONFIG_FILENAME),
    )
