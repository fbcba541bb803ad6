# src/mdxtr/translate.py
"""
Section translation (LLM-assisted).

Purpose:
- Translate a {section id: content} mapping from the source language into one
  target language, preserving MDX/Markdown structure.

Contract (provider side):
- translate(source_lang, target_lang, {id: content}) -> {id: translated content}
- Every requested id must come back as a non-empty string. Anything else
  (request failure, empty/unparsable response, missing key) raises TranslationError.
"""
from __future__ import annotations

from typing import Dict, Optional, Protocol

from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError

from mdxtr.llm import LLMError, chat_json
from mdxtr.prompts import build_system_prompt, build_user_prompt
from mdxtr.schema import TranslationConfig, TranslationResponse


class TranslationError(RuntimeError):
    pass


class Translator(Protocol):
    async def translate(self, source_lang: str, target_lang: str, texts: Dict[str, str]) -> Dict[str, str]:
        ...


def validate_translation(raw: object, texts: Dict[str, str]) -> Dict[str, str]:
    try:
        resp = TranslationResponse.model_validate(raw)
    except ValidationError as e:
        raise TranslationError(f"Unexpected translation payload: {e}") from e

    out: Dict[str, str] = {}
    for key in texts:
        value = resp.translation.get(key)
        if not value or not value.strip():
            raise TranslationError(f"Translation missing for section '{key}'.")
        out[key] = value.strip()
    return out


class LLMTranslator:
    """Translator backed by an OpenAI-compatible chat model."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        config: Optional[TranslationConfig] = None,
        run_id: Optional[str] = None,
    ) -> None:
        self.client = client
        self.model = model
        self.system_prompt = build_system_prompt(config or TranslationConfig())
        self.run_id = run_id

    async def translate(self, source_lang: str, target_lang: str, texts: Dict[str, str]) -> Dict[str, str]:
        try:
            raw = await chat_json(
                self.client,
                model=self.model,
                system=self.system_prompt,
                user=build_user_prompt(source_lang, target_lang, texts),
                operation="translate_sections",
                run_id=self.run_id,
            )
        except (LLMError, OpenAIError) as e:
            raise TranslationError(f"{source_lang} -> {target_lang}: {e}") from e
        return validate_translation(raw, texts)
