# src/mdxtr/schema.py
"""
Data contracts (schema).

Purpose:
- Define a strict, machine-validated contract for translation responses.
- Describe the optional translation-config.json (do-not-translate lists, formatting rules).

Design principles:
- Validation via Pydantic before any downstream use
- A response that does not match the contract fails the section, it is never written
"""
from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


# Canonical shape of a provider answer: {"translation": {"<section id>": "<translated text>"}}
class TranslationResponse(BaseModel):

    translation: Dict[str, str] = Field(..., description="Section id -> translated section content.")


class DoNotTranslate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Product names, API names, etc. that must stay verbatim
    terms: List[str] = Field(default_factory=list)

    # H2 headings (without "## ") that must stay in the source language
    headers: List[str] = Field(default_factory=list)


class PreserveFormatting(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    h2_headers: bool = Field(True, alias="h2Headers")


# Mirrors translation-config.json at the project root.
class TranslationConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    do_not_translate: DoNotTranslate = Field(default_factory=DoNotTranslate, alias="doNotTranslate")
    preserve_formatting: PreserveFormatting = Field(default_factory=PreserveFormatting, alias="preserveFormatting")
