# src/mdxtr/prompts.py
"""
Prompt construction for section translation.

The system prompt is built once from a TranslationConfig and passed to the
translator at construction time. The user prompt wraps the sections to translate
in a JSON object so the answer can be validated key by key.
"""
from __future__ import annotations

import json
from typing import Dict

from mdxtr.schema import TranslationConfig


def build_system_prompt(config: TranslationConfig) -> str:
    terms = config.do_not_translate.terms
    headers = config.do_not_translate.headers

    terms_section = ""
    if terms:
        terms_section = f"\n   - These specific terms: {', '.join(terms)}"

    h2_rule = ""
    if config.preserve_formatting.h2_headers:
        h2_rule = "\n   - Markdown headers starting with ## (keep them in the original language)"

    headers_section = ""
    if headers:
        examples = "\n".join(f'- "## {h}" -> keep as "## {h}"' for h in headers)
        headers_section = f"\n\nExamples of headers NOT to translate:\n{examples}"

    return f"""You are a professional translator of technical documentation.
Your task is to translate the string values within a JSON object.

Rules:
1. Translate accurately, conveying the original meaning.
2. Maintain the original JSON structure. Do not translate keys, only string values.
3. Translate all user-facing text, including descriptions, headings and
   human-readable component attribute values (e.g. title="Properties").
4. Preserve proper nouns, brand names and specific technical terms.
5. Keep the original Markdown formatting EXACTLY (bold, italic, links, lists, tables).
   **text** must stay **translated**, with no space after the opening **.
   Keep ASCII colons (:) as-is.
6. Ensure all quotes within JSON string values are properly escaped.
7. Do NOT translate:
   - Code blocks (content between ``` markers) and inline code
   - URLs and file paths
   - MDX/JSX component names and attribute names (e.g. <Card>, <ParamField>, title=, type=)
   - API endpoints, method names, variable names{h2_rule}{terms_section}
8. Preserve all MDX/JSX component syntax exactly as-is.{headers_section}

Return ONLY the resulting JSON object, with the same keys, where the original
string values have been replaced by their translations. No extra text.
"""


def build_user_prompt(source_lang: str, target_lang: str, texts: Dict[str, str]) -> str:
    payload = json.dumps({"translation": texts}, indent=2, ensure_ascii=False)
    return f"""Translate the following JSON object from {source_lang} to {target_lang}:

{payload}
"""
