# src/mdxtr/sections.py
"""
Section splitting and reassembly (deterministic).

Purpose:
- Split an MDX/Markdown document into stable, independently versionable sections:
  frontmatter, optional prologue (text before the first H2) and one section per H2 heading.
- Rebuild a full document from an ordered list of sections (possibly translated).

Design choices:
- Section ids are derived from the heading text, so they stay stable across runs
  as long as the heading is not edited. The sequence index is part of the id,
  which keeps ids unique even when two headings slugify to the same string.
- Each section carries a short content hash (for H2 sections: of the text under
  the heading). Change detection and position matching compare hashes, never text.
"""
from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass, replace
from typing import List, Literal

FRONTMATTER_ID = "__frontmatter__"
PROLOGUE_ID = "__prologue__"
CONTENT_ID = "__content__"

SectionKind = Literal["frontmatter", "prologue", "content", "section"]

_FRONTMATTER_RE = re.compile(r"\A---\n(.*?)\n---\n(.*)\Z", re.DOTALL)
_H2_RE = re.compile(r"^## (.+)$", re.MULTILINE)
_SLUG_RE = re.compile(r"[^a-z0-9\u4e00-\u9fa5]+")


def short_hash(text: str) -> str:
    """8-char content fingerprint (md5 prefix, same format as existing .sections.json sidecars)."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()[:8]


def section_fingerprint(content: str, has_heading: bool) -> str:
    """
    Fingerprint of a section.
    For H2 sections only the text below the heading line counts, so a renamed
    heading over an unchanged body keeps its fingerprint (its id changes instead).
    """
    if has_heading:
        content = content.partition("\n")[2].strip()
    return short_hash(content)


@dataclass(frozen=True)
class Section:
    id: str
    title: str
    content: str
    hash: str

    @property
    def kind(self) -> SectionKind:
        if self.id == FRONTMATTER_ID:
            return "frontmatter"
        if self.id == PROLOGUE_ID:
            return "prologue"
        if self.id == CONTENT_ID:
            return "content"
        return "section"

    def with_content(self, content: str) -> "Section":
        # Keeps id/title so a translated section is still addressed like its source.
        return replace(self, content=content, hash=section_fingerprint(content, self.kind == "section"))


@dataclass(frozen=True)
class ParsedDocument:
    frontmatter: str
    body: str


def parse_document(text: str) -> ParsedDocument:
    m = _FRONTMATTER_RE.match(text)
    if m:
        return ParsedDocument(frontmatter=m.group(1), body=m.group(2))
    return ParsedDocument(frontmatter="", body=text)


def slugify(title: str) -> str:
    """
    Example: "Request Body (JSON)" -> "request-body-json"
    CJK ideographs are kept as-is so Chinese headings still get a readable id.
    """
    return _SLUG_RE.sub("-", title.lower()).strip("-")


def split_sections(text: str) -> List[Section]:
    """
    Split raw document text into ordered sections.

    Order is always: frontmatter (if any), prologue (if any), H2 sections.
    A body without any H2 becomes a single "__content__" section.
    An empty document yields an empty list.
    """
    doc = parse_document(text)
    sections: List[Section] = []

    if doc.frontmatter:
        sections.append(
            Section(
                id=FRONTMATTER_ID,
                title="Frontmatter",
                content=doc.frontmatter,
                hash=short_hash(doc.frontmatter),
            )
        )

    body = doc.body
    headings = [(m.group(1), m.start()) for m in _H2_RE.finditer(body)]

    if headings and headings[0][1] > 0:
        prologue = body[: headings[0][1]].strip()
        if prologue:
            sections.append(
                Section(id=PROLOGUE_ID, title="Introduction", content=prologue, hash=short_hash(prologue))
            )

    for i, (title, start) in enumerate(headings):
        end = headings[i + 1][1] if i + 1 < len(headings) else len(body)
        content = body[start:end].strip()
        sections.append(
            Section(
                id=f"section-{i}-{slugify(title)}",
                title=title,
                content=content,
                hash=section_fingerprint(content, has_heading=True),
            )
        )

    if not headings and body.strip():
        content = body.strip()
        sections.append(Section(id=CONTENT_ID, title="Content", content=content, hash=short_hash(content)))

    return sections


def render_document(frontmatter: str, body: str) -> str:
    if frontmatter:
        return f"---\n{frontmatter}\n---\n{body}"
    return body


def rebuild_document(sections: List[Section]) -> str:
    """
    Reassemble sections into full document text.

    The frontmatter is re-wrapped in its '---' delimiters and placed first;
    every other section is followed by a blank line, then the body is trimmed.
    split_sections(rebuild_document(s)) reproduces the same boundaries as s.
    """
    frontmatter = ""
    parts: List[str] = []
    for section in sections:
        if section.kind == "frontmatter":
            frontmatter = section.content
        else:
            parts.append(section.content + "\n\n")
    return render_document(frontmatter, "".join(parts).strip())
