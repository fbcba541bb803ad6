"""
Tests for section splitting, hashing and reassembly.

Run with: pytest tests/test_sections.py -v
"""

from mdxtr.sections import (
    CONTENT_ID,
    FRONTMATTER_ID,
    PROLOGUE_ID,
    rebuild_document,
    short_hash,
    slugify,
    split_sections,
)

DOC = """---
title: Overview
description: Getting started
---
Welcome to the **docs**.

## Quick Start

Install the SDK.

## Quick Start

Same heading twice.

## 请求参数 (Body)

<ParamField body="model" type="string">Model name</ParamField>
"""


class TestShortHash:

    def test_deterministic(self):
        assert short_hash("hello") == short_hash("hello")
        assert len(short_hash("hello")) == 8

    def test_any_change_changes_hash(self):
        assert short_hash("hello") != short_hash("hello ")
        assert short_hash("## A\n\nx") != short_hash("## A\n\ny")

    def test_md5_prefix(self):
        # Same format as sidecars written by earlier versions of the tool.
        assert short_hash("") == "d41d8cd9"


class TestSlugify:

    def test_ascii(self):
        assert slugify("Request Body (JSON)") == "request-body-json"

    def test_cjk_kept(self):
        assert slugify("请求参数 (Body)") == "请求参数-body"

    def test_strips_separators(self):
        assert slugify("  --Hello, World!--  ") == "hello-world"


class TestSplit:

    def test_roles_and_order(self):
        sections = split_sections(DOC)
        ids = [s.id for s in sections]
        assert ids == [
            FRONTMATTER_ID,
            PROLOGUE_ID,
            "section-0-quick-start",
            "section-1-quick-start",
            "section-2-请求参数-body",
        ]

    def test_frontmatter_content_unwrapped(self):
        fm = split_sections(DOC)[0]
        assert fm.content == "title: Overview\ndescription: Getting started"
        assert fm.hash == short_hash(fm.content)

    def test_section_content_includes_heading_and_is_trimmed(self):
        section = split_sections(DOC)[2]
        assert section.title == "Quick Start"
        assert section.content == "## Quick Start\n\nInstall the SDK."

    def test_duplicate_headings_get_unique_ids(self):
        sections = split_sections(DOC)
        assert len({s.id for s in sections}) == len(sections)

    def test_no_headings_single_content_section(self):
        sections = split_sections("Just a paragraph.\n\n### Not an H2\n")
        assert [s.id for s in sections] == [CONTENT_ID]
        assert sections[0].content == "Just a paragraph.\n\n### Not an H2"

    def test_heading_at_start_has_no_prologue(self):
        sections = split_sections("## One\n\nA\n\n## Two\n\nB")
        assert [s.id for s in sections] == ["section-0-one", "section-1-two"]

    def test_blank_prologue_dropped(self):
        sections = split_sections("\n\n   \n## One\n\nA")
        assert [s.id for s in sections] == ["section-0-one"]

    def test_empty_document(self):
        assert split_sections("") == []
        assert split_sections("  \n\n ") == []

    def test_frontmatter_only(self):
        sections = split_sections("---\ntitle: X\n---\n")
        assert [s.id for s in sections] == [FRONTMATTER_ID]

    def test_heading_rename_changes_id_not_hash(self):
        before = split_sections("## Setup\n\nBody")[0]
        after = split_sections("## Installation\n\nBody")[0]
        assert before.id != after.id
        assert before.hash == after.hash

    def test_body_edit_changes_hash(self):
        before = split_sections("## Setup\n\nBody")[0]
        after = split_sections("## Setup\n\nBody!")[0]
        assert before.id == after.id
        assert before.hash != after.hash


class TestRebuild:

    def test_round_trip_structure(self):
        sections = split_sections(DOC)
        rebuilt = rebuild_document(sections)
        again = split_sections(rebuilt)
        assert [(s.id, s.content) for s in again] == [(s.id, s.content) for s in sections]

    def test_rebuild_is_idempotent(self):
        once = rebuild_document(split_sections(DOC))
        assert rebuild_document(split_sections(once)) == once

    def test_rebuild_layout(self):
        text = rebuild_document(split_sections("---\na: 1\n---\nIntro\n\n## A\n\nx\n\n\n## B\ny\n"))
        assert text == "---\na: 1\n---\nIntro\n\n## A\n\nx\n\n## B\ny"

    def test_translated_content_keeps_boundaries(self):
        sections = split_sections(DOC)
        translated = [s.with_content(f"{s.content}\n\n(translated)") if s.kind == "section" else s for s in sections]
        again = split_sections(rebuild_document(translated))
        assert [s.id for s in again] == [s.id for s in sections]
        assert again[-1].content.endswith("(translated)")

    def test_with_content_keeps_identity(self):
        s = split_sections("## A\n\nx")[0]
        t = s.with_content("## A\n\ny")
        assert (t.id, t.title) == (s.id, s.title)
        assert t.hash == short_hash("y")
