"""Shared test fixtures for the wikirefs test suite.

Design:
- tmp_site: isolated site directory with the typed/target collections
- make_doc: in-memory Document factory for engine-level tests
- runner: CliRunner with proper isolation
"""

from pathlib import Path
from typing import Callable

import pytest
from click.testing import CliRunner

from wikirefs.models import Document

# ─────────────────────────────────────────────────────────────────────────────
# Core Fixtures
# ─────────────────────────────────────────────────────────────────────────────


SITE_CONFIG = """permalink: pretty
collections:
  typed:
    output: true
  target:
    output: true
"""


@pytest.fixture
def runner() -> CliRunner:
    """CLI runner with isolated environment.

    Logging is kept to errors so warnings for unresolved references
    don't interleave with --json output.
    """
    return CliRunner(env={"WIKIREFS_LOG_LEVEL": "ERROR"})


@pytest.fixture
def tmp_site(tmp_path: Path) -> Path:
    """Create an isolated site with typed-link and target collections.

    Creates:
    - _typed/link.md               "Typed Link" -> inline-typed::[[blank.a]]
    - _typed/link-missing-doc.md   "Typed Link Missing Doc" -> inline-typed::[[missing.doc]]
    - _target/blank.a.md           "Blank A" (no content)
    - _target/blank.b.md           "Blank B" (no content)
    """
    site = tmp_path / "site"
    site.mkdir()
    (site / "_config.yml").write_text(SITE_CONFIG)

    create_document(
        site, "typed", "link.md", "Typed Link",
        "This doc contains a wikilink to inline-typed::[[blank.a]].",
    )
    create_document(
        site, "typed", "link-missing-doc.md", "Typed Link Missing Doc",
        "This doc contains a wikilink to inline-typed::[[missing.doc]].",
    )
    create_document(site, "target", "blank.a.md", "Blank A", "")
    create_document(site, "target", "blank.b.md", "Blank B", "")

    return site


@pytest.fixture
def make_doc() -> Callable[..., Document]:
    """Factory for in-memory documents.

    Usage:
        def test_something(make_doc):
            doc = make_doc("note", "See [[other]].")
    """
    def _make(
        slug: str,
        body: str = "",
        *,
        title: str | None = None,
        collection: str = "notes",
    ) -> Document:
        return Document(
            path=f"{slug}.md",
            collection=collection,
            slug=slug,
            title=title or slug,
            url=f"/{collection}/{slug}/",
            body=body,
        )
    return _make


# ─────────────────────────────────────────────────────────────────────────────
# Helper Functions (for test code, not fixtures)
# ─────────────────────────────────────────────────────────────────────────────


def create_document(site: Path, collection: str, name: str, title: str, content: str) -> Path:
    """Helper to create a collection document with front matter.

    Usage in tests:
        from conftest import create_document
        create_document(tmp_site, "target", "blank.c.md", "Blank C", "")
    """
    doc_path = site / f"_{collection}" / name
    doc_path.parent.mkdir(parents=True, exist_ok=True)
    doc_path.write_text(f"""---
title: {title}
---

{content}
""")
    return doc_path


def find_by_title(documents: list[Document], title: str) -> Document:
    """Return the document with the given title."""
    for doc in documents:
        if doc.title == title:
            return doc
    raise LookupError(title)
