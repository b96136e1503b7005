"""Load site collections into documents.

A site is a directory with an optional ``_config.yml`` and one
``_<collection>`` directory per configured collection, holding markdown
files with YAML front matter.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

import frontmatter

from .config import SiteConfig
from .models import Document

log = logging.getLogger(__name__)


class ParseError(Exception):
    """Raised when a document cannot be loaded."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


def document_url(collection: str, rel_path: str, *, pretty: bool) -> str:
    """Compute a document url from its collection and relative path.

    Examples:
        ("target", "blank.a.md", pretty=True)  -> "/target/blank.a/"
        ("target", "blank.a.md", pretty=False) -> "/target/blank.a.html"
    """
    stem = str(PurePosixPath(rel_path).with_suffix(""))
    if pretty:
        return f"/{collection}/{stem}/"
    return f"/{collection}/{stem}.html"


def load_document(path: Path, collection: str, collection_dir: Path, *, pretty: bool) -> Document:
    """Load one markdown file.

    Raises:
        ParseError: If the front matter cannot be parsed.
    """
    try:
        post = frontmatter.load(str(path))
    except Exception as e:
        raise ParseError(path, f"Failed to parse frontmatter: {e}") from e

    rel_path = path.relative_to(collection_dir).as_posix()
    slug = path.name[:-3] if path.name.endswith(".md") else path.stem

    data = dict(post.metadata)
    title = data.get("title")
    title = str(title) if title else slug

    url = data.get("permalink") or document_url(collection, rel_path, pretty=pretty)

    return Document(
        path=rel_path,
        collection=collection,
        slug=slug,
        title=title,
        url=str(url),
        body=post.content,
        data=data,
    )


def load_documents(site_root: Path, site_config: SiteConfig) -> list[Document]:
    """Load every configured collection, sorted by collection then path.

    Collections without a ``_<name>`` directory are skipped. Files whose
    name starts with ``_`` or ``.`` are ignored.

    Raises:
        ParseError: If any document cannot be loaded.
    """
    documents: list[Document] = []

    for collection in sorted(site_config.collections):
        collection_dir = site_root / f"_{collection}"
        if not collection_dir.is_dir():
            log.debug("Collection %s has no directory at %s", collection, collection_dir)
            continue

        for md_file in sorted(collection_dir.rglob("*.md")):
            rel_parts = md_file.relative_to(collection_dir).parts
            if any(part.startswith(("_", ".")) for part in rel_parts):
                continue
            documents.append(
                load_document(md_file, collection, collection_dir, pretty=site_config.pretty_urls)
            )

    log.debug("Loaded %d documents from %s", len(documents), site_root)
    return documents
