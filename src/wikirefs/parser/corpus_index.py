"""Identifier-to-document index for resolving wiki-style references.

A reference target matches a document by file name (``[[blank.a]]``) or by
title (``[[Blank A]]``), regardless of case, spacing or punctuation.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Collection, Iterable

from ..models import Document

log = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[\W_]+")


def normalize_key(text: str) -> str:
    """Normalize a title, file name or reference target for lookup.

    Lower-cases and drops whitespace, punctuation and underscores, so
    "Blank A", "blank.a" and "blank_a" share the key "blanka".
    """
    text = text.strip()
    if text.lower().endswith(".md"):
        text = text[:-3]
    return _NON_ALNUM.sub("", text.lower())


class CorpusIndex:
    """Read-only lookup from normalized identifier to document.

    Build with :meth:`build`. File names are registered for every document
    before any title, and the first registration of a key wins, so a file
    name always beats another document's title and the result depends only
    on the order documents are given in.
    """

    def __init__(self, entries: dict[str, Document]) -> None:
        self._entries = entries

    @classmethod
    def build(
        cls,
        documents: Iterable[Document],
        eligible_collections: Collection[str] | None = None,
    ) -> CorpusIndex:
        """Index the documents that belong to reference-target collections.

        Args:
            documents: All loaded documents, in load order.
            eligible_collections: Collections whose documents may be
                referenced. None means every collection.

        Returns:
            The index.
        """
        docs = [
            doc
            for doc in documents
            if eligible_collections is None or doc.collection in eligible_collections
        ]

        entries: dict[str, Document] = {}

        def register(raw: str, doc: Document) -> None:
            key = normalize_key(raw)
            if not key:
                return
            existing = entries.get(key)
            if existing is None:
                entries[key] = doc
            elif existing is not doc:
                log.debug(
                    "Identifier %r of %s/%s already taken by %s/%s",
                    raw,
                    doc.collection,
                    doc.path,
                    existing.collection,
                    existing.path,
                )

        for doc in docs:
            register(doc.slug, doc)
        for doc in docs:
            register(doc.title, doc)

        log.debug("Indexed %d documents under %d identifiers", len(docs), len(entries))
        return cls(entries)

    def lookup(self, raw_target: str) -> Document | None:
        return self._entries.get(normalize_key(raw_target))

    def __contains__(self, raw_target: object) -> bool:
        return isinstance(raw_target, str) and self.lookup(raw_target) is not None

    def __len__(self) -> int:
        return len(self._entries)
