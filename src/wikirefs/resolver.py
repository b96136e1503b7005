"""Resolve scanned references against the corpus index."""

from __future__ import annotations

from .models import Found, Missing, Reference, Resolution
from .parser.corpus_index import CorpusIndex


def resolve(reference: Reference, index: CorpusIndex) -> Resolution:
    """Look up a reference's target.

    Pure: the index is only read. A missing target keeps its raw text
    verbatim for diagnostics.
    """
    document = index.lookup(reference.raw_target)
    if document is None:
        return Missing(reference.raw_target)
    return Found(document)
