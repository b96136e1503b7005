"""Reference generation across a whole corpus.

Runs in two passes over the eligible documents:

1. Graph pass: scan, resolve and record every reference. Recording writes
   the target's backward lists too, so no document's metadata is final
   until every document has been scanned.
2. Render pass: replace every document's reference tokens using the
   resolutions from pass 1.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from .config import WikiRefsConfig
from .graph import record
from .models import Document, Found, Missing, Reference, RefsMetadata, Resolution
from .parser.corpus_index import CorpusIndex
from .parser.scanner import scan_references
from .renderer import render_body
from .resolver import resolve

log = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Outcome of a generation run."""

    documents_processed: int = 0
    references_found: int = 0
    broken_links: list[dict] = field(default_factory=list)  # [{source, target}]


class WikiRefsGenerator:
    """Resolves references and builds the reference graph for a corpus."""

    def __init__(self, config: WikiRefsConfig | None = None):
        self.config = config or WikiRefsConfig()

    def generate(self, documents: Sequence[Document]) -> GenerationResult:
        """Run both passes over ``documents``.

        Every document, eligible or not, ends up with empty or populated
        ``forelinks``, ``backlinks``, ``attributes``, ``attributed`` and
        ``missing`` in both ``refs`` and ``data``.

        Args:
            documents: The whole corpus, in load order.

        Returns:
            GenerationResult with counts and unresolved references.
        """
        for doc in documents:
            doc.refs = RefsMetadata()

        result = GenerationResult()

        if not self.config.enabled:
            log.debug("wikirefs disabled; skipping %d documents", len(documents))
            self._publish_metadata(documents)
            return result

        eligible = [doc for doc in documents if self.config.is_eligible(doc.collection)]
        index = CorpusIndex.build(eligible)

        # Pass 1: graph
        resolved: dict[int, list[tuple[Reference, Resolution]]] = {}
        for doc in eligible:
            pairs = self._scan_and_record(doc, index)
            resolved[id(doc)] = pairs
            for _, resolution in pairs:
                if isinstance(resolution, Found):
                    result.references_found += 1
                else:
                    result.broken_links.append({"source": doc.url, "target": resolution.raw_target})

        self._publish_metadata(documents)

        # Pass 2: render
        for doc in eligible:
            pairs = resolved[id(doc)]
            if pairs:
                doc.body = render_body(doc.body, pairs, self.config)

        result.documents_processed = len(eligible)
        log.info(
            "Processed %d documents: %d references resolved, %d missing",
            result.documents_processed,
            result.references_found,
            len(result.broken_links),
        )
        return result

    def _scan_and_record(
        self, doc: Document, index: CorpusIndex
    ) -> list[tuple[Reference, Resolution]]:
        pairs = []
        references = scan_references(
            doc.body,
            attributes=self.config.attributes,
            invalid_class=self.config.css.invalid,
        )
        for reference in references:
            resolution = resolve(reference, index)
            record(doc, reference, resolution)
            pairs.append((reference, resolution))

        log.debug(
            "%s: %d references (%d missing)",
            doc.url,
            len(pairs),
            sum(1 for _, res in pairs if isinstance(res, Missing)),
        )
        return pairs

    @staticmethod
    def _publish_metadata(documents: Sequence[Document]) -> None:
        """Mirror each document's graph lists into its template data."""
        for doc in documents:
            doc.data.update(doc.refs.as_data())
