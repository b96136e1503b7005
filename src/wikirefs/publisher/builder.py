"""Static site builder.

Loads a site's collections, runs reference generation, compiles each
document's rendered body to HTML and writes pages plus a graph export.
"""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from markdown_it import MarkdownIt

from ..config import SiteConfig, load_site_config
from ..generator import GenerationResult, WikiRefsGenerator
from ..models import Document
from ..site import load_documents
from .templates import render_document_page

log = logging.getLogger(__name__)

GRAPH_FILENAME = "graph.json"


@dataclass
class PublishConfig:
    """Configuration for site publishing."""

    output_dir: Path = field(default_factory=lambda: Path("_site"))
    clean: bool = True  # Remove output dir before build


@dataclass
class PublishResult:
    """Result of site publishing."""

    documents_published: int
    references_found: int
    broken_links: list[dict]  # [{source, target}]
    output_dir: str
    graph_path: str


def compile_markdown(body: str) -> str:
    """Compile a rendered body to HTML (CommonMark, raw HTML kept)."""
    return MarkdownIt("commonmark").render(body)


def output_path(output_dir: Path, url: str) -> Path:
    """File a url is written to: ``/a/b/`` -> ``a/b/index.html``."""
    relative = url.strip("/")
    if not relative:
        return output_dir / "index.html"
    if url.endswith("/"):
        return output_dir / relative / "index.html"
    return output_dir / relative


def build_graph_data(documents: list[Document]) -> dict:
    """Nodes and typed edges for every forward relationship."""
    nodes = [
        {"id": doc.url, "title": doc.title, "collection": doc.collection}
        for doc in documents
    ]
    edges = []
    for doc in documents:
        for origin in ("forelinks", "attributes"):
            for rec in getattr(doc.refs, origin):
                edges.append(
                    {"source": doc.url, "target": rec.url, "origin": origin, "type": rec.type}
                )
    return {"nodes": nodes, "edges": edges}


class SitePublisher:
    """Publishes a site directory to static HTML.

    Pipeline:
    1. Load ``_config.yml`` and every configured collection
    2. Generate references (graph pass, then render pass)
    3. Compile bodies with markdown-it and render pages via Jinja2
    4. Write ``graph.json``
    """

    def __init__(self, site_root: Path, config: PublishConfig | None = None):
        self.site_root = site_root
        self.config = config or PublishConfig()
        self.site_config: SiteConfig | None = None
        self.documents: list[Document] = []
        self.generation: GenerationResult | None = None

    def load(self) -> list[Document]:
        """Load configuration and documents and run reference generation."""
        self.site_config = load_site_config(self.site_root)
        self.documents = load_documents(self.site_root, self.site_config)
        self.generation = WikiRefsGenerator(self.site_config.wikirefs).generate(self.documents)
        return self.documents

    def publish(self) -> PublishResult:
        """Build the complete site.

        Returns:
            PublishResult with statistics and output paths.
        """
        self.load()
        output_dir = self.config.output_dir

        if self.config.clean and output_dir.exists():
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        titles = {doc.url: doc.title for doc in self.documents}
        published = 0

        for doc in self.documents:
            collection = self.site_config.collections.get(doc.collection)
            if collection is None or not collection.output:
                continue

            page_path = output_path(output_dir, doc.url)
            page_path.parent.mkdir(parents=True, exist_ok=True)
            html = render_document_page(doc, compile_markdown(doc.body), titles)
            page_path.write_text(html, encoding="utf-8")
            published += 1

        graph_path = output_dir / GRAPH_FILENAME
        graph_path.write_text(json.dumps(build_graph_data(self.documents), indent=2), encoding="utf-8")

        log.info("Published %d pages to %s", published, output_dir)

        return PublishResult(
            documents_published=published,
            references_found=self.generation.references_found,
            broken_links=self.generation.broken_links,
            output_dir=str(output_dir),
            graph_path=str(graph_path),
        )
