"""wikirefs: wiki-style cross-references and a typed backlink graph for markdown collections."""

__version__ = "0.3.0"
