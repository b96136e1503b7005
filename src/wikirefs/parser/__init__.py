"""Reference scanning and corpus indexing."""

from .corpus_index import CorpusIndex, normalize_key
from .scanner import scan_references

__all__ = [
    "CorpusIndex",
    "normalize_key",
    "scan_references",
]
