"""Data models for documents, references and the reference graph."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, Field

Shape = Literal["plain", "inline-typed", "attribute-typed", "attribute-type"]

ATTRIBUTE_SHAPES: frozenset[str] = frozenset({"attribute-typed", "attribute-type"})


class LinkRecord(BaseModel):
    """One end of a found reference, stored on a document."""

    type: str = ""  # Empty for plain references, the declared label otherwise
    url: str  # Url of the document at the other end


class RefsMetadata(BaseModel):
    """Reference graph data attached to a document.

    All five lists exist on every document once generation has run and are
    only ever appended to during a run.
    """

    forelinks: list[LinkRecord] = Field(default_factory=list)
    backlinks: list[LinkRecord] = Field(default_factory=list)
    attributes: list[LinkRecord] = Field(default_factory=list)
    attributed: list[LinkRecord] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)  # Raw target text, verbatim

    def as_data(self) -> dict[str, list[Any]]:
        """Plain dict/list form, as exposed to templates through ``Document.data``."""
        return self.model_dump()


class Document(BaseModel):
    """A loaded document, owned by the host site.

    The reference engine reads ``title``, ``slug`` and ``url``, replaces
    ``body`` during rendering and writes ``refs`` (mirrored into ``data``).
    """

    path: str  # Path relative to the collection directory
    collection: str
    slug: str  # File name without the .md suffix
    title: str
    url: str
    body: str = ""
    data: dict[str, Any] = Field(default_factory=dict)  # Front matter
    refs: RefsMetadata = Field(default_factory=RefsMetadata)

    @property
    def identifier(self) -> str:
        return self.title or self.slug


@dataclass(frozen=True)
class Reference:
    """A ``[[...]]`` token found in a document body."""

    shape: Shape
    raw_target: str
    start: int
    end: int
    text: str  # The literal token, including any ``label::`` prefix
    type_label: str | None = None
    label: str | None = None  # Display text from [[target|label]]
    line_start: int | None = None  # Attribute shapes: the whole line, newline included
    line_end: int | None = None

    @property
    def is_attribute(self) -> bool:
        return self.shape in ATTRIBUTE_SHAPES


@dataclass(frozen=True)
class Found:
    """A reference that resolved to a document."""

    document: Document


@dataclass(frozen=True)
class Missing:
    """A reference whose target is not in the corpus index."""

    raw_target: str


Resolution = Found | Missing
