"""Reference scanning for [[wikilink]] tokens.

Recognized shapes, tested per line in this order:

    label::[[target]]              attribute-typed (alone on its line)
    label::[[a]], [[b]]            attribute-type, one reference per item
    text label::[[target]] text    inline-typed
    text [[target]] text           plain

Any token may carry display text: ``[[target|shown text]]``.

Tokens inside code (fenced or indented blocks, inline spans) or an already
rendered invalid-link marker are left alone, so scanning rendered output finds nothing.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from functools import lru_cache

from markdown_it import MarkdownIt

from ..config import INVALID_LINK_CLASS
from ..models import Reference

# Target: no brackets or pipes. Optional |display text: no brackets.
_TOKEN = r"\[\[(?P<{t}>[^\[\]|\n]+)(?:\|(?P<{l}>[^\[\]\n]+))?\]\]"
_LABEL = r"[A-Za-z0-9_-]+"

TOKEN_PATTERN = re.compile(_TOKEN.format(t="target", l="label"))

ATTRIBUTE_LINE_PATTERN = re.compile(
    r"^[ \t]*(?P<type>" + _LABEL + r")::[ \t]*"
    r"(?P<items>\[\[[^\[\]\n]+\]\](?:[ \t]*,[ \t]*\[\[[^\[\]\n]+\]\])*)"
    r"[ \t]*$"
)


@lru_cache(maxsize=8)
def _inline_pattern(invalid_class: str) -> re.Pattern[str]:
    # Alternatives are tried left to right at each position: a rendered
    # marker is skipped whole, and a label claims its token before the
    # plain alternative can.
    return re.compile(
        r"(?P<marker><span class=\"" + re.escape(invalid_class) + r"\">.*?</span>)"
        r"|(?<![A-Za-z0-9_:-])(?P<type>" + _LABEL + r")::" + _TOKEN.format(t="ttarget", l="tlabel")
        + r"|" + _TOKEN.format(t="target", l="label")
    )


_parser: MarkdownIt | None = None


def _get_parser() -> MarkdownIt:
    global _parser
    if _parser is None:
        _parser = MarkdownIt("commonmark")
    return _parser


def _code_span_pattern(markup: str) -> re.Pattern[str]:
    delim = re.escape(markup)
    return re.compile(rf"(?<!`){delim}(?!`).+?(?<!`){delim}(?!`)", re.DOTALL)


def _code_ranges(body: str) -> list[tuple[int, int]]:
    """Character ranges covered by code blocks and inline code spans.

    Block positions come from markdown-it's line maps, so indented fences
    (list items) and indented code blocks count too. Inline code is located
    inside its paragraph's lines, in the order markdown-it reports it.
    """
    # markdown-it counts lines on "\n" only
    offsets = [0]
    for line in body.split("\n"):
        offsets.append(min(offsets[-1] + len(line) + 1, len(body)))

    def char_range(line_map: list[int]) -> tuple[int, int]:
        first, last = line_map
        return offsets[min(first, len(offsets) - 1)], offsets[min(last, len(offsets) - 1)]

    ranges: list[tuple[int, int]] = []
    for token in _get_parser().parse(body):
        if token.map is None:
            continue
        if token.type in ("fence", "code_block"):
            ranges.append(char_range(token.map))
        elif token.type == "inline" and token.children:
            cursor, end = char_range(token.map)
            for child in token.children:
                if child.type != "code_inline":
                    continue
                span = _code_span_pattern(child.markup).search(body, cursor, end)
                if span is not None:
                    ranges.append(span.span())
                    cursor = span.end()
    return ranges


def _inside(pos: int, ranges: list[tuple[int, int]]) -> bool:
    return any(start <= pos < end for start, end in ranges)


def _valid_target(target: str | None) -> bool:
    return bool(target and target.strip())


def _attribute_references(line: str, offset: int, line_end: int) -> list[Reference] | None:
    """References declared by an attribute line, or None if the line is not one."""
    match = ATTRIBUTE_LINE_PATTERN.match(line)
    if match is None:
        return None

    type_label = match.group("type")
    # The label and separator exactly as written, e.g. "author:: "
    prefix = line[match.start("type") : match.start("items")]
    items = list(TOKEN_PATTERN.finditer(line, match.start("items"), match.end("items")))
    if len(items) != match.group("items").count("[["):
        return None
    if not all(_valid_target(item.group("target")) for item in items):
        return None

    shape = "attribute-typed" if len(items) == 1 else "attribute-type"
    references = []
    for index, item in enumerate(items):
        # The first item's span starts at its label; list items stand alone
        start = match.start("type") if index == 0 else item.start()
        references.append(
            Reference(
                shape=shape,
                raw_target=item.group("target"),
                start=offset + start,
                end=offset + item.end(),
                text=prefix + item.group(0),
                type_label=type_label,
                label=item.group("label"),
                line_start=offset,
                line_end=line_end,
            )
        )
    return references


def _inline_references(
    line: str,
    offset: int,
    code: list[tuple[int, int]],
    invalid_class: str,
) -> Iterator[Reference]:
    for match in _inline_pattern(invalid_class).finditer(line):
        if match.group("marker") or _inside(offset + match.start(), code):
            continue

        if match.group("type"):
            target = match.group("ttarget")
            if not _valid_target(target):
                continue
            yield Reference(
                shape="inline-typed",
                raw_target=target,
                start=offset + match.start(),
                end=offset + match.end(),
                text=match.group(0),
                type_label=match.group("type"),
                label=match.group("tlabel"),
            )
        else:
            target = match.group("target")
            if not _valid_target(target):
                continue
            yield Reference(
                shape="plain",
                raw_target=target,
                start=offset + match.start(),
                end=offset + match.end(),
                text=match.group(0),
                label=match.group("label"),
            )


def scan_references(
    body: str,
    *,
    attributes: bool = True,
    invalid_class: str = INVALID_LINK_CLASS,
) -> Iterator[Reference]:
    """Yield the references in a document body, left to right.

    Each call starts a fresh scan. Malformed tokens (unterminated, empty
    target) are not references and are skipped.

    Args:
        body: Raw markdown text.
        attributes: Recognize whole-line attribute references. When off,
            such lines are scanned as inline-typed prose.
        invalid_class: Class of rendered missing-reference markers, whose
            contents are never scanned.

    Yields:
        Reference values in order of appearance, never overlapping.
    """
    code = _code_ranges(body)
    offset = 0

    for raw_line in body.splitlines(keepends=True):
        line_end = offset + len(raw_line)
        line = raw_line.rstrip("\r\n")

        if "[[" in line:
            declared = None
            if attributes and not _inside(offset, code):
                declared = _attribute_references(line, offset, line_end)

            if declared is not None:
                yield from declared
            else:
                yield from _inline_references(line, offset, code, invalid_class)

        offset = line_end
