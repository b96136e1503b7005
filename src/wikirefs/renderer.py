"""Replace reference tokens with HTML fragments.

Fragments produced:

    <a class="wiki-link" href="URL">title</a>                  plain, found
    <a class="wiki-link typed LABEL" href="URL">title</a>      inline-typed, found
    <span class="invalid-wiki-link">label::[[target]]</span>   any shape, missing

Attribute lines whose references all resolve are removed from the body.
"""

from __future__ import annotations

from collections.abc import Sequence

from markupsafe import escape

from .config import WikiRefsConfig
from .models import Found, Missing, Reference, Resolution


def _escape_html(text: str) -> str:
    """Escape HTML, plus square brackets so rendered text never reads as a token."""
    return str(escape(text)).replace("[", "&#91;").replace("]", "&#93;")


def _link_text(reference: Reference, resolution: Found, config: WikiRefsConfig) -> str:
    if reference.label and reference.label.strip():
        return reference.label.strip()
    title = resolution.document.title
    return title.lower() if config.downcase_titles else title


def render_reference(reference: Reference, resolution: Resolution, config: WikiRefsConfig) -> str:
    """Render the fragment that replaces a single reference token."""
    css = config.css

    if isinstance(resolution, Missing):
        # The token is shown exactly as written
        return f'<span class="{css.invalid}">{reference.text}</span>'

    classes = [css.wiki]
    if reference.type_label:
        classes.extend([css.typed, reference.type_label])

    return (
        f'<a class="{" ".join(classes)}" href="{_escape_html(resolution.document.url)}">'
        f"{_escape_html(_link_text(reference, resolution, config))}</a>"
    )


def render_body(
    body: str,
    resolved: Sequence[tuple[Reference, Resolution]],
    config: WikiRefsConfig,
) -> str:
    """Substitute every reference in ``body`` in one left-to-right pass.

    Args:
        body: The body the references were scanned from.
        resolved: Reference/resolution pairs in scan order.
        config: Reference settings (css classes, title casing).

    Returns:
        The new body. Text outside reference spans is unchanged.
    """
    parts: list[str] = []
    cursor = 0
    i = 0

    while i < len(resolved):
        reference, resolution = resolved[i]

        if not reference.is_attribute:
            parts.append(body[cursor : reference.start])
            parts.append(render_reference(reference, resolution, config))
            cursor = reference.end
            i += 1
            continue

        # An attribute line goes away entirely, unless something on it failed
        line_start, line_end = reference.line_start, reference.line_end
        group = []
        while i < len(resolved) and resolved[i][0].line_start == line_start:
            group.append(resolved[i])
            i += 1

        parts.append(body[cursor:line_start])
        markers = [
            render_reference(ref, res, config) for ref, res in group if isinstance(res, Missing)
        ]
        if markers:
            line = body[line_start:line_end]
            newline = line[len(line.rstrip("\r\n")) :]
            parts.append(", ".join(markers) + newline)
        cursor = line_end

    parts.append(body[cursor:])
    return "".join(parts)
