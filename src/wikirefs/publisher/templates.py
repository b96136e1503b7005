"""HTML templates for published pages.

Uses Jinja2 with inline template definitions. The document body is
compiled HTML and passed through unescaped; everything else is escaped.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from jinja2 import BaseLoader, Environment, select_autoescape
from markupsafe import Markup, escape

if TYPE_CHECKING:
    from ..models import Document


def _base_wrapper(title: str, content: str) -> str:
    """Wrap content in the base HTML layout.

    Plain string formatting keeps user content containing {{ }} away from Jinja.
    """
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)}</title>
</head>
<body>
    <main class="main">
        {content}
    </main>
</body>
</html>
"""


# Document page: compiled body plus the four relationship panels
DOCUMENT_TEMPLATE = """
<article class="document">
    <header><h1>{{ doc.title }}</h1></header>
    <div class="document-content">
        {{ html_content }}
    </div>
    {% for key, heading in panels %}
    {% if doc.data[key] %}
    <section class="wiki-refs {{ key }}">
        <h2>{{ heading }}</h2>
        <ul>
            {% for rec in doc.data[key] %}
            <li>{% if rec.type %}<span class="ref-type">{{ rec.type }}</span> {% endif %}<a href="{{ rec.url }}">{{ titles.get(rec.url, rec.url) }}</a></li>
            {% endfor %}
        </ul>
    </section>
    {% endif %}
    {% endfor %}
    {% if doc.data.missing %}
    <section class="wiki-refs missing">
        <h2>Missing</h2>
        <ul>
            {% for target in doc.data.missing %}
            <li>{{ target }}</li>
            {% endfor %}
        </ul>
    </section>
    {% endif %}
</article>
"""

PANELS = [
    ("forelinks", "Links"),
    ("backlinks", "Backlinks"),
    ("attributes", "Attributes"),
    ("attributed", "Attributed"),
]


def _get_env() -> Environment:
    """Create Jinja2 environment with autoescape enabled."""
    return Environment(
        loader=BaseLoader(),
        autoescape=select_autoescape(default=True, default_for_string=True),
    )


def render_document_page(doc: Document, html_content: str, titles: dict[str, str]) -> str:
    """Render a full page for one document.

    Args:
        doc: Document with generated reference metadata in ``data``.
        html_content: The compiled body.
        titles: Url to title map for labelling relationship entries.

    Returns:
        Complete HTML page string.
    """
    tmpl = _get_env().from_string(DOCUMENT_TEMPLATE)
    content = tmpl.render(
        doc=doc,
        html_content=Markup(html_content),
        panels=PANELS,
        titles=titles,
    )
    return _base_wrapper(doc.title, content)
