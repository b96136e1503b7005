#!/usr/bin/env python3
"""
wikirefs: resolve [[wiki-style]] references across site collections

Usage:
    wikirefs build path/to/site            # Publish HTML to path/to/site/_site
    wikirefs build site --output out/      # Publish HTML elsewhere
    wikirefs graph path/to/site --json     # Dump each document's reference metadata
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click

from . import __version__ as WIKIREFS_VERSION
from ._logging import configure_logging
from .config import ConfigurationError
from .site import ParseError


def _emit(data: Any, as_json: bool, text: str) -> None:
    if as_json:
        click.echo(json.dumps(data, indent=2, default=str))
    else:
        click.echo(text)


@click.group()
@click.version_option(version=WIKIREFS_VERSION, prog_name="wikirefs")
def cli():
    """Resolve wiki-style references and build a typed backlink graph."""
    configure_logging()


@cli.command()
@click.argument("site", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    help="Output directory (default: SITE/_site)",
)
@click.option("--no-clean", is_flag=True, help="Keep existing files in the output directory")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def build(site: Path, output: Path | None, no_clean: bool, as_json: bool):
    """Publish SITE to static HTML.

    \b
    Examples:
      wikirefs build .
      wikirefs build docs/ --output public/
    """
    from .publisher import PublishConfig, SitePublisher

    config = PublishConfig(output_dir=output or site / "_site", clean=not no_clean)
    try:
        result = SitePublisher(site, config).publish()
    except (ConfigurationError, ParseError) as e:
        raise click.ClickException(str(e)) from e

    lines = [
        f"Published {result.documents_published} documents to {result.output_dir}",
        f"References resolved: {result.references_found}",
        f"Missing references: {len(result.broken_links)}",
    ]
    for broken in result.broken_links:
        lines.append(f"  {broken['source']}: [[{broken['target']}]]")

    _emit(
        {
            "documents_published": result.documents_published,
            "references_found": result.references_found,
            "broken_links": result.broken_links,
            "output_dir": result.output_dir,
            "graph_path": result.graph_path,
        },
        as_json,
        "\n".join(lines),
    )


@cli.command()
@click.argument("site", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def graph(site: Path, as_json: bool):
    """Show every document's reference metadata without writing pages."""
    from .publisher import SitePublisher

    try:
        documents = SitePublisher(site).load()
    except (ConfigurationError, ParseError) as e:
        raise click.ClickException(str(e)) from e

    data = {doc.url: doc.refs.as_data() for doc in documents}

    lines = []
    for doc in documents:
        lines.append(f"{doc.title} ({doc.url})")
        for key, values in doc.refs.as_data().items():
            if not values:
                continue
            lines.append(f"  {key}:")
            for value in values:
                if isinstance(value, dict):
                    label = f"{value['type']} " if value["type"] else ""
                    lines.append(f"    {label}{value['url']}")
                else:
                    lines.append(f"    {value}")

    _emit(data, as_json, "\n".join(lines))


if __name__ == "__main__":
    cli()
