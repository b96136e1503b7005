"""Publisher and CLI tests."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from conftest import create_document
from wikirefs.cli import cli
from wikirefs.publisher import PublishConfig, SitePublisher
from wikirefs.publisher.builder import output_path


class TestOutputPath:
    def test_pretty_url_writes_index(self, tmp_path: Path):
        assert output_path(tmp_path, "/target/blank.a/") == tmp_path / "target" / "blank.a" / "index.html"

    def test_html_url_written_as_is(self, tmp_path: Path):
        assert output_path(tmp_path, "/target/blank.a.html") == tmp_path / "target" / "blank.a.html"

    def test_root(self, tmp_path: Path):
        assert output_path(tmp_path, "/") == tmp_path / "index.html"


class TestSitePublisher:
    """Tests for SitePublisher.publish."""

    def test_writes_pages_and_graph(self, tmp_site: Path, tmp_path: Path):
        output_dir = tmp_path / "out"

        result = SitePublisher(tmp_site, PublishConfig(output_dir=output_dir)).publish()

        assert result.documents_published == 4
        assert result.references_found == 1
        assert result.broken_links == [{"source": "/typed/link-missing-doc/", "target": "missing.doc"}]

        link_html = (output_dir / "typed" / "link" / "index.html").read_text()
        assert '<a class="wiki-link typed inline-typed" href="/target/blank.a/">blank a</a>' in link_html

        blank_a_html = (output_dir / "target" / "blank.a" / "index.html").read_text()
        assert "Backlinks" in blank_a_html
        assert 'href="/typed/link/"' in blank_a_html
        assert "Typed Link" in blank_a_html

        graph = json.loads((output_dir / "graph.json").read_text())
        assert {
            "source": "/typed/link/",
            "target": "/target/blank.a/",
            "origin": "forelinks",
            "type": "inline-typed",
        } in graph["edges"]
        assert len(graph["nodes"]) == 4

    def test_attribute_panel_and_line_removed(self, tmp_site: Path, tmp_path: Path):
        create_document(tmp_site, "typed", "book.md", "Book", "author::[[blank.b]]\n\nA book.")
        output_dir = tmp_path / "out"

        SitePublisher(tmp_site, PublishConfig(output_dir=output_dir)).publish()

        book_html = (output_dir / "typed" / "book" / "index.html").read_text()
        assert "author::" not in book_html
        assert "<p>A book.</p>" in book_html
        assert "Attributes" in book_html

        blank_b_html = (output_dir / "target" / "blank.b" / "index.html").read_text()
        assert "Attributed" in blank_b_html

    def test_page_title_is_escaped(self, tmp_site: Path, tmp_path: Path):
        create_document(tmp_site, "target", "qa.md", "Q & A <draft>", "")
        output_dir = tmp_path / "out"

        SitePublisher(tmp_site, PublishConfig(output_dir=output_dir)).publish()

        qa_html = (output_dir / "target" / "qa" / "index.html").read_text()
        assert "<title>Q &amp; A &lt;draft&gt;</title>" in qa_html

    def test_collections_without_output_not_written(self, tmp_site: Path, tmp_path: Path):
        (tmp_site / "_config.yml").write_text(
            "permalink: pretty\ncollections:\n  typed:\n    output: true\n  target:\n    output: false\n"
        )
        output_dir = tmp_path / "out"

        result = SitePublisher(tmp_site, PublishConfig(output_dir=output_dir)).publish()

        assert result.documents_published == 2
        assert result.references_found == 1
        assert not (output_dir / "target").exists()


class TestCli:
    """Tests for the wikirefs command line."""

    def test_build(self, runner: CliRunner, tmp_site: Path, tmp_path: Path):
        output_dir = tmp_path / "out"

        result = runner.invoke(cli, ["build", str(tmp_site), "--output", str(output_dir)])

        assert result.exit_code == 0, result.output
        assert "Published 4 documents" in result.output
        assert "[[missing.doc]]" in result.output
        assert (output_dir / "typed" / "link" / "index.html").exists()

    def test_build_json(self, runner: CliRunner, tmp_site: Path, tmp_path: Path):
        result = runner.invoke(
            cli, ["build", str(tmp_site), "--output", str(tmp_path / "out"), "--json"]
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["references_found"] == 1
        assert data["broken_links"][0]["target"] == "missing.doc"

    def test_graph_json(self, runner: CliRunner, tmp_site: Path):
        result = runner.invoke(cli, ["graph", str(tmp_site), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["/target/blank.a/"]["backlinks"] == [{"type": "inline-typed", "url": "/typed/link/"}]
        assert data["/typed/link-missing-doc/"]["missing"] == ["missing.doc"]
        assert data["/target/blank.b/"] == {
            "forelinks": [], "backlinks": [], "attributes": [], "attributed": [], "missing": [],
        }

    def test_graph_text(self, runner: CliRunner, tmp_site: Path):
        result = runner.invoke(cli, ["graph", str(tmp_site)])

        assert result.exit_code == 0, result.output
        assert "Blank A (/target/blank.a/)" in result.output
        assert "inline-typed /typed/link/" in result.output

    def test_invalid_config_is_reported(self, runner: CliRunner, tmp_site: Path):
        (tmp_site / "_config.yml").write_text("wikirefs:\n  enabled: maybe\n")

        result = runner.invoke(cli, ["graph", str(tmp_site)])

        assert result.exit_code == 1
        assert "invalid configuration" in result.output
