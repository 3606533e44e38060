"""Unit tests for core/page.py"""

from pathlib import Path

import pytest

from sitebuild.core.models import Document, RenderOptions
from sitebuild.core.page import build_page, output_path, page_data, render_page, write_page
from sitebuild.core.parse import extract_frontmatter


INTRO_MD = """\
---
title: Intro
---
# Intro
## Setup
Some text.
"""


def _doc(raw: str, path: str = "docs/intro.md") -> Document:
    fm, body = extract_frontmatter(raw)
    return Document(source_path=Path(path), raw_content=raw, frontmatter=fm, body=body)


@pytest.mark.parametrize("src,expected", [
    ("intro.md", "intro.html"),
    ("docs/intro.md", "docs/intro.html"),
    ("docs/v1.2/notes.md", "docs/v1.2/notes.html"),
    ("a/b/c.markdown", "a/b/c.html"),
])
def test_output_path_rewrites_extension(src, expected):
    """Only the extension changes; directory and base name are kept."""
    out = output_path(Path(src))
    assert out == Path(expected)
    assert out.suffix == ".html"
    assert out.parent == Path(src).parent


def test_render_page_intro_example():
    """Headings get ids, the TOC lists them in order, and the title comes from front matter."""
    page = render_page(_doc(INTRO_MD), RenderOptions())
    assert page.title == "Intro"
    assert page.link == ""
    assert '<h1 id="intro" class="has-permalink">Intro</h1>' in page.html
    assert '<h2 id="setup" class="has-permalink">Setup</h2>' in page.html
    assert [(e.level, e.anchor) for e in page.toc] == [(1, "intro"), (2, "setup")]
    toc_start = page.html.index('<details id="toc">')
    assert page.html.index('href="#intro"', toc_start) < page.html.index('href="#setup"', toc_start)
    assert page.output_path == Path("docs/intro.html")


def test_render_page_toc_marker():
    """A <!-- toc --> marker in the source decides where the TOC goes."""
    page = render_page(_doc("Lead.\n\n<!-- toc -->\n\n# A\n", "a.md"), RenderOptions())
    assert page.html.startswith("<p>Lead.</p>")
    assert page.html.index("<details") < page.html.index("<h1")


def test_render_page_empty_toc():
    """A page without headings still carries the empty TOC container."""
    page = render_page(_doc("Just text.\n", "plain.md"), RenderOptions())
    assert page.toc == []
    assert "<ul></ul></details>" in page.html


def test_page_data_computed_fields_win():
    """Front matter fields pass through; title/link/content are the computed values."""
    doc = _doc("---\ntitle: T\nauthor: Ann\ncontent: ignored\nlink: null\n---\nBody\n", "x.md")
    data = page_data(render_page(doc, RenderOptions()))
    assert data["author"] == "Ann"
    assert data["title"] == "T"
    assert data["link"] == ""
    assert "<p>Body</p>" in data["content"]
    assert data["file"] == {"path": "x.md", "relative": "x.html", "stem": "x"}


def test_build_page_fills_template():
    html = build_page(_doc(INTRO_MD), "<title><%= title %></title><main><%= content %></main>", RenderOptions())
    assert html.startswith("<title>Intro</title><main>")
    assert 'id="setup"' in html


def test_build_page_is_deterministic():
    """Same document, same template -> identical output."""
    doc = _doc(INTRO_MD + "\n```python\nx = [1, 2]\n```\n")
    assert build_page(doc, "<%= content %>", RenderOptions()) == build_page(doc, "<%= content %>", RenderOptions())


def test_write_page_mirrors_path(tmp_path):
    out = write_page("<p>x</p>", Path("docs/intro.md"), tmp_path / "dist")
    assert out == tmp_path / "dist" / "docs" / "intro.html"
    assert out.read_text() == "<p>x</p>"
