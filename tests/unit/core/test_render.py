"""Unit tests for core/render.py"""

from sitebuild.core import render
from sitebuild.core.models import RenderOptions
from sitebuild.core.render import highlight_code, make_renderer, render_markdown


def test_render_markdown_basic():
    """Markdown renders to HTML."""
    html = render_markdown("# Title\n\nSome *text*.\n")
    assert "<h1>Title</h1>" in html
    assert "<p>Some <em>text</em>.</p>" in html


def test_fenced_code_is_highlighted():
    """A fenced block with a known language is wrapped in classed token spans."""
    html = render_markdown('```python\nprint("hello")\n```\n')
    assert '<pre><code class="language-python">' in html
    assert '<span class="nb">print</span>' in html


def test_indented_code_is_highlighted(monkeypatch):
    """Indented code blocks go through the highlighter too."""
    monkeypatch.setattr(render, "highlight_code", lambda code, lang="", attrs="": "HL")
    html = render_markdown("Intro\n\n    def f():\n        return 1\n")
    assert "<pre><code>HL</code></pre>" in html


def test_unknown_language_falls_back_to_detection():
    """An unknown fence language does not fail the block."""
    out = highlight_code("x = 1\n", "no-such-language")
    assert "x" in out


def test_highlight_failure_emits_escaped_text(monkeypatch):
    """A highlighter error yields the block's escaped raw text only."""
    def _boom(*args, **kwargs):
        raise RuntimeError("lexer crashed")

    monkeypatch.setattr(render, "highlight", _boom)
    assert highlight_code('<b>"x"</b>\n', "python") == "&lt;b&gt;&quot;x&quot;&lt;/b&gt;\n"


def test_highlight_failure_does_not_abort_page(monkeypatch):
    """The rest of the page still renders when one block fails to highlight."""
    def _boom(*args, **kwargs):
        raise ValueError("bad token")

    monkeypatch.setattr(render, "highlight", _boom)
    html = render_markdown("# Title\n\n```js\nif (a < b) {}\n```\n")
    assert "<h1>Title</h1>" in html
    assert "if (a &lt; b) {}" in html


def test_highlight_disabled():
    """With highlighting off, code is escaped but not tokenized."""
    html = render_markdown('```python\nprint("hi")\n```\n', RenderOptions(highlight=False))
    assert "<span" not in html
    assert "print(&quot;hi&quot;)" in html


def test_inline_code_is_highlighted(monkeypatch):
    """Inline code spans go through the highlighter, without a trailing newline."""
    monkeypatch.setattr(render, "highlight_code", lambda code, lang="", attrs="": f"HL[{code}]\n")
    html = render_markdown("Use `x = 1` here.\n")
    assert "<p>Use <code>HL[x = 1]</code> here.</p>" in html


def test_inline_code_highlight_failure_is_escaped(monkeypatch):
    """A failing highlighter leaves the inline span as escaped text."""
    def _boom(*args, **kwargs):
        raise RuntimeError("lexer crashed")

    monkeypatch.setattr(render, "highlight", _boom)
    assert "<code>a &lt; b</code>" in render_markdown("Compare `a < b`.\n")


def test_inline_code_plain_when_highlight_disabled():
    assert "<code>x = 1</code>" in render_markdown("Use `x = 1` here.\n", RenderOptions(highlight=False))


def test_make_renderer_returns_fresh_instances():
    """Each call builds its own parser; no shared renderer state."""
    options = RenderOptions()
    assert make_renderer(options) is not make_renderer(options)
