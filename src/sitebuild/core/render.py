"""Markdown -> HTML rendering with Pygments code highlighting"""

import logging

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name, guess_lexer
from pygments.util import ClassNotFound

from sitebuild.core.models import RenderOptions


logger = logging.getLogger(__name__)


def _lexer_for(code: str, lang: str):
    """Lexer named by the fence info when Pygments knows it, else auto-detected from the code."""
    if lang:
        try:
            return get_lexer_by_name(lang)
        except ClassNotFound:
            logger.debug("Unknown code language %r; auto-detecting", lang)
    return guess_lexer(code)


def highlight_code(code: str, lang: str = "", _attrs: str = "") -> str:
    """Return code wrapped in classed token spans, or its escaped text if highlighting fails."""
    try:
        return highlight(code, _lexer_for(code, lang), HtmlFormatter(nowrap=True))
    except Exception as e:
        logger.debug("Highlighting failed (%s); emitting plain code block", e)
        return escapeHtml(code)


def _render_code_block(self, tokens, idx, options, env) -> str:
    """Indented code blocks get the same highlighting as fences."""
    return f"<pre><code>{highlight_code(tokens[idx].content)}</code></pre>\n"


def _render_code_inline(self, tokens, idx, options, env) -> str:
    token = tokens[idx]
    code = highlight_code(token.content).rstrip("\n")
    return f"<code{self.renderAttrs(token)}>{code}</code>"


def make_renderer(options: RenderOptions) -> MarkdownIt:
    """Build a MarkdownIt instance for one render call; nothing is shared between calls."""
    if not options.highlight:
        return MarkdownIt(options.parser_config)
    md = MarkdownIt(options.parser_config, options_update={"highlight": highlight_code})
    md.add_render_rule("code_block", _render_code_block)
    md.add_render_rule("code_inline", _render_code_inline)
    return md


def render_markdown(body: str, options: RenderOptions = None) -> str:
    """Render a Markdown body to HTML."""
    return make_renderer(options or RenderOptions()).render(body)
