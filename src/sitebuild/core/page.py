"""Page assembly: render a Document, merge it into the template, and write the result"""

from pathlib import Path
from typing import Any

from sitebuild.core.models import Document, RenderedPage, RenderOptions
from sitebuild.core.render import render_markdown
from sitebuild.core.template import render_template
from sitebuild.core.toc import anchorize, build_toc, insert_toc
from sitebuild.core.utils.fs import write_atomic


def _text(value: Any) -> str:
    """Front matter value as a string; missing or falsy values become ''."""
    return str(value) if value else ""


def output_path(source_path: Path) -> Path:
    """Source-relative path with its extension rewritten to .html."""
    return source_path.with_suffix(".html")


def render_page(doc: Document, options: RenderOptions) -> RenderedPage:
    """Markdown -> HTML, then heading anchors, then the TOC fragment."""
    body_html = render_markdown(doc.body, options)
    body_html, toc = anchorize(body_html, options.toc_max)
    return RenderedPage(
        document=doc,
        html=insert_toc(body_html, build_toc(toc)),
        toc=toc,
        title=_text(doc.frontmatter.get("title")),
        link=_text(doc.frontmatter.get("link")),
    )


def page_data(page: RenderedPage) -> dict[str, Any]:
    """Template data: front matter fields, overridden by the computed fields."""
    src = page.document.source_path
    return {
        **page.document.frontmatter,
        "title": page.title,
        "link": page.link,
        "content": page.html,
        "file": {"path": src.as_posix(), "relative": page.output_path.as_posix(), "stem": src.stem},
    }


def build_page(doc: Document, template: str, options: RenderOptions) -> str:
    """Full HTML document for one source document."""
    return render_template(template, page_data(render_page(doc, options)))


def write_page(html: str, source_path: Path, output_root: Path) -> Path:
    """Write the page under output_root at the mirrored .html path."""
    return write_atomic(output_root / output_path(source_path), html)
