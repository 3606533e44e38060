"""Heading anchors and table-of-contents generation over rendered HTML"""

import html
import re

from sitebuild.core.models import TocEntry
from sitebuild.core.utils.slug import slugify, unique_slug


HEADING_RE = re.compile(r'<h([1-6])(\s[^>]*)?>(.*?)</h\1\s*>', re.IGNORECASE | re.DOTALL)
TAG_RE = re.compile(r'<[^>]+>')
ID_ATTR_RE = re.compile(r'\s+id\s*=\s*(?:"[^"]*"|\'[^\']*\'|[^\s>]+)', re.IGNORECASE)
CLASS_ATTR_RE = re.compile(r'\s+class\s*=\s*(?:"([^"]*)"|\'([^\']*)\'|([^\s>]+))', re.IGNORECASE)
TOC_MARKER_RE = re.compile(r'<!--\s*toc\s*-->', re.IGNORECASE)

PERMALINK_CLASS = "has-permalink"
TOC_SUMMARY = "Table of contents"
FALLBACK_ANCHOR = "section"


def heading_text(inner_html: str) -> str:
    """Plain text of a heading's inner HTML: tags stripped, entities decoded, whitespace collapsed."""
    return " ".join(html.unescape(TAG_RE.sub("", inner_html)).split())


def _heading_attrs(attrs: str, anchor: str) -> str:
    """Drop any existing id, merge the permalink class into any existing class list."""
    attrs = ID_ATTR_RE.sub("", attrs or "")
    classes = []
    m = CLASS_ATTR_RE.search(attrs)
    if m:
        classes = next(g for g in m.groups() if g is not None).split()
        attrs = attrs[:m.start()] + attrs[m.end():]
    if PERMALINK_CLASS not in classes:
        classes.append(PERMALINK_CLASS)
    return f'{attrs} id="{anchor}" class="{" ".join(classes)}"'


def anchorize(page_html: str, toc_max: int = 3) -> tuple[str, list[TocEntry]]:
    """Give every heading up to toc_max a unique id and the permalink class.

    Returns the rewritten HTML and the headings in document order. Repeated
    heading text yields anchors with -1, -2, ... suffixes.
    """
    used: set[str] = set()
    entries: list[TocEntry] = []

    def _replace(m: re.Match) -> str:
        level = int(m.group(1))
        if level > toc_max:
            return m.group(0)
        inner = m.group(3)
        text = heading_text(inner)
        anchor = unique_slug(slugify(text) or FALLBACK_ANCHOR, used)
        entries.append(TocEntry(level=level, anchor=anchor, text=text))
        return f'<h{level}{_heading_attrs(m.group(2), anchor)}>{inner}</h{level}>'

    return HEADING_RE.sub(_replace, page_html), entries


def _toc_list(entries: list[TocEntry]) -> str:
    """Nested <ul> by heading level; entries deeper than the shallowest nest under the previous item."""
    if not entries:
        return "<ul></ul>"
    top = min(e.level for e in entries)
    items = []
    i = 0
    while i < len(entries):
        j = i + 1
        while j < len(entries) and entries[j].level > top:
            j += 1
        entry = entries[i]
        if entry.level == top:
            children = entries[i + 1:j]
            link = f'<a href="#{entry.anchor}">{html.escape(entry.text, quote=False)}</a>'
            items.append(f"<li>{link}{_toc_list(children) if children else ''}</li>")
        else:
            # deeper headings before the first top-level one
            items.append(f"<li>{_toc_list(entries[i:j])}</li>")
        i = j
    return f"<ul>{''.join(items)}</ul>"


def build_toc(entries: list[TocEntry]) -> str:
    """Collapsible TOC fragment; an empty TOC still renders the container."""
    return f'<details id="toc"><summary>{TOC_SUMMARY}</summary>{_toc_list(entries)}</details>'


def insert_toc(page_html: str, fragment: str) -> str:
    """Replace every <!-- toc --> marker with fragment, or put fragment first when there is none."""
    if TOC_MARKER_RE.search(page_html):
        return TOC_MARKER_RE.sub(lambda _: fragment, page_html)
    return f"{fragment}\n{page_html}"
