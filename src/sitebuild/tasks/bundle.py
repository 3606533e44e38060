"""Bundle ("vulcanize") stage: flatten HTML imports, then split inline scripts into one JS file"""

import logging
from pathlib import Path
from urllib.parse import urlparse

import htmlmin
from bs4 import BeautifulSoup, Comment

from sitebuild.config import Settings
from sitebuild.core.utils.fs import write_atomic
from sitebuild.errors import StageError
from sitebuild.tasks.scripts import minify_js
from sitebuild.tasks.style import license_comment


logger = logging.getLogger(__name__)

ELEMENTS_DIR = "elements"
ENTRY = "elements.html"
JS_TYPES = {"text/javascript", "application/javascript", "module"}


def _is_local(url: str) -> bool:
    parsed = urlparse(url)
    return bool(url) and not parsed.scheme and not parsed.netloc and not url.startswith("/")


def _read(path: Path, referrer: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, ValueError) as e:
        raise StageError("bundle", f"Cannot read {path} (referenced from {referrer}): {e}") from e


class Vulcanizer:
    """Inlines a document's import graph; each imported file is inlined once."""

    def __init__(self):
        self.seen: set[Path] = set()

    def load(self, path: Path, referrer: Path = None) -> BeautifulSoup:
        path = path.resolve()
        self.seen.add(path)
        soup = BeautifulSoup(_read(path, referrer or path), "html.parser")
        self._inline(soup, path)
        return soup

    def _inline(self, soup: BeautifulSoup, path: Path) -> None:
        base = path.parent
        for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
            comment.extract()

        for link in soup.find_all("link", href=True):
            rel = link.get("rel") or []
            href = link["href"]
            if not _is_local(href):
                continue
            target = (base / href).resolve()
            if "import" in rel:
                if target not in self.seen:
                    child = self.load(target, path)
                    for node in list(child.contents):
                        link.insert_before(node)
                link.decompose()
            elif "stylesheet" in rel:
                style = soup.new_tag("style")
                style.string = _read(target, path)
                link.replace_with(style)

        for script in soup.find_all("script", src=True):
            if not _is_local(script["src"]):
                continue
            code = _read((base / script["src"]).resolve(), path)
            del script["src"]
            script.string = code


def crisp(soup: BeautifulSoup, js_name: str) -> tuple[str, str]:
    """Move inline scripts, in document order, into one JS file referenced at the end of the body."""
    bodies = []
    for script in soup.find_all("script"):
        if script.get("src") or script.get("type", "text/javascript") not in JS_TYPES:
            continue
        code = (script.string or "").strip()
        if code:
            bodies.append(code)
        script.decompose()
    ref = soup.new_tag("script", src=js_name)
    (soup.body or soup).append(ref)
    return str(soup), ";\n".join(bodies) + ("\n" if bodies else "")


def minify_html(markup: str) -> str:
    """Collapse whitespace between tags; attribute quotes stay for Polymer bindings."""
    return htmlmin.minify(
        markup,
        remove_comments=True,
        remove_empty_space=True,
        remove_optional_attribute_quotes=False,
    )


def run_bundle(settings: Settings) -> tuple[Path, Path] | None:
    """Vulcanize app/elements/elements.html into dist/elements/elements.{html,js}; None without an entry."""
    entry = settings.source_path / ELEMENTS_DIR / ENTRY
    if not entry.is_file():
        logger.warning("bundle: no entry at %s; nothing to bundle", entry)
        return None
    js_name = Path(ENTRY).with_suffix(".js").name
    html, js = crisp(Vulcanizer().load(entry), js_name)

    out_dir = settings.output_path / ELEMENTS_DIR
    html_path = write_atomic(out_dir / ENTRY, minify_html(html))
    js_path = write_atomic(out_dir / js_name, license_comment(settings.license_banner) + minify_js(js))
    logger.info("bundle: %s -> %s, %s", entry, html_path, js_path)
    return html_path, js_path
