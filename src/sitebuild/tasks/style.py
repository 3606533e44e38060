"""Style stages: Sass -> minified CSS, and the syntax-color style module"""

import logging
from pathlib import Path

import csscompressor
import sass
from pygments.formatters import HtmlFormatter
from pygments.util import ClassNotFound

from sitebuild.config import Settings
from sitebuild.core.utils.fs import is_stale, write_atomic
from sitebuild.errors import StageError


logger = logging.getLogger(__name__)

SASS_DIR = "sass"
CSS_DIR = "css"
STYLE_MODULE_ID = "syntax-color"


def license_comment(banner: str) -> str:
    """Banner as a preserved (/*! ... */) block comment, or '' for an empty banner."""
    return f"/*! {banner.strip()} */\n" if banner.strip() else ""


def compile_sass(path: Path) -> str:
    """Compile one Sass/SCSS file to expanded CSS; compile errors fail the stage."""
    try:
        return sass.compile(filename=str(path), output_style="expanded", precision=10)
    except sass.CompileError as e:
        raise StageError("style", f"Sass error in {path}: {e}") from e


def run_style(settings: Settings, force: bool = False) -> list[Path]:
    """Compile app/sass/**/*.scss (partials excluded) into minified dist/css/*.css."""
    src_root = settings.source_path / SASS_DIR
    out_root = settings.output_path / CSS_DIR
    written = []
    for src in sorted(src_root.rglob("*.scss")) if src_root.is_dir() else []:
        if src.name.startswith("_"):
            continue
        dest = out_root / src.relative_to(src_root).with_suffix(".css")
        if not force and not is_stale(src, dest):
            logger.debug("Unchanged: %s", src)
            continue
        css = csscompressor.compress(compile_sass(src))
        try:
            written.append(write_atomic(dest, license_comment(settings.license_banner) + css))
        except OSError as e:
            raise StageError("style", f"{dest}: {e}") from e
        logger.info("style: %s -> %s", src, dest)
    return written


def style_module(css: str, module_id: str = STYLE_MODULE_ID) -> str:
    """Wrap CSS in a Polymer <dom-module> so elements can include it by id."""
    return (
        f'<dom-module id="{module_id}">\n'
        f"  <template>\n    <style>\n{css}\n    </style>\n  </template>\n"
        f"</dom-module>\n"
    )


def run_style_modules(settings: Settings) -> Path:
    """Write the Pygments stylesheet for highlighted code as dist/css/syntax-color.html."""
    try:
        css = HtmlFormatter(style=settings.highlight_style).get_style_defs("code")
    except ClassNotFound as e:
        raise StageError("style-modules", f"Unknown Pygments style {settings.highlight_style!r}") from e
    dest = settings.output_path / CSS_DIR / f"{STYLE_MODULE_ID}.html"
    try:
        write_atomic(dest, style_module(css))
    except OSError as e:
        raise StageError("style-modules", f"{dest}: {e}") from e
    logger.info("style-modules: %s", dest)
    return dest
