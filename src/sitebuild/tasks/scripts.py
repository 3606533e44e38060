"""JavaScript stages: lint (syntax check) and minify"""

import logging
from pathlib import Path

import esprima
import rjsmin
from bs4 import BeautifulSoup
from esprima.error_handler import Error as EsprimaError
from pydantic import BaseModel

from sitebuild.config import Settings
from sitebuild.core.utils.fs import write_atomic
from sitebuild.errors import LintError, StageError


logger = logging.getLogger(__name__)

JS_DIR = "js"
ELEMENTS_DIR = "elements"
LINT_FILES = ["gruntfile.js"]


class Diagnostic(BaseModel):
    """One lint problem, located in the source file."""
    path: str
    line: int
    column: int
    message: str

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column}: {self.message}"


def check_syntax(code: str) -> EsprimaError | None:
    """Parse as a classic script, then as an ES module; return the script error if both fail."""
    try:
        esprima.parseScript(code)
        return None
    except EsprimaError as script_error:
        try:
            esprima.parseModule(code)
            return None
        except EsprimaError:
            return script_error


def _diagnostic(path: Path, err: EsprimaError, line_offset: int = 0) -> Diagnostic:
    return Diagnostic(
        path=str(path),
        line=(getattr(err, "lineNumber", None) or 1) + line_offset,
        column=getattr(err, "column", None) or 0,
        message=getattr(err, "description", None) or str(err),
    )


def extract_scripts(markup: str) -> list[tuple[int, str]]:
    """Inline <script> bodies of an HTML file as (starting line, code) pairs."""
    soup = BeautifulSoup(markup, "html.parser")
    scripts = []
    for tag in soup.find_all("script"):
        if tag.get("src") or not tag.string:
            continue
        if tag.get("type", "text/javascript") not in ("text/javascript", "module", "application/javascript"):
            continue
        scripts.append(((tag.sourceline or 1) - 1, tag.string))
    return scripts


def _read(path: Path, stage: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, ValueError) as e:
        raise StageError(stage, f"{path}: {e}") from e


def lint_file(path: Path) -> list[Diagnostic]:
    """Syntax-check a .js file, or every inline script of an .html file."""
    text = _read(path, "lint")
    chunks = extract_scripts(text) if path.suffix == ".html" else [(0, text)]
    found = []
    for offset, code in chunks:
        err = check_syntax(code)
        if err is not None:
            found.append(_diagnostic(path, err, offset))
    return found


def lint_targets(settings: Settings) -> list[Path]:
    """Root build scripts, app/js/**/*.js, and app/elements/**/*.{js,html}."""
    src = settings.source_path
    targets = [Path(name) for name in LINT_FILES if Path(name).is_file()]
    for pattern in (f"{JS_DIR}/**/*.js", f"{ELEMENTS_DIR}/**/*.js", f"{ELEMENTS_DIR}/**/*.html"):
        targets.extend(sorted(src.glob(pattern)))
    return targets


def run_lint(settings: Settings, strict: bool = None) -> list[Diagnostic]:
    """Lint every target; in strict mode any diagnostic raises LintError."""
    strict = settings.lint_strict if strict is None else strict
    diagnostics = []
    for path in lint_targets(settings):
        diagnostics.extend(lint_file(path))
    for d in diagnostics:
        logger.warning("lint: %s", d)
    if diagnostics and strict:
        raise LintError(diagnostics)
    logger.info("lint: %d problem(s)", len(diagnostics))
    return diagnostics


def minify_js(code: str) -> str:
    """Minify JavaScript, keeping /*! ... */ license comments."""
    return rjsmin.jsmin(code, keep_bang_comments=True)


def run_js(settings: Settings, strict: bool = None) -> list[Path]:
    """Lint, then minify app/js/**/*.js into dist/js/."""
    run_lint(settings, strict)
    src_root = settings.source_path / JS_DIR
    out_root = settings.output_path / JS_DIR
    written = []
    for src in sorted(src_root.rglob("*.js")) if src_root.is_dir() else []:
        code = minify_js(_read(src, "js"))
        try:
            dest = write_atomic(out_root / src.relative_to(src_root), code)
        except OSError as e:
            raise StageError("js", f"{src}: {e}") from e
        logger.info("js: %s -> %s", src, dest)
        written.append(dest)
    return written
