"""CLI command implementations"""

from pathlib import Path
from typing import Annotated, Any, Optional

import typer

from sitebuild.config import Settings, load_config
from sitebuild.errors import BuildError, LintError
from sitebuild.log import configure_logging
from sitebuild.server.notify import make_notifier
from sitebuild.server.watch import serve
from sitebuild.tasks.build import run_build, run_stage


SourceOpt = Annotated[Optional[str], typer.Option("--source-dir", help="Site source directory")]
OutOpt = Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")]
VerboseOpt = Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")]


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None, verbose: bool = False) -> Settings:
    """Configure logging and load config with standard CLI error handling."""
    configure_logging(verbose)
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _stage(name: str, settings: Settings) -> Any:
    """Run one stage, turning build failures into exit code 1."""
    try:
        return run_stage(name, settings)
    except LintError as e:
        for d in e.diagnostics:
            typer.echo(f"  {d}", err=True)
        _fail(str(e))
    except BuildError as e:
        _fail(str(e))


def _echo_paths(label: str, paths: list) -> None:
    typer.echo(f"{label}: {len(paths)} file(s)")


def build_cmd(
    source: SourceOpt = None,
    out: OutOpt = None,
    verbose: VerboseOpt = False,
    ):
    """Build the whole site: clean, lint, assets, copy, pages."""
    settings = _settings({"source_dir": source, "output_dir": out}, verbose)

    def _report(name: str, result: Any) -> None:
        if isinstance(result, list):
            _echo_paths(name, result)
        else:
            typer.echo(f"{name}: done")

    try:
        run_build(settings, on_stage=_report)
    except LintError as e:
        for d in e.diagnostics:
            typer.echo(f"  {d}", err=True)
        _fail(str(e))
    except BuildError as e:
        _fail(str(e))
    typer.echo(f"Site built in {settings.output_dir}/")


def pages_cmd(
    source: SourceOpt = None,
    out: OutOpt = None,
    template: Annotated[Optional[str], typer.Option("--template", help="Page template file")] = None,
    toc_max: Annotated[Optional[int], typer.Option("--toc-max", help="Deepest heading level in the TOC")] = None,
    workers: Annotated[Optional[int], typer.Option("--workers", help="Build threads; 0 = auto")] = None,
    verbose: VerboseOpt = False,
    ):
    """Markdown -> HTML conversion with syntax highlighting and TOC generation."""
    settings = _settings({
        "source_dir": source, "output_dir": out,
        "template": template, "toc_max": toc_max, "workers": workers,
    }, verbose)
    results = _stage("pages", settings)
    for src, out_file in results:
        typer.echo(f"  {src} -> {out_file}")
    typer.echo(f"Built {len(results)} page(s) to {settings.output_dir}/")


def style_cmd(source: SourceOpt = None, out: OutOpt = None, verbose: VerboseOpt = False):
    """Compile Sass and minify CSS."""
    _echo_paths("style", _stage("style", _settings({"source_dir": source, "output_dir": out}, verbose)))


def style_modules_cmd(out: OutOpt = None, verbose: VerboseOpt = False):
    """Wrap the syntax-highlighting CSS in a Polymer style module."""
    typer.echo(f"style-modules: {_stage('style-modules', _settings({'output_dir': out}, verbose))}")


def images_cmd(source: SourceOpt = None, out: OutOpt = None, verbose: VerboseOpt = False):
    """Optimize images."""
    _echo_paths("images", _stage("images", _settings({"source_dir": source, "output_dir": out}, verbose)))


def lint_cmd(source: SourceOpt = None, verbose: VerboseOpt = False):
    """Lint JavaScript; exits 1 on any problem."""
    diagnostics = _stage("lint", _settings({"source_dir": source}, verbose))
    typer.echo(f"lint: {len(diagnostics)} problem(s)")


def js_cmd(source: SourceOpt = None, out: OutOpt = None, verbose: VerboseOpt = False):
    """Lint, then minify JavaScript to the output directory."""
    _echo_paths("js", _stage("js", _settings({"source_dir": source, "output_dir": out}, verbose)))


def bundle_cmd(source: SourceOpt = None, out: OutOpt = None, verbose: VerboseOpt = False):
    """Vulcanize elements into one HTML and one JS file."""
    result = _stage("bundle", _settings({"source_dir": source, "output_dir": out}, verbose))
    if result is None:
        typer.echo("bundle: no entry, skipped")
        return
    html_path, js_path = result
    typer.echo(f"bundle: {html_path}, {js_path}")


def copy_cmd(source: SourceOpt = None, out: OutOpt = None, verbose: VerboseOpt = False):
    """Copy site files (polyfills, templates, etc.) to the output directory."""
    _echo_paths("copy", _stage("copy", _settings({"source_dir": source, "output_dir": out}, verbose)))


def clean_cmd(source: SourceOpt = None, out: OutOpt = None, verbose: VerboseOpt = False):
    """Remove the output directory and other built files."""
    removed = _stage("clean", _settings({"source_dir": source, "output_dir": out}, verbose))
    for path in removed:
        typer.echo(f"  removed {path}")


def watch_cmd(
    source: SourceOpt = None,
    out: OutOpt = None,
    reload: Annotated[bool, typer.Option("--reload/--no-reload", help="Reload the browser tab when watched files change")] = False,
    open_browser: Annotated[bool, typer.Option("--open", help="Open a browser tab when launched")] = False,
    port: Annotated[Optional[int], typer.Option("--port", help="Dev server port")] = None,
    verbose: VerboseOpt = False,
    ):
    """Serve the output directory and rebuild on change."""
    settings = _settings({"source_dir": source, "output_dir": out, "port": port}, verbose)
    settings = settings.model_copy(update={"lint_strict": False})
    Path(settings.output_dir).mkdir(parents=True, exist_ok=True)
    typer.echo(f"Watching {settings.source_dir}/, serving {settings.output_dir}/ on port {settings.port}")
    try:
        serve(settings, make_notifier(reload), open_browser=open_browser)
    except OSError as e:
        _fail(f"Cannot start dev server on port {settings.port}", e)
