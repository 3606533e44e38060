"""CLI entrypoint: Typer app definition and command registration"""

import typer

from sitebuild.cli.commands import (
    build_cmd,
    bundle_cmd,
    clean_cmd,
    copy_cmd,
    images_cmd,
    js_cmd,
    lint_cmd,
    pages_cmd,
    style_cmd,
    style_modules_cmd,
    watch_cmd,
)


app = typer.Typer(name="sitebuild", help="Static documentation site build")


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context):
    """Run a stage by name; with no command, build the whole site."""
    if ctx.invoked_subcommand is None:
        build_cmd()


app.command(name="build")(build_cmd)
app.command(name="pages")(pages_cmd)
app.command(name="style")(style_cmd)
app.command(name="style-modules")(style_modules_cmd)
app.command(name="images")(images_cmd)
app.command(name="lint")(lint_cmd)
app.command(name="js")(js_cmd)
app.command(name="bundle")(bundle_cmd)
app.command(name="copy")(copy_cmd)
app.command(name="clean")(clean_cmd)
app.command(name="watch")(watch_cmd)
