"""Integration tests for the sitebuild CLI"""

from typer.testing import CliRunner

from sitebuild.cli.cli import app


runner = CliRunner()


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for name in ("build", "pages", "style", "images", "lint", "js", "bundle", "copy", "clean", "watch"):
        assert name in result.output


def test_pages_cmd(site):
    """pages builds every document and reports each one."""
    (site / "app" / "docs").mkdir()
    (site / "app" / "docs" / "intro.md").write_text("---\ntitle: Intro\n---\n# Intro\n## Setup\nSome text.\n")
    result = runner.invoke(app, ["pages", "--out-dir", "public"])
    assert result.exit_code == 0, result.output
    assert "Built 1 page(s) to public/" in result.output
    assert 'id="setup"' in (site / "public" / "docs" / "intro.html").read_text()


def test_pages_cmd_missing_template(site):
    """A missing template exits 1 with the offending path."""
    (site / "app" / "index.md").write_text("# Home\n")
    result = runner.invoke(app, ["pages", "--template", "templates/nope.template"])
    assert result.exit_code == 1
    assert "nope.template" in result.output


def test_lint_cmd_failure_exits_nonzero(site):
    (site / "app" / "js").mkdir()
    (site / "app" / "js" / "bad.js").write_text("function (\n")
    result = runner.invoke(app, ["lint"])
    assert result.exit_code == 1
    assert "bad.js" in result.output


def test_build_cmd_full_site(site):
    """The default build produces pages, minified JS, and copied files."""
    (site / "app" / "index.md").write_text("# Home\n")
    (site / "app" / "js").mkdir()
    (site / "app" / "js" / "app.js").write_text("var answer = 40 + 2;\n")
    (site / "app" / "manifest.json").write_text("{}")
    result = runner.invoke(app, ["build"])
    assert result.exit_code == 0, result.output
    dist = site / "dist"
    assert (dist / "index.html").is_file()
    assert (dist / "js" / "app.js").read_text().startswith("var answer=40+2")
    assert (dist / "manifest.json").is_file()
    assert (dist / "css" / "syntax-color.html").is_file()


def test_default_invocation_builds(site):
    """With no command the whole site is built."""
    (site / "app" / "index.md").write_text("# Home\n")
    result = runner.invoke(app, [])
    assert result.exit_code == 0, result.output
    assert (site / "dist" / "index.html").is_file()


def test_clean_cmd(site):
    (site / "dist").mkdir()
    result = runner.invoke(app, ["clean"])
    assert result.exit_code == 0
    assert not (site / "dist").exists()


def test_invalid_config_exits_nonzero(site):
    (site / "sitebuild.yaml").write_text("toc_max: 42\n")
    result = runner.invoke(app, ["pages"])
    assert result.exit_code == 1
    assert "Invalid settings" in result.output


def test_images_cmd_corrupt_image(site):
    """A corrupt image exits 1 with an Error line naming the file."""
    (site / "app" / "images").mkdir()
    (site / "app" / "images" / "broken.png").write_bytes(b"not a png at all")
    result = runner.invoke(app, ["images"])
    assert result.exit_code == 1
    assert "Error: images:" in result.output
    assert "broken.png" in result.output
