"""Unit tests for tasks/copy.py and tasks/clean.py"""

import pytest

from sitebuild.errors import StageError
from sitebuild.tasks import copy as copy_stage
from sitebuild.tasks.clean import run_clean
from sitebuild.tasks.copy import run_copy


def test_run_copy(settings, write, site):
    """Root files, app HTML, server trees, and polyfills are copied; skipped names are not."""
    write("app.yaml", "runtime: python\n")
    write("main.py", "app = None\n")
    write("README.md", "# readme\n")
    write(".hidden", "x")
    write("app/manifest.json", "{}")
    write("app/docs/page.html", "<p>page</p>")
    write("app/elements/x-el.html", "<x-el></x-el>")
    write("lib/helper.py", "pass\n")
    write("app/bower_components/webcomponentsjs/webcomponents-lite.js", "// polyfill\n")
    write("app/bower_components/other/other.js", "// no\n")

    written = run_copy(settings)
    dist = site / "dist"
    for rel in ("app.yaml", "main.py", "manifest.json", "docs/page.html", "lib/helper.py",
                "templates/page.template", "bower_components/webcomponentsjs/webcomponents-lite.js"):
        assert dist / rel in written, rel
        assert (dist / rel).is_file()
    for rel in ("README.md", ".hidden", "elements/x-el.html", "bower_components/other/other.js"):
        assert not (dist / rel).exists(), rel


def test_run_clean_removes_outputs(settings, site):
    (site / "dist" / "css").mkdir(parents=True)
    (site / "app" / "css").mkdir()
    removed = run_clean(settings)
    assert set(removed) == {settings.output_path, settings.source_path / "css"}
    assert not (site / "dist").exists()
    assert not (site / "app" / "css").exists()


def test_run_clean_nothing_to_remove(settings):
    assert run_clean(settings) == []


def test_run_copy_unreadable_source_names_path(settings, write, monkeypatch):
    """An OS failure while copying fails the stage with the source path."""
    write("app/manifest.json", "{}")

    def _deny(src, dest):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(copy_stage.shutil, "copy2", _deny)
    with pytest.raises(StageError, match="manifest.json"):
        copy_stage.run_copy(settings)
