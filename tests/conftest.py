"""Root test configuration: an isolated site tree per test"""

import os
from pathlib import Path

import pytest

from sitebuild.config import Settings


PAGE_TEMPLATE = "<html><head><title><%= title %></title></head><body><%= content %></body></html>\n"


@pytest.fixture(name="site")
def site_fixture(tmp_path, monkeypatch) -> Path:
    """Chdir into a fresh project with app/ and the page template; SITEBUILD_* env cleared."""
    for name in list(os.environ):
        if name.startswith("SITEBUILD_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    (tmp_path / "app").mkdir()
    (tmp_path / "templates").mkdir()
    (tmp_path / "templates" / "page.template").write_text(PAGE_TEMPLATE)
    return tmp_path


@pytest.fixture(name="settings")
def settings_fixture(site) -> Settings:
    return Settings(workers=2)


@pytest.fixture(name="write")
def write_fixture(site):
    """Write text to a path relative to the site root, creating parents."""
    def _write(relative: str, text: str) -> Path:
        path = site / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        return path
    return _write
