"""Copy stage: site files that need no transformation"""

import logging
import shutil
from pathlib import Path

from sitebuild.config import Settings
from sitebuild.core.utils.fs import is_excluded
from sitebuild.errors import StageError


logger = logging.getLogger(__name__)

ROOT_SKIP = {"README.md", "package.json", "pyproject.toml", "sitebuild.yaml"}
ROOT_TREES = ["templates", "lib", "tests"]
POLYFILLS = "bower_components/webcomponentsjs/webcomponents*.js"


def copy_plan(settings: Settings) -> list[tuple[Path, Path]]:
    """(source, destination) pairs for every file the copy stage writes."""
    src, out = settings.source_path, settings.output_path
    plan = [
        (p, out / p.name)
        for p in sorted(Path(".").glob("*"))
        if p.is_file() and p.name not in ROOT_SKIP and not p.name.startswith(".")
    ]

    manifest = src / "manifest.json"
    if manifest.is_file():
        plan.append((manifest, out / manifest.name))

    for p in sorted(src.rglob("*.html")) if src.is_dir() else []:
        rel = p.relative_to(src)
        if not is_excluded(rel, settings.exclude_dirs):
            plan.append((p, out / rel))

    for tree in ROOT_TREES:
        plan.extend((p, out / p) for p in sorted(Path(tree).rglob("*")) if p.is_file())

    plan.extend((p, out / p.relative_to(src)) for p in sorted(src.glob(POLYFILLS)))
    return plan


def run_copy(settings: Settings) -> list[Path]:
    written = []
    for src, dest in copy_plan(settings):
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src, dest)
        except OSError as e:
            raise StageError("copy", f"{src}: {e}") from e
        written.append(dest)
    logger.info("copy: %d file(s) to %s", len(written), settings.output_path)
    return written
