"""Stage registry and the default build sequence"""

import logging
from collections.abc import Callable
from typing import Any

from sitebuild.config import Settings
from sitebuild.core.pipeline import run_pages
from sitebuild.tasks.bundle import run_bundle
from sitebuild.tasks.clean import run_clean
from sitebuild.tasks.copy import run_copy
from sitebuild.tasks.images import run_images
from sitebuild.tasks.scripts import run_js, run_lint
from sitebuild.tasks.style import run_style, run_style_modules


logger = logging.getLogger(__name__)

Stage = Callable[[Settings], Any]

STAGES: dict[str, Stage] = {
    "clean":         run_clean,
    "lint":          run_lint,
    "style":         run_style,
    "style-modules": run_style_modules,
    "images":        run_images,
    "bundle":        run_bundle,
    "js":            run_js,
    "copy":          run_copy,
    "pages":         run_pages,
}

# Each group runs after the previous one; stages inside a group are independent.
BUILD_SEQUENCE: list[list[str]] = [
    ["clean"],
    ["lint"],
    ["style", "style-modules", "images", "bundle", "js"],
    ["copy"],
    ["pages"],
]


def run_stage(name: str, settings: Settings) -> Any:
    """Run one named stage."""
    try:
        stage = STAGES[name]
    except KeyError:
        raise ValueError(f"Unknown stage {name!r}; expected one of {', '.join(STAGES)}") from None
    logger.debug("Running stage %s", name)
    return stage(settings)


def run_build(settings: Settings, on_stage: Callable[[str, Any], None] = None) -> dict[str, Any]:
    """Run the default build. Returns each stage's result keyed by name; the first failure stops it."""
    results: dict[str, Any] = {}
    for group in BUILD_SEQUENCE:
        for name in group:
            results[name] = run_stage(name, settings)
            if on_stage:
                on_stage(name, results[name])
    return results
