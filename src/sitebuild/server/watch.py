"""Source polling: re-run the matching stage when watched files change"""

import logging
import threading
import webbrowser
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sitebuild.config import Settings
from sitebuild.errors import BuildError
from sitebuild.server.devserver import make_server, serve_in_background
from sitebuild.server.notify import Notifier
from sitebuild.tasks.build import run_stage


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WatchRule:
    patterns: tuple[str, ...]   # globs relative to the working directory
    stage: str


def watch_rules(settings: Settings) -> list[WatchRule]:
    src = settings.source_dir
    return [
        WatchRule((f"{src}/sass/**/*.scss",), "style"),
        WatchRule((f"{src}/elements/**/*",), "bundle"),
        WatchRule((f"{src}/js/**/*.js", f"{src}/elements/**/*.js"), "lint"),
        WatchRule((f"{src}/**/*{settings.markdown_ext}", settings.template), "pages"),
        WatchRule(("templates/*.html", f"{src}/**/*.html", "*.py", "*.yaml", "*.yml"), "copy"),
    ]


Snapshot = dict[Path, float]


def scan(patterns: tuple[str, ...]) -> Snapshot:
    """mtime of every file matching any pattern."""
    found: Snapshot = {}
    for pattern in patterns:
        for p in Path(".").glob(pattern):
            if p.is_file():
                found[p] = p.stat().st_mtime
    return found


def changed_paths(old: Snapshot, new: Snapshot) -> list[Path]:
    """Added, removed, or modified paths, sorted."""
    return sorted(p for p in old.keys() | new.keys() if old.get(p) != new.get(p))


class Watcher:
    """Polls watch rules and runs each affected stage once per change batch."""

    def __init__(
        self,
        settings: Settings,
        notifier: Notifier,
        rules: list[WatchRule] = None,
        runner: Callable[[str, Settings], Any] = run_stage,
        ):
        self.settings = settings
        self.notifier = notifier
        self.rules = rules if rules is not None else watch_rules(settings)
        self.runner = runner
        self.snapshots = [scan(rule.patterns) for rule in self.rules]

    def poll(self) -> list[str]:
        """Check once; returns the stages that ran successfully."""
        ran, changed = [], set()
        for i, rule in enumerate(self.rules):
            current = scan(rule.patterns)
            diff = changed_paths(self.snapshots[i], current)
            self.snapshots[i] = current
            if not diff:
                continue
            if rule.stage in ran:
                changed.update(diff)
                continue
            logger.info("Changed: %s -> %s", ", ".join(map(str, diff)), rule.stage)
            try:
                self.runner(rule.stage, self.settings)
            except BuildError as e:
                logger.error("%s failed: %s", rule.stage, e)
                continue
            except Exception:
                # the dev server outlives any single broken rebuild
                logger.exception("%s failed unexpectedly", rule.stage)
                continue
            ran.append(rule.stage)
            changed.update(diff)
        if ran:
            self.notifier.reload(sorted(changed))
        return ran

    def run(self, stop: threading.Event) -> None:
        while not stop.wait(self.settings.watch_interval):
            self.poll()


def serve(settings: Settings, notifier: Notifier, open_browser: bool = False, stop: threading.Event = None) -> None:
    """Serve the output tree and rebuild on change until stop is set or Ctrl-C."""
    stop = stop or threading.Event()
    server = make_server(settings.output_path, settings.port, notifier)
    serve_in_background(server)
    if open_browser:
        webbrowser.open(f"http://localhost:{settings.port}/")
    try:
        Watcher(settings, notifier).run(stop)
    except KeyboardInterrupt:
        logger.info("Stopping")
    finally:
        server.shutdown()
        server.server_close()
