"""Reload notification: a no-op implementation and a live one polled by served pages"""

import logging
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol


logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Told about rebuilt files after a watched stage finishes."""

    live: bool

    def reload(self, paths: Iterable[Path] = ()) -> None: ...


class NullNotifier:
    """Used when browser reload is off."""

    live = False

    def reload(self, paths: Iterable[Path] = ()) -> None:
        return None


class LiveNotifier:
    """Bumps a generation counter; pages served by the dev server poll it and reload on change."""

    live = True

    def __init__(self):
        self._lock = threading.Lock()
        self._generation = 0

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def reload(self, paths: Iterable[Path] = ()) -> None:
        with self._lock:
            self._generation += 1
            generation = self._generation
        names = ", ".join(str(p) for p in paths)
        logger.info("reload #%d%s", generation, f" ({names})" if names else "")


def make_notifier(reload: bool) -> Notifier:
    return LiveNotifier() if reload else NullNotifier()
