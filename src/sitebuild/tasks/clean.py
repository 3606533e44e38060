"""Clean stage"""

import logging
import shutil
from pathlib import Path

from sitebuild.config import Settings
from sitebuild.errors import StageError


logger = logging.getLogger(__name__)


def run_clean(settings: Settings) -> list[Path]:
    """Remove the output tree and the legacy app/css directory."""
    removed = []
    for target in (settings.output_path, settings.source_path / "css"):
        if target.exists():
            try:
                shutil.rmtree(target)
            except OSError as e:
                raise StageError("clean", f"{target}: {e}") from e
            removed.append(target)
            logger.info("clean: removed %s", target)
    return removed
