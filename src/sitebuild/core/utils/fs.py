"""Filesystem helpers shared by the page generator and the stages"""

import os
import tempfile
from pathlib import Path


def write_atomic(path: Path, data: str | bytes, encoding: str = "utf-8") -> Path:
    """Write data to path through a temp file in the same directory, then rename over it.

    Readers see either the previous file or the complete new one, never a partial write.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = data.encode(encoding) if isinstance(data, str) else data
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(payload)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise
    return path


def is_stale(src: Path, dest: Path) -> bool:
    """True when dest is missing or older than src."""
    return not dest.exists() or dest.stat().st_mtime < src.stat().st_mtime


def is_excluded(relative: Path, exclude_dirs: list[str]) -> bool:
    """True when the first component of a source-relative path is an excluded directory."""
    return bool(relative.parts) and relative.parts[0] in exclude_dirs
