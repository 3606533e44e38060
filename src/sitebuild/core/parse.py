"""File discovery and front matter extraction"""

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from sitebuild.core.models import Document
from sitebuild.core.utils.fs import is_excluded
from sitebuild.errors import FrontMatterError


logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r'^---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)', re.DOTALL | re.MULTILINE)


def extract_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with the leading YAML block removed.

    Without a block the result is ({}, text) with text returned unchanged.
    """
    m = FRONTMATTER_RE.match(text)
    if not m:
        logger.debug("No front matter block; treating whole content as body")
        return {}, text
    try:
        fm = yaml.safe_load(m.group(1)) or {}
    except yaml.YAMLError as e:
        raise FrontMatterError(f"Invalid YAML frontmatter: {e}") from e
    if not isinstance(fm, dict):
        raise FrontMatterError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
    return {str(k): v for k, v in fm.items()}, text[m.end():]


def discover_files(root: Path, ext: str = ".md", exclude_dirs: list[str] = ()) -> list[Path]:
    """Return sorted source-relative paths of ext files under root, skipping excluded top-level dirs."""
    if not root.is_dir():
        return []
    found = []
    for p in root.rglob(f"*{ext}"):
        rel = p.relative_to(root)
        if p.is_file() and not is_excluded(rel, list(exclude_dirs)):
            found.append(rel)
    return sorted(found)


def read_document(root: Path, relative: Path) -> Document:
    """Read one source file and split it; OSError and FrontMatterError propagate."""
    raw = (root / relative).read_text(encoding="utf-8")
    frontmatter, body = extract_frontmatter(raw)
    return Document(source_path=relative, raw_content=raw, frontmatter=frontmatter, body=body)
