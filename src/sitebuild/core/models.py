"""Data models for the page generation pipeline"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class TocEntry(BaseModel):
    """One heading listed in a page's table of contents."""
    level: int = Field(ge=1, le=6)
    anchor: str
    text: str


class RenderOptions(BaseModel):
    """Explicit renderer configuration, built once per build and passed into every render call."""
    parser_config: str = "commonmark"
    highlight: bool = True
    toc_max: int = Field(default=3, ge=1, le=6)


@dataclass(frozen=True)
class Document:
    """A source file split into front matter and body; not persisted."""
    source_path:  Path              # relative to the source root
    raw_content:  str
    frontmatter:  dict[str, Any]
    body:         str


@dataclass
class RenderedPage:
    """Transient render result, serialized to output_path and discarded."""
    document:    Document
    html:        str
    toc:         list[TocEntry] = field(default_factory=list)
    title:       str = ""
    link:        str = ""

    @property
    def output_path(self) -> Path:
        return self.document.source_path.with_suffix(".html")
