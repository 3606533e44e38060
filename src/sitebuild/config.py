"""Application configuration: settings schema and sitebuild.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from sitebuild.errors import ConfigError


CONFIG_FILE = "sitebuild.yaml"

DEFAULT_LICENSE = (
    "@license\n"
    "Copyright (c) 2015 The Polymer Project Authors. All rights reserved.\n"
    "This code may only be used under the BSD style license found at http://polymer.github.io/LICENSE.txt"
)


class Settings(BaseModel):
    app_name:        str = "sitebuild"
    source_dir:      str = Field(default="app",  description="Root of the site sources")
    output_dir:      str = Field(default="dist", description="Root of the built site")
    template:        str = Field(default="templates/page.template", description="Page template file")
    exclude_dirs:    list[str] = Field(
        default=["bower_components", "elements", "images", "js", "sass"],
        description="Directories under source_dir never scanned for pages",
    )
    markdown_ext:    str = Field(default=".md", pattern=r"^\.\w+$", description="Page source extension")
    parser_config:   str = Field(default="commonmark", description="MarkdownIt parser preset name")
    toc_max:         int = Field(default=3, ge=1, le=6, description="Deepest heading level anchored and listed in the TOC")
    highlight:       bool = Field(default=True, description="Syntax-highlight code blocks")
    highlight_style: str = Field(default="default", description="Pygments style for the syntax-color module")
    workers:         int = Field(default=0, ge=0, description="Page build threads; 0 = auto")
    lint_strict:     bool = Field(default=True, description="Fail the build on lint diagnostics")
    license_banner:  str = Field(default=DEFAULT_LICENSE, description="Comment prepended to CSS and bundled JS")
    port:            int = Field(default=8080, ge=1, le=65535, description="Dev server port")
    watch_interval:  float = Field(default=1.0, gt=0, description="Seconds between source polls in watch mode")

    @property
    def source_path(self) -> Path:
        return Path(self.source_dir)

    @property
    def output_path(self) -> Path:
        return Path(self.output_dir)


def _env_value(name: str, raw: str) -> Any:
    """Split comma-separated env values for list fields; pydantic coerces the rest."""
    annotation = Settings.model_fields[name].annotation
    if getattr(annotation, "__origin__", None) is list:
        return [part.strip() for part in raw.split(",") if part.strip()]
    return raw


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from sitebuild.yaml, then SITEBUILD_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"SITEBUILD_{name.upper()}"):
            data[name] = _env_value(name, val)

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e
