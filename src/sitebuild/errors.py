"""Build error hierarchy; the CLI maps every BuildError to exit code 1"""

from pathlib import Path


class BuildError(Exception):
    """Base class for failures that stop a build or a stage."""


class ConfigError(BuildError, ValueError):
    """sitebuild.yaml, env vars or CLI overrides produced invalid settings."""


class TemplateError(BuildError):
    """The page template cannot be read."""


class TemplateNotFoundError(TemplateError):
    """The page template is missing; raised before any page is processed."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Template not found: {path}")


class FrontMatterError(BuildError, ValueError):
    """A front matter block exists but is not a YAML mapping."""


class PageError(BuildError):
    """A single page failed to build."""

    def __init__(self, path: Path, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to build {path}: {cause}")


class StageError(BuildError):
    """A non-page stage (style, bundle, ...) failed."""

    def __init__(self, stage: str, message: str):
        self.stage = stage
        super().__init__(f"{stage}: {message}")


class LintError(BuildError):
    """JavaScript lint produced diagnostics in strict mode."""

    def __init__(self, diagnostics: list):
        self.diagnostics = diagnostics
        super().__init__(f"Lint failed with {len(diagnostics)} problem(s)")
