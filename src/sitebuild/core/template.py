"""Page template loading and placeholder substitution"""

import html
import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from sitebuild.errors import TemplateError, TemplateNotFoundError


logger = logging.getLogger(__name__)

# <%= name %> inserts raw text, <%- name %> inserts HTML-escaped text; any other
# <% ... %> tag (logic, expressions) has no data binding and renders empty
PLACEHOLDER_RE = re.compile(r'<%([=-]?)(.*?)%>', re.DOTALL)
NAME_RE = re.compile(r'[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*')

_MISSING = object()


def load_template(path: Path) -> str:
    """Read the page template once per build; a missing file fails the whole build."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise TemplateNotFoundError(path) from e
    except (OSError, ValueError) as e:
        raise TemplateError(f"Cannot read template {path}: {e}") from e


def _lookup(data: Mapping[str, Any], name: str) -> Any:
    value: Any = data
    for part in name.split("."):
        if not isinstance(value, Mapping) or part not in value:
            return _MISSING
        value = value[part]
    return value


def render_template(template: str, data: Mapping[str, Any]) -> str:
    """Substitute every placeholder from data; unresolved names become empty strings."""

    def _replace(m: re.Match) -> str:
        mode, expr = m.groups()
        name = expr.strip()
        if not mode or not NAME_RE.fullmatch(name):
            logger.debug("Template tag %r is not a data placeholder; substituting empty string", m.group(0))
            return ""
        value = _lookup(data, name)
        if value is _MISSING:
            logger.debug("Template placeholder %r unresolved; substituting empty string", name)
            return ""
        text = "" if value is None else str(value)
        return html.escape(text) if mode == "-" else text

    return PLACEHOLDER_RE.sub(_replace, template)
