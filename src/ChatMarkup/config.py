from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderOptions:
    """Switches for the HTML renderer; the defaults emit markup verbatim."""

    escape_html: bool = False
    code_language_class: bool = False
    language_prefix: str = "language-"


def parse_config(text: str) -> RenderOptions:
    """Build render options from YAML text."""
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError("Config root must be a mapping of option names to values.")

    known = {f.name: f for f in fields(RenderOptions)}
    values = {}
    for key, value in data.items():
        option = known.get(key)
        if option is None:
            logger.warning("Ignoring unknown config option %r", key)
            continue
        expected = bool if option.type == "bool" else str
        if not isinstance(value, expected):
            raise ValueError(f"Config option {key!r} must be of type {expected.__name__}, got {value!r}")
        values[key] = value
    return RenderOptions(**values)


def load_config(path: str | Path) -> RenderOptions:
    path = Path(path)
    logger.debug("Loading config from %s", path)
    return parse_config(path.read_text(encoding="utf-8"))
