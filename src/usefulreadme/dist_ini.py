"""Read ``[UsefulReadme]`` options from a ``dist.ini`` file."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from usefulreadme.exceptions import ConfigurationError
from usefulreadme.utils.logging_config import get_logger

logger = get_logger(__name__)

PLUGIN_SECTION = "UsefulReadme"

_SECTION_RE = re.compile(r"^\[\s*(?P<name>[^\]]+?)\s*\]$")
_OPTION_RE = re.compile(r"^(?P<key>[^=\s][^=]*?)\s*=\s*(?P<value>.*)$")

_ALIASES = {"section": "sections", "fallback": "section_fallback"}
_MULTIVALUE = frozenset({"sections"})
_BOOLEANS = frozenset({"section_fallback"})
_KNOWN = frozenset({"sections", "section_fallback", "type", "phase", "location", "filename", "source", "renderer"})

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


def parse_ini_sections(text: str) -> dict[str, list[tuple[str, str]]]:
    """Split INI text into sections of ``(key, value)`` pairs, keeping repeats.

    A section header may be ``[Name]`` or ``[Name / alias]``; the part before
    the slash is the plugin name. Lines starting with ``;`` or ``#`` are
    comments. Options before the first header belong to ``"_"``.
    """
    sections: dict[str, list[tuple[str, str]]] = {"_": []}
    current = "_"
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith((";", "#")):
            continue
        header = _SECTION_RE.match(line)
        if header:
            current = header.group("name").split("/", 1)[0].strip()
            sections.setdefault(current, [])
            continue
        option = _OPTION_RE.match(line)
        if option is None:
            raise ConfigurationError(f"dist.ini line {number}: cannot parse {raw!r}")
        sections[current].append((option.group("key").strip(), option.group("value").strip()))
    return sections


def plugin_options(text: str, section: str = PLUGIN_SECTION) -> dict[str, Any]:
    """Return the plugin's options, ready for ``RenderConfig.from_options``.

    Aliases are folded into their canonical names, ``sections`` collects
    every repeat in order, and booleans are parsed.
    """
    pairs = parse_ini_sections(text).get(section)
    if pairs is None:
        return {}

    options: dict[str, Any] = {}
    for key, value in pairs:
        name = _ALIASES.get(key, key)
        if name not in _KNOWN:
            raise ConfigurationError(f"Unknown [{section}] option {key!r}")
        if name in _MULTIVALUE:
            options.setdefault(name, []).append(value)
        elif name in _BOOLEANS:
            options[name] = parse_bool(value, name)
        else:
            options[name] = value
    logger.debug("Read dist.ini options", extra={"options": sorted(options)})
    return options


def load_dist_ini(root: Path, section: str = PLUGIN_SECTION) -> dict[str, Any]:
    """Options from ``root/dist.ini``; empty when the file does not exist."""
    path = root / "dist.ini"
    if not path.is_file():
        return {}
    return plugin_options(path.read_text(encoding="utf-8"), section)


def parse_bool(value: str, name: str = "value") -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigurationError(f"Invalid boolean for {name}: {value!r}")
