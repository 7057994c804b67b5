"""Load distribution metadata and the file set from a checkout."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from usefulreadme.exceptions import ConfigurationError
from usefulreadme.schemas import DistFile, Distribution
from usefulreadme.utils.logging_config import get_logger

logger = get_logger(__name__)

META_FILE = "META.json"
_MAX_CONTENT_BYTES = 1024 * 1024
_TEXT_SUFFIXES = frozenset({"", ".pm", ".pod", ".pl", ".PL", ".t", ".txt", ".md", ".mkdn", ".ini"})
_SKIP_DIRS = frozenset({".git", ".build", "blib", "local", "node_modules", "_build"})


def load_distribution(root: Path) -> Distribution:
    """Build a Distribution from ``META.json`` and the files under ``root``.

    Raises:
        ConfigurationError: If ``META.json`` is missing or unusable, or no main
            module can be found.
    """
    root = root.resolve()
    meta_path = root / META_FILE
    if not meta_path.is_file():
        raise ConfigurationError(f"{META_FILE} not found in {root}")
    try:
        meta = json.loads(meta_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot read {meta_path}: {exc}") from exc
    if not isinstance(meta, dict):
        raise ConfigurationError(f"{META_FILE} must contain an object")

    name = meta.get("name")
    version = meta.get("version")
    if not name or version in (None, ""):
        raise ConfigurationError(f"{META_FILE} must declare 'name' and 'version'")

    files = gather_files(root)
    main_module = _find_main_module(str(name), files)

    distribution = Distribution(
        name=str(name),
        version=str(version),
        main_module=main_module,
        runtime_requires=runtime_requires(meta),
        files=files,
    )
    logger.debug(
        "Loaded distribution",
        extra={"dist": distribution.name, "version": distribution.version, "files": len(files)},
    )
    return distribution


def runtime_requires(meta: dict[str, Any]) -> dict[str, str | None]:
    """Runtime ``requires`` prereqs from CPAN::Meta v2 data; ``"0"`` becomes ``None``."""
    prereqs = meta.get("prereqs") or {}
    requires = ((prereqs.get("runtime") or {}).get("requires")) or {}
    result: dict[str, str | None] = {}
    for module, version in requires.items():
        if module == "perl":
            continue
        version = str(version).strip() if version is not None else ""
        result[module] = None if version in ("", "0") else version
    return result


def gather_files(root: Path) -> list[DistFile]:
    """Collect files under ``root`` in sorted order, with text content where practical."""
    files: list[DistFile] = []
    for path in sorted(root.rglob("*")):
        relative = path.relative_to(root)
        if any(part in _SKIP_DIRS or part.startswith(".") for part in relative.parts[:-1]):
            continue
        if not path.is_file():
            continue
        files.append(DistFile(name=relative.as_posix(), content=_read_text(path)))
    return files


def _read_text(path: Path) -> str:
    if path.suffix not in _TEXT_SUFFIXES or path.stat().st_size > _MAX_CONTENT_BYTES:
        return ""
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.debug("Cannot read file", extra={"path": str(path), "error": str(exc)})
        return ""


def _find_main_module(name: str, files: list[DistFile]) -> str:
    expected = "lib/" + name.replace("-", "/") + ".pm"
    names = [file.name for file in files]
    if expected in names:
        return expected
    modules = sorted(n for n in names if n.startswith("lib/") and n.endswith(".pm"))
    if not modules:
        raise ConfigurationError(f"No main module found for {name} (expected {expected})")
    logger.warning("Main module not at expected path", extra={"expected": expected, "using": modules[0]})
    return modules[0]
