"""Format converters keyed by output format."""

from __future__ import annotations

from typing import Callable

from usefulreadme.exceptions import ConversionError, ParseError
from usefulreadme.renderers.markdown import convert_pod_to_gfm, convert_pod_to_markdown
from usefulreadme.renderers.text import convert_pod_to_text
from usefulreadme.schemas import OutputFormat
from usefulreadme.utils.logging_config import get_logger

logger = get_logger(__name__)

Renderer = Callable[[str], str]


def render_pod(pod: str) -> str:
    """POD output is the canonical serialization itself."""
    return pod


RENDERERS: dict[OutputFormat, Renderer] = {
    OutputFormat.POD: render_pod,
    OutputFormat.TEXT: convert_pod_to_text,
    OutputFormat.MARKDOWN: convert_pod_to_markdown,
    OutputFormat.GFM: convert_pod_to_gfm,
}


def get_renderer(output_format: OutputFormat | str) -> Renderer:
    """Look up the converter for ``output_format``."""
    try:
        return RENDERERS[OutputFormat(output_format)]
    except (KeyError, ValueError) as exc:
        raise ConversionError(f"No renderer for format {output_format!r}") from exc


def render(pod: str, output_format: OutputFormat | str, *, renderer: Renderer | None = None) -> str:
    """Convert canonical POD into ``output_format``.

    Raises:
        ConversionError: If the converter fails.
    """
    try:
        fmt = OutputFormat(output_format).value
    except ValueError as exc:
        raise ConversionError(f"No renderer for format {output_format!r}") from exc
    convert = renderer or get_renderer(fmt)
    try:
        return convert(pod)
    except (ConversionError, ParseError):
        raise
    except Exception as exc:
        logger.error("Renderer failed", extra={"format": fmt, "error": str(exc)})
        raise ConversionError(f"Rendering {fmt} failed: {exc}") from exc


__all__ = [
    "RENDERERS",
    "Renderer",
    "convert_pod_to_gfm",
    "convert_pod_to_markdown",
    "convert_pod_to_text",
    "get_renderer",
    "render",
    "render_pod",
]
