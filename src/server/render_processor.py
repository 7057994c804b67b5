"""Process a render request into a README preview."""

from __future__ import annotations

from usefulreadme.exceptions import UsefulReadmeError
from usefulreadme.readme import render_readme
from usefulreadme.schemas import DistFile, Distribution, RenderConfig
from usefulreadme.utils.logging_config import get_logger
from server.models import RenderErrorResponse, RenderResponse, RenderSuccessResponse
from server.server_config import MAX_DISPLAY_SIZE

# Initialize logger for this module
logger = get_logger(__name__)


def _build_distribution(
    pod: str,
    *,
    dist_name: str,
    dist_version: str,
    requires: dict[str, str | None],
    files: list[str],
) -> Distribution:
    """Build an in-memory distribution whose main module documentation is ``pod``.

    Parameters
    ----------
    pod : str
        POD text, stored as the main module's ``.pod`` file.
    dist_name : str
        Distribution name, e.g. ``Foo-Bar``.
    dist_version : str
        Distribution version.
    requires : dict[str, str | None]
        Runtime dependencies mapped to minimum versions.
    files : list[str]
        Other file names in the distribution.

    """
    main_module = "lib/" + dist_name.replace("-", "/") + ".pm"
    pod_file = main_module[: -len(".pm")] + ".pod"
    package = dist_name.replace("-", "::")
    dist_files = [
        DistFile(name=main_module, content=f"package {package};\n1;\n"),
        DistFile(name=pod_file, content=pod),
    ]
    dist_files.extend(DistFile(name=name) for name in files if name not in {main_module, pod_file})
    return Distribution(
        name=dist_name,
        version=dist_version,
        main_module=main_module,
        runtime_requires={name: (version or None) for name, version in requires.items()},
        files=dist_files,
    )


def process_render(
    pod: str,
    *,
    output_type: str | None = None,
    sections: list[str] | None = None,
    section_fallback: bool = True,
    dist_name: str,
    dist_version: str,
    requires: dict[str, str | None] | None = None,
    files: list[str] | None = None,
) -> RenderResponse:
    """Render ``pod`` as a README and return the preview payload."""
    _print_query(dist_name, output_type, sections)

    distribution = _build_distribution(
        pod,
        dist_name=dist_name,
        dist_version=dist_version,
        requires=requires or {},
        files=files or [],
    )

    try:
        config = RenderConfig.from_options(type=output_type, sections=sections, section_fallback=section_fallback)
        result = render_readme(pod, config, distribution, filename=distribution.main_module[:-3] + ".pod")
    except UsefulReadmeError as exc:
        _print_error(dist_name, output_type, exc)
        return RenderErrorResponse(error=str(exc))

    content = result.content
    truncated = len(content) > MAX_DISPLAY_SIZE
    if truncated:
        content = (
            f"(Content cropped to {int(MAX_DISPLAY_SIZE / 1_000)}k characters)\n" + content[:MAX_DISPLAY_SIZE]
        )

    _print_success(dist_name, config.type.value, result.sections, len(result.content))

    return RenderSuccessResponse(
        filename=result.filename,
        type=config.type.value,
        sections=result.sections,
        content=content,
        truncated=truncated,
    )


def _print_query(dist_name: str, output_type: str | None, sections: list[str] | None) -> None:
    logger.info(
        "Processing render request",
        extra={
            "dist": dist_name,
            "type": output_type or "default",
            "sections": len(sections) if sections is not None else "default",
        },
    )


def _print_error(dist_name: str, output_type: str | None, exc: Exception) -> None:
    """Log a failed render with its request details.

    Parameters
    ----------
    dist_name : str
        Distribution named in the request.
    output_type : str | None
        Requested output format.
    exc : Exception
        The exception raised while rendering.

    """
    logger.warning(
        "Render failed",
        extra={
            "dist": dist_name,
            "type": output_type or "default",
            "error_type": type(exc).__name__,
            "error": str(exc),
        },
    )


def _print_success(dist_name: str, output_type: str, sections: list[str], size: int) -> None:
    logger.info(
        "Render completed successfully",
        extra={
            "dist": dist_name,
            "type": output_type,
            "sections": len(sections),
            "size": size,
        },
    )
