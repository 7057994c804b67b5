"""Render endpoints for the API."""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from server.models import (
    FormatInfo,
    FormatsResponse,
    RenderErrorResponse,
    RenderRequest,
    RenderSuccessResponse,
)
from server.render_processor import process_render
from usefulreadme.config import USEFULREADME_TYPE
from usefulreadme.schemas import DEFAULT_FILENAMES, OutputFormat

router = APIRouter()

COMMON_RENDER_RESPONSES: dict[int | str, dict[str, object]] = {
    status.HTTP_200_OK: {"model": RenderSuccessResponse, "description": "README rendered"},
    status.HTTP_400_BAD_REQUEST: {"model": RenderErrorResponse, "description": "Invalid options or POD"},
}


@router.post("/api/render", responses=COMMON_RENDER_RESPONSES)
def api_render(
    request: Request,  # noqa: ARG001 (unused-function-argument) # pylint: disable=unused-argument
    render_request: RenderRequest,
) -> JSONResponse:
    """Render POD into a README and return the content.

    **This endpoint runs one render pass over the submitted POD,** selecting
    and ordering sections and generating the known ones the POD lacks.

    **Parameters**

    - **render_request** (`RenderRequest`): Pydantic model containing the POD and options

    **Returns**

    - **JSONResponse**: Success response with the README or an error response with status 400

    """
    response = process_render(
        render_request.pod,
        output_type=render_request.type.value if render_request.type else None,
        sections=render_request.sections,
        section_fallback=render_request.section_fallback,
        dist_name=render_request.dist_name,
        dist_version=render_request.dist_version,
        requires=render_request.requires,
        files=render_request.files,
    )
    if isinstance(response, RenderErrorResponse):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=response.model_dump())
    return JSONResponse(status_code=status.HTTP_200_OK, content=response.model_dump())


@router.get("/api/formats", response_model=FormatsResponse)
def api_formats() -> FormatsResponse:
    """List the output formats and their default file names."""
    return FormatsResponse(
        default=USEFULREADME_TYPE,
        formats=[FormatInfo(type=fmt.value, filename=DEFAULT_FILENAMES[fmt]) for fmt in OutputFormat],
    )
