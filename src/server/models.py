"""Pydantic models for the render API."""

from __future__ import annotations

import re
from typing import Union

from pydantic import BaseModel, Field, field_validator

from server.server_config import DEFAULT_DIST_NAME, DEFAULT_DIST_VERSION, MAX_POD_SIZE
from usefulreadme.schemas import OutputFormat

_DIST_NAME_RE = re.compile(r"^[A-Za-z_][\w]*(?:-[\w]+)*$")


class RenderRequest(BaseModel):
    """Request model for the /api/render endpoint.

    Attributes
    ----------
    pod : str
        POD text to build the README from.
    type : OutputFormat | None
        Output format; the server default applies when omitted.
    sections : list[str] | None
        Section requests in order, ``/regex/`` for patterns.
    section_fallback : bool
        Generate version, installation and requirements sections when the
        POD lacks them.
    dist_name : str
        Distribution name used by the generated sections.
    dist_version : str
        Distribution version used by the generated sections.
    requires : dict[str, str | None]
        Runtime dependencies and their minimum versions.
    files : list[str]
        Names of files in the distribution, e.g. ``Makefile.PL``.

    """

    pod: str = Field(..., max_length=MAX_POD_SIZE, description="POD source text")
    type: OutputFormat | None = Field(default=None, description="Output format")
    sections: list[str] | None = Field(default=None, description="Section requests in order")
    section_fallback: bool = Field(default=True, description="Generate missing known sections")
    dist_name: str = Field(default=DEFAULT_DIST_NAME, description="Distribution name")
    dist_version: str = Field(default=DEFAULT_DIST_VERSION, description="Distribution version")
    requires: dict[str, str | None] = Field(default_factory=dict, description="Runtime dependencies")
    files: list[str] = Field(default_factory=list, description="File names in the distribution")

    @field_validator("pod")
    @classmethod
    def validate_pod(cls, v: str) -> str:
        """Validate that ``pod`` is not blank."""
        if not v.strip():
            err = "pod cannot be empty"
            raise ValueError(err)
        return v

    @field_validator("sections", mode="before")
    @classmethod
    def normalize_sections(cls, v: str | list[str] | None) -> list[str] | None:
        """Accept a newline-separated string or a list; drop blank entries."""
        if v is None:
            return None
        if isinstance(v, str):
            v = v.splitlines()
        return [item.strip() for item in v if item.strip()]

    @field_validator("dist_name")
    @classmethod
    def validate_dist_name(cls, v: str) -> str:
        v = v.strip()
        if not _DIST_NAME_RE.match(v):
            err = f"Invalid distribution name: {v!r}"
            raise ValueError(err)
        return v

    @field_validator("dist_version")
    @classmethod
    def validate_dist_version(cls, v: str) -> str:
        if not v.strip():
            err = "dist_version cannot be empty"
            raise ValueError(err)
        return v.strip()


class RenderSuccessResponse(BaseModel):
    """Success response model for the /api/render endpoint.

    Attributes
    ----------
    filename : str
        File name the README would be written to.
    type : str
        Output format used.
    sections : list[str]
        Titles of the sections in the README, in order.
    content : str
        Rendered README, cropped for display when very large.
    truncated : bool
        Whether ``content`` was cropped.

    """

    filename: str = Field(..., description="README file name")
    type: str = Field(..., description="Output format")
    sections: list[str] = Field(default_factory=list, description="Section titles in order")
    content: str = Field(..., description="Rendered README")
    truncated: bool = Field(default=False, description="Content was cropped for display")


class RenderErrorResponse(BaseModel):
    """Error response model for the /api/render endpoint.

    Attributes
    ----------
    error : str
        Error message describing what went wrong.

    """

    error: str = Field(..., description="Error message")


# Union type for API responses
RenderResponse = Union[RenderSuccessResponse, RenderErrorResponse]


class FormatInfo(BaseModel):
    """An output format and the file it is written to by default."""

    type: str
    filename: str


class FormatsResponse(BaseModel):
    """Response model for the /api/formats endpoint."""

    default: str
    formats: list[FormatInfo]
