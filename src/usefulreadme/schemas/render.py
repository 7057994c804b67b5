"""README rendering configuration."""

from __future__ import annotations

import importlib
import re
from enum import Enum
from typing import Any, Callable, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from usefulreadme.config import DEFAULT_SECTIONS, USEFULREADME_TYPE
from usefulreadme.exceptions import ConfigurationError

_PATTERN_RE = re.compile(r"\A/(.+)/\Z", re.DOTALL)
_RENDERER_PATH_RE = re.compile(r"^[A-Za-z_][\w.]*:[A-Za-z_]\w*$")


class OutputFormat(str, Enum):
    """Supported README formats."""

    POD = "pod"
    TEXT = "text"
    MARKDOWN = "markdown"
    GFM = "gfm"


class Phase(str, Enum):
    """When the README is written."""

    BUILD = "build"
    RELEASE = "release"


class Location(str, Enum):
    """Where the README is written."""

    BUILD = "build"
    ROOT = "root"


class SynthesizedSection(str, Enum):
    """Sections that can be generated from distribution metadata."""

    VERSION = "version"
    INSTALLATION = "installation"
    REQUIREMENTS = "requirements"


DEFAULT_FILENAMES: dict[OutputFormat, str] = {
    OutputFormat.POD: "README.pod",
    OutputFormat.TEXT: "README",
    OutputFormat.MARKDOWN: "README.mkdn",
    OutputFormat.GFM: "README.md",
}


class SectionRequest(BaseModel):
    """A requested ``=head1`` section: a literal title or a ``/regex/``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["literal", "pattern"] = "literal"
    value: str = Field(..., min_length=1)

    @classmethod
    def parse(cls, text: str) -> SectionRequest:
        """Build a request from configuration text; ``/.../`` denotes a pattern."""
        match = _PATTERN_RE.match(text)
        if match:
            return cls(kind="pattern", value=match.group(1))
        return cls(kind="literal", value=text)

    @model_validator(mode="after")
    def _compile_pattern(self) -> SectionRequest:
        if self.kind == "pattern":
            try:
                re.compile(self.value, re.IGNORECASE)
            except re.error as exc:
                raise ValueError(f"Invalid section pattern /{self.value}/: {exc}") from exc
        elif not self.value.strip():
            raise ValueError("Section name cannot be blank")
        return self

    @property
    def pattern(self) -> re.Pattern[str] | None:
        if self.kind != "pattern":
            return None
        return re.compile(self.value, re.IGNORECASE)

    @property
    def canonical_name(self) -> str:
        """Lowercased name with runs of non-word characters collapsed to a space."""
        return re.sub(r"\W+", " ", self.value.lower()).strip()

    @property
    def synthesizer(self) -> SynthesizedSection | None:
        """The generator key for this request, if one exists."""
        if self.kind != "literal":
            return None
        try:
            return SynthesizedSection(self.canonical_name)
        except ValueError:
            return None

    def __str__(self) -> str:
        return f"/{self.value}/" if self.kind == "pattern" else self.value


def load_renderer(path: str) -> Callable[[str], str]:
    """Import a ``module:function`` converter path."""
    if not _RENDERER_PATH_RE.match(path):
        raise ValueError(f"Renderer must be given as 'module:function', got {path!r}")
    module_name, attr = path.split(":", 1)
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ValueError(f"Cannot import renderer module {module_name!r}: {exc}") from exc
    func = getattr(module, attr, None)
    if not callable(func):
        raise ValueError(f"Renderer {path!r} is not callable")
    return func


class RenderConfig(BaseModel):
    """Immutable README configuration, fully resolved at construction.

    Attributes:
        type: Output format.
        sections: Ordered heading requests.
        section_fallback: Generate known sections missing from the POD.
        phase: ``build`` writes after the build, ``release`` after a release.
        location: ``build`` writes into the build directory, ``root`` into
            the repository root.
        filename: Output file name; defaults by format.
        source: File whose POD is used; defaults to the main module.
        renderer: Optional ``module:function`` converter replacing the
            default one for ``type``.
    """

    model_config = ConfigDict(frozen=True)

    type: OutputFormat = Field(default=USEFULREADME_TYPE, validate_default=True)
    sections: list[SectionRequest] = Field(
        default_factory=lambda: [SectionRequest.parse(name) for name in DEFAULT_SECTIONS]
    )
    section_fallback: bool = True
    phase: Phase = Phase.BUILD
    location: Location = Location.BUILD
    filename: str | None = Field(default=None, min_length=1)
    source: str | None = Field(default=None, min_length=1)
    renderer: str | None = None

    @field_validator("sections", mode="before")
    @classmethod
    def _parse_sections(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [value]
        if isinstance(value, (list, tuple)):
            return [SectionRequest.parse(item) if isinstance(item, str) else item for item in value]
        return value

    @model_validator(mode="after")
    def _check_consistency(self) -> RenderConfig:
        if self.location is Location.BUILD and self.phase is Phase.RELEASE:
            raise ValueError("Cannot use location='build' with phase='release'")
        if self.renderer:
            load_renderer(self.renderer)
        return self

    @classmethod
    def from_options(cls, **options: Any) -> RenderConfig:
        """Validate options, turning any failure into a ConfigurationError."""
        try:
            return cls(**{key: value for key, value in options.items() if value is not None})
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc

    @property
    def output_filename(self) -> str:
        return self.filename or DEFAULT_FILENAMES[self.type]

    @property
    def renderer_func(self) -> Callable[[str], str] | None:
        return load_renderer(self.renderer) if self.renderer else None

    @property
    def resolved_sections(self) -> list[tuple[SectionRequest, SynthesizedSection | None]]:
        """Each request paired with its fallback generator (``None`` when disabled)."""
        return [
            (request, request.synthesizer if self.section_fallback else None)
            for request in self.sections
        ]
