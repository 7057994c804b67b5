"""Shared schemas for usefulreadme."""

from usefulreadme.schemas.changes import Changelog, Release, ReleaseEntry
from usefulreadme.schemas.distribution import DistFile, Distribution
from usefulreadme.schemas.document import (
    Command,
    DocumentNode,
    Heading,
    ListBlock,
    ListItem,
    Region,
    Text,
    Verbatim,
)
from usefulreadme.schemas.render import (
    DEFAULT_FILENAMES,
    Location,
    OutputFormat,
    Phase,
    RenderConfig,
    SectionRequest,
    SynthesizedSection,
)
from usefulreadme.schemas.result import ReadmeResult

__all__ = [
    "DEFAULT_FILENAMES",
    "Changelog",
    "Command",
    "DistFile",
    "Distribution",
    "DocumentNode",
    "Heading",
    "ListBlock",
    "ListItem",
    "Location",
    "OutputFormat",
    "Phase",
    "ReadmeResult",
    "Region",
    "Release",
    "ReleaseEntry",
    "RenderConfig",
    "SectionRequest",
    "SynthesizedSection",
    "Text",
    "Verbatim",
]
