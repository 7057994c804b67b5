"""usefulreadme: build README files from a Perl distribution's POD."""

from usefulreadme.assembler import assemble_sections, generate_raw_pod
from usefulreadme.changes import parse_changelog, recent_changes_section
from usefulreadme.distribution import load_distribution
from usefulreadme.exceptions import (
    ConfigurationError,
    ConversionError,
    ParseError,
    UsefulReadmeError,
)
from usefulreadme.readme import UsefulReadme, render_readme, write_readme
from usefulreadme.renderers import render
from usefulreadme.schemas import (
    Distribution,
    OutputFormat,
    ReadmeResult,
    RenderConfig,
    SectionRequest,
)
from usefulreadme.sections import match_section
from usefulreadme.synthesis import installation_section, requirements_section, version_section
from usefulreadme.weaver import (
    InstallationInstructions,
    RecentChanges,
    Requirements,
    WeaveInput,
    weave_document,
    weave_module,
)

__all__ = [
    "ConfigurationError",
    "ConversionError",
    "Distribution",
    "InstallationInstructions",
    "OutputFormat",
    "ParseError",
    "ReadmeResult",
    "RecentChanges",
    "RenderConfig",
    "Requirements",
    "SectionRequest",
    "UsefulReadme",
    "UsefulReadmeError",
    "WeaveInput",
    "assemble_sections",
    "generate_raw_pod",
    "installation_section",
    "load_distribution",
    "match_section",
    "parse_changelog",
    "recent_changes_section",
    "render",
    "render_readme",
    "requirements_section",
    "version_section",
    "weave_document",
    "weave_module",
    "write_readme",
]
