"""Weave generated sections into a module's own POD."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol, Sequence

from usefulreadme.changes import recent_changes_section
from usefulreadme.config import DEFAULT_CHANGELOG
from usefulreadme.exceptions import ConfigurationError
from usefulreadme.pod import to_pod
from usefulreadme.pod_parser import extract_pod, parse_pod, strip_pod
from usefulreadme.schemas import Distribution, DocumentNode, Heading, Region
from usefulreadme.synthesis import installation_section, requirements_section
from usefulreadme.utils.logging_config import get_logger

logger = get_logger(__name__)

_END_RE = re.compile(r"^__(?:END|DATA)__[ \t]*$", re.MULTILINE)


@dataclass
class WeaveInput:
    """What the weavers know about the file being woven.

    Attributes:
        distribution: The distribution the file belongs to.
        filename: Path of the file within the distribution.
        version: Version to report, overriding the distribution's.
        next_release_filename: Changelog maintained by the release tooling,
            if any.
    """

    distribution: Distribution | None
    filename: str = ""
    version: str | None = None
    next_release_filename: str | None = None


class Weaver(Protocol):
    def weave_section(self, document: list[DocumentNode], weave_input: WeaveInput) -> None: ...


def _require_distribution(weave_input: WeaveInput, weaver: str) -> Distribution:
    if weave_input.distribution is None:
        raise ConfigurationError(f"{weaver} needs distribution metadata")
    return weave_input.distribution


def _append(document: list[DocumentNode], section: Heading, region: str) -> None:
    if region:
        document.append(Region(name=region.lstrip(":"), is_pod=True, children=[section]))
    else:
        document.append(section)


@dataclass
class InstallationInstructions:
    header: str = "INSTALLATION"
    region: str = ""
    builder: str | None = None

    def weave_section(self, document: list[DocumentNode], weave_input: WeaveInput) -> None:
        distribution = _require_distribution(weave_input, type(self).__name__)
        _append(document, installation_section(distribution, header=self.header, builder=self.builder), self.region)


@dataclass
class Requirements:
    header: str = "REQUIREMENTS"
    region: str = ""

    def weave_section(self, document: list[DocumentNode], weave_input: WeaveInput) -> None:
        distribution = _require_distribution(weave_input, type(self).__name__)
        section = requirements_section(distribution, header=self.header)
        if section is None:
            logger.debug("No runtime requirements; section skipped", extra={"file": weave_input.filename})
            return
        _append(document, section, self.region)


@dataclass
class RecentChanges:
    """Changelog entries for the version being released.

    Only the main module gets the section unless ``all_modules`` is set. An
    empty ``changelog`` adopts the file the release tooling maintains.
    """

    header: str = "RECENT CHANGES"
    changelog: str = DEFAULT_CHANGELOG
    version: str = ""
    region: str = ""
    all_modules: bool = False

    def changelog_name(self, weave_input: WeaveInput) -> str:
        """The changelog to read, reconciled with the release tooling's file."""
        name = self.changelog
        managed = weave_input.next_release_filename
        if managed:
            if not name:
                name = managed
            elif name != managed:
                raise ConfigurationError(f"changelog is different file {managed} used by the release tooling")
        return name or DEFAULT_CHANGELOG

    def weave_section(self, document: list[DocumentNode], weave_input: WeaveInput) -> None:
        distribution = _require_distribution(weave_input, type(self).__name__)
        if not self.all_modules and weave_input.filename != distribution.main_module:
            return

        name = self.changelog_name(weave_input)
        file = distribution.find_file(name)
        if file is None:
            logger.debug("Changelog not found", extra={"changelog": name})
            return

        version = self.version or weave_input.version or distribution.version
        section = recent_changes_section(file.content, version, changelog_name=name, header=self.header)
        if section is not None:
            _append(document, section, self.region)


def weave_document(pod: str, weavers: Sequence[Weaver], weave_input: WeaveInput) -> str:
    """Append each weaver's section to ``pod`` and return the new POD."""
    document = parse_pod(pod)
    for weaver in weavers:
        weaver.weave_section(document, weave_input)
    return to_pod(document)


def weave_module(source: str, weavers: Sequence[Weaver], weave_input: WeaveInput) -> str:
    """Rewrite a module with its woven POD gathered in one place.

    The POD goes after ``__END__``. When the module carries data after its
    ``__END__`` or ``__DATA__`` marker, the POD goes before the marker
    instead and the data is kept. A ``.pod`` file is all POD, so the woven
    document is returned as-is.
    """
    pod = weave_document(extract_pod(source, weave_input.filename), weavers, weave_input)
    if weave_input.filename.endswith(".pod"):
        return pod

    code, marker, data = _split_source(source)
    parts = [code] if code else []
    if data:
        if pod:
            parts.append(f"{pod}=cut")
        parts.append(f"{marker}\n{data}")
    elif pod:
        parts.append(f"__END__\n\n{pod}=cut")
    return "\n\n".join(parts) + "\n" if parts else ""


def _split_source(source: str) -> tuple[str, str, str]:
    """Split into POD-free code, the end marker, and the POD-free data after it."""
    end = _END_RE.search(source)
    if end is None:
        return strip_pod(source).strip("\n"), "", ""
    rest = source[end.end() :].removeprefix("\n")
    data = strip_pod(rest).rstrip()
    return strip_pod(source[: end.start()]).strip("\n"), end.group(0).strip(), data
