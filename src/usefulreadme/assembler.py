"""Assemble README sections in configuration order."""

from __future__ import annotations

from dataclasses import dataclass, field

from usefulreadme.pod import to_pod
from usefulreadme.pod_parser import extract_pod, parse_document
from usefulreadme.schemas import Distribution, DocumentNode, Heading, RenderConfig
from usefulreadme.sections import match_section
from usefulreadme.synthesis import synthesize_section
from usefulreadme.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class AssembledSection:
    """One section of the output and where it came from."""

    request: str
    heading: Heading
    synthesized: bool = False


@dataclass
class AssembledDocument:
    """Sections in configuration order, ready to serialize."""

    sections: list[AssembledSection] = field(default_factory=list)

    @property
    def nodes(self) -> list[DocumentNode]:
        return [section.heading for section in self.sections]

    @property
    def titles(self) -> list[str]:
        return [section.heading.title for section in self.sections]

    def to_pod(self) -> str:
        return to_pod(self.nodes)


def parse_source(source: str, filename: str = "") -> list[DocumentNode] | None:
    """Extract and re-nest the POD of ``source``; ``None`` when it has no POD."""
    pod = extract_pod(source, filename)
    if not pod:
        logger.info("No POD found in source", extra={"source": filename})
        return None
    return parse_document(pod)


def assemble_sections(
    document: list[DocumentNode],
    config: RenderConfig,
    distribution: Distribution,
) -> AssembledDocument:
    """Pick (or synthesize) each requested section, in configuration order.

    Args:
        document: The nested source document.
        config: Render configuration with resolved section requests.
        distribution: Metadata used by the fallback generators.

    Returns:
        The assembled sections. Requests that neither match nor synthesize
        contribute nothing.
    """
    assembled = AssembledDocument()
    for request, synthesizer in config.resolved_sections:
        found = match_section(document, request)
        if found is not None:
            assembled.sections.append(AssembledSection(request=str(request), heading=found))
            continue

        generated = synthesize_section(synthesizer, distribution) if synthesizer is not None else None
        if generated is None:
            logger.debug("Section omitted", extra={"section": str(request)})
            continue

        logger.debug("Section synthesized", extra={"section": str(request)})
        assembled.sections.append(AssembledSection(request=str(request), heading=generated, synthesized=True))
    return assembled


def generate_raw_pod(
    source: str,
    config: RenderConfig,
    distribution: Distribution,
    *,
    filename: str = "",
) -> str:
    """Extract, re-nest, assemble, and serialize the README POD.

    A source without POD yields an empty string; no fallback sections are
    generated for it.
    """
    document = parse_source(source, filename)
    if document is None:
        return ""
    return assemble_sections(document, config, distribution).to_pod()
