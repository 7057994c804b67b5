"""Heading matching for section requests."""

from __future__ import annotations

import re
from typing import Iterable

from usefulreadme.pod_parser import top_level_headings
from usefulreadme.schemas import DocumentNode, Heading, SectionRequest


def normalize_section_title(title: str) -> str:
    """Normalize section titles for comparison."""
    return re.sub(r"\s+", " ", title.strip()).casefold()


def heading_matches(heading: Heading, request: SectionRequest) -> bool:
    """Whether ``heading`` satisfies ``request``.

    Literal requests compare normalized titles; pattern requests must match
    the whole (stripped) title, case-insensitively.
    """
    if request.kind == "pattern":
        pattern = request.pattern
        return pattern is not None and pattern.fullmatch(heading.title.strip()) is not None
    return normalize_section_title(heading.title) == normalize_section_title(request.value)


def match_section(
    nodes: Iterable[DocumentNode], request: SectionRequest, *, level: int = 1
) -> Heading | None:
    """Return the first heading at ``level`` matching ``request``, in document order."""
    for heading in top_level_headings(nodes, level):
        if heading_matches(heading, request):
            return heading
    return None
