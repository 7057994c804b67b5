"""Extract POD from Perl sources and parse it into a document tree."""

from __future__ import annotations

import re
from typing import Iterable

from usefulreadme.config import USEFULREADME_MAX_NODE_DEPTH
from usefulreadme.exceptions import ParseError
from usefulreadme.schemas import (
    Command,
    DocumentNode,
    Heading,
    ListBlock,
    ListItem,
    Region,
    Text,
    Verbatim,
)
from usefulreadme.utils.logging_config import get_logger

logger = get_logger(__name__)

_POD_START_RE = re.compile(r"^=[a-zA-Z]")
_CUT_RE = re.compile(r"^=cut\b")
_BLANK_LINE_RE = re.compile(r"\n[ \t]*\n")
_COMMAND_RE = re.compile(r"^=([a-zA-Z]\w*)[ \t]*(.*)\Z", re.DOTALL)
_HEADING_RE = re.compile(r"^head([1-6])$")

# Regions whose POD is meant for the README; unwrapped before section matching.
README_REGIONS = frozenset({"readme"})


def extract_pod(source: str, filename: str = "") -> str:
    """Return the POD embedded in a Perl source file.

    A ``.pod`` file is returned as-is. Otherwise every block from a line
    starting with ``=identifier`` to the next ``=cut`` is collected, including
    blocks after ``__END__``. Returns an empty string when there is no POD.
    """
    if not source:
        return ""
    if filename.endswith(".pod"):
        return source

    blocks: list[str] = []
    current: list[str] | None = None
    for line in source.splitlines():
        if current is None:
            if _POD_START_RE.match(line) and not _CUT_RE.match(line):
                current = [line]
            continue
        if _CUT_RE.match(line):
            blocks.append("\n".join(current).strip("\n"))
            current = None
            continue
        current.append(line)

    if current is not None:
        blocks.append("\n".join(current).strip("\n"))

    pod = "\n\n".join(block for block in blocks if block)
    return pod + "\n" if pod else ""


def strip_pod(source: str) -> str:
    """Return ``source`` with all POD blocks removed."""
    kept: list[str] = []
    in_pod = False
    for line in source.splitlines():
        if in_pod:
            if _CUT_RE.match(line):
                in_pod = False
            continue
        if _POD_START_RE.match(line):
            in_pod = not _CUT_RE.match(line)
            continue
        kept.append(line)
    return "\n".join(kept).rstrip() + "\n" if kept else ""


def split_paragraphs(pod: str) -> list[str]:
    """Split POD text into paragraphs separated by blank lines."""
    text = pod.replace("\r\n", "\n").replace("\r", "\n")
    return [paragraph.strip("\n") for paragraph in _BLANK_LINE_RE.split(text) if paragraph.strip()]


def parse_pod(pod: str) -> list[DocumentNode]:
    """Parse POD into a flat node list.

    Lists and regions are nested; headings are not (see ``nest_sections``).
    """
    root: list[DocumentNode] = []
    # Open containers: (node, the command that closes it).
    stack: list[tuple[ListBlock | Region, str]] = []

    def _append(node: DocumentNode) -> None:
        target = stack[-1][0].children if stack else root
        if isinstance(node, Verbatim) and target and isinstance(target[-1], Verbatim):
            target[-1] = Verbatim(content=target[-1].content + "\n\n" + node.content)
            return
        target.append(node)

    def _in_data_region() -> bool:
        return bool(stack) and isinstance(stack[-1][0], Region) and not stack[-1][0].is_pod

    for paragraph in split_paragraphs(pod):
        match = _COMMAND_RE.match(paragraph)
        if not match:
            if _in_data_region() or not paragraph[:1].isspace():
                _append(Text(content=paragraph))
            else:
                _append(Verbatim(content=paragraph))
            continue

        command, content = match.group(1), match.group(2).strip()

        if _in_data_region() and command not in {"end", "begin"}:
            _append(Text(content=paragraph))
            continue

        if command in {"pod", "cut"}:
            continue

        if command == "over":
            block = ListBlock(indent=content or "4")
            _append(block)
            stack.append((block, "back"))
            continue

        if command == "back":
            if stack and stack[-1][1] == "back":
                stack.pop()
            else:
                logger.debug("Ignoring =back without =over")
            continue

        if command == "item":
            _append(ListItem(marker=_normalize_space(content) or "*"))
            continue

        if command == "begin":
            name, _, _ = content.partition(" ")
            region = Region(name=name.lstrip(":"), is_pod=name.startswith(":"))
            _append(region)
            stack.append((region, f"end {name}"))
            continue

        if command == "end":
            expected = f"end {content.split(' ')[0]}" if content else "end"
            while stack and stack[-1][1] == "back":
                logger.debug("Closing unterminated =over inside region")
                stack.pop()
            if stack and stack[-1][1] == expected:
                stack.pop()
            else:
                logger.debug("Ignoring unmatched =end", extra={"region": content})
            continue

        if command == "for":
            name, _, body = content.partition(" ")
            is_pod = name.startswith(":")
            body = body.strip()
            children: list[DocumentNode] = []
            if body:
                children = parse_pod(body) if is_pod else [Text(content=body)]
            _append(Region(name=name.lstrip(":"), is_pod=is_pod, children=children))
            continue

        heading = _HEADING_RE.match(command)
        if heading:
            _append(Heading(level=int(heading.group(1)), title=_normalize_space(content)))
            continue

        _append(Command(command=command, content=content))

    return root


def nest_sections(
    nodes: list[DocumentNode], *, max_depth: int = USEFULREADME_MAX_NODE_DEPTH
) -> list[DocumentNode]:
    """Re-nest a flat node list so each heading owns the nodes that follow it.

    A heading at level N collects every following sibling until a heading at
    level <= N appears. README regions are unwrapped first.
    """
    flat = list(_unwrap_readme_regions(nodes, depth=0, max_depth=max_depth))
    result: list[DocumentNode] = []
    stack: list[Heading] = []

    for node in flat:
        if isinstance(node, Heading):
            node = node.model_copy(update={"children": list(node.children)})
            while stack and stack[-1].level >= node.level:
                stack.pop()
            if stack:
                stack[-1].children.append(node)
            else:
                result.append(node)
            stack.append(node)
            continue

        if stack:
            stack[-1].children.append(node)
        else:
            result.append(node)

    return result


def parse_document(pod: str, *, max_depth: int = USEFULREADME_MAX_NODE_DEPTH) -> list[DocumentNode]:
    """Parse POD and re-nest it by heading level."""
    return nest_sections(parse_pod(pod), max_depth=max_depth)


def top_level_headings(nodes: Iterable[DocumentNode], level: int = 1) -> list[Heading]:
    """Return the headings of ``level`` among ``nodes`` in document order."""
    return [node for node in nodes if isinstance(node, Heading) and node.level == level]


def _unwrap_readme_regions(
    nodes: Iterable[DocumentNode], *, depth: int, max_depth: int
) -> Iterable[DocumentNode]:
    if depth > max_depth:
        raise ParseError(f"Document nesting exceeds {max_depth} levels")
    for node in nodes:
        if isinstance(node, Region) and node.is_pod and node.name in README_REGIONS:
            yield from _unwrap_readme_regions(node.children, depth=depth + 1, max_depth=max_depth)
        else:
            yield node


def _normalize_space(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()
