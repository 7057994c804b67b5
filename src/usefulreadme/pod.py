"""Serialize document trees back into canonical POD text."""

from __future__ import annotations

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


def to_pod(nodes: Iterable[DocumentNode], *, max_depth: int = USEFULREADME_MAX_NODE_DEPTH) -> str:
    """Serialize nodes into POD; every paragraph ends with a blank line."""
    return "".join(as_pod_string(node, max_depth=max_depth) for node in nodes)


def as_pod_string(
    node: DocumentNode, *, depth: int = 0, max_depth: int = USEFULREADME_MAX_NODE_DEPTH
) -> str:
    """Serialize one node and everything it owns."""
    if depth > max_depth:
        raise ParseError(f"Document nesting exceeds {max_depth} levels")

    def _children(children: list[DocumentNode]) -> str:
        return "".join(as_pod_string(child, depth=depth + 1, max_depth=max_depth) for child in children)

    if isinstance(node, (Text, Verbatim)):
        return _paragraph(node.content)

    if isinstance(node, Heading):
        return _paragraph(f"=head{node.level} {node.title}") + _children(node.children)

    if isinstance(node, ListItem):
        pod = _paragraph(f"=item {node.marker}")
        if node.content:
            pod += _paragraph(node.content)
        return pod

    if isinstance(node, ListBlock):
        return _paragraph(f"=over {node.indent}") + _children(node.children) + _paragraph("=back")

    if isinstance(node, Region):
        name = f":{node.name}" if node.is_pod else node.name
        return _paragraph(f"=begin {name}") + _children(node.children) + _paragraph(f"=end {name}")

    if isinstance(node, Command):
        return _paragraph(f"={node.command} {node.content}".rstrip())

    raise TypeError(f"Unknown document node: {node!r}")


def _paragraph(text: str) -> str:
    return text.rstrip("\n") + "\n\n"
