"""Convert POD to plain text."""

from __future__ import annotations

import re
import textwrap

from bs4 import BeautifulSoup

from usefulreadme.config import USEFULREADME_TEXT_WIDTH
from usefulreadme.inline import InlineNode, parse_inline, parse_link, plain_text, resolve_escape
from usefulreadme.pod_parser import parse_pod
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

_NBSP = "\u00a0"
_BODY_INDENT = 4


def convert_pod_to_text(pod: str, *, width: int = USEFULREADME_TEXT_WIDTH) -> str:
    """Render POD as indented, wrapped plain text."""
    renderer = _TextRenderer(width=width)
    blocks = renderer.render_nodes(parse_pod(pod), indent=_BODY_INDENT)
    content = "\n\n".join(block for block in blocks if block.strip())
    return content + "\n" if content else ""


class _TextRenderer:
    def __init__(self, *, width: int) -> None:
        self.width = width

    def render_nodes(self, nodes: list[DocumentNode], *, indent: int) -> list[str]:
        blocks: list[str] = []
        for node in nodes:
            blocks.extend(self.render_node(node, indent=indent))
        return blocks

    def render_node(self, node: DocumentNode, *, indent: int) -> list[str]:
        if isinstance(node, Heading):
            title = _inline_text(node.title)
            heading_indent = 0 if node.level == 1 else min((node.level - 1) * 2, _BODY_INDENT)
            return [" " * heading_indent + title] + self.render_nodes(node.children, indent=indent)

        if isinstance(node, Text):
            return [self._wrap(_inline_text(node.content), indent=indent)]

        if isinstance(node, Verbatim):
            return [textwrap.indent(node.content.expandtabs(8), " " * indent, lambda line: True)]

        if isinstance(node, ListBlock):
            return self._render_list(node, indent=indent)

        if isinstance(node, ListItem):
            return self._render_list(ListBlock(children=[node]), indent=indent)

        if isinstance(node, Region):
            if node.is_pod:
                return self.render_nodes(node.children, indent=indent)
            raw = "\n\n".join(child.content for child in node.children if isinstance(child, Text))
            if node.name == "text":
                return [textwrap.indent(raw, " " * indent)] if raw else []
            if node.name == "html" and raw:
                text = BeautifulSoup(raw, "lxml").get_text(" ", strip=True)
                return [self._wrap(text, indent=indent)] if text else []
            return []

        if isinstance(node, Command):
            return []

        return []

    def _render_list(self, block: ListBlock, *, indent: int) -> list[str]:
        step = int(block.indent) if block.indent.isdigit() else _BODY_INDENT
        item_indent = indent + step
        blocks: list[str] = []
        pending: str | None = None
        counter = 0

        for child in block.children:
            if isinstance(child, ListItem):
                if pending is not None:
                    blocks.append(" " * indent + pending)
                counter += 1
                label = _item_label(child.marker, counter)
                if child.content:
                    blocks.append(self._hang(label, _inline_text(child.content), indent, item_indent))
                    pending = None
                else:
                    pending = label
                continue

            if isinstance(child, Text) and pending is not None:
                blocks.append(self._hang(pending, _inline_text(child.content), indent, item_indent))
                pending = None
                continue

            if pending is not None:
                blocks.append(" " * indent + pending)
                pending = None
            blocks.extend(self.render_node(child, indent=item_indent))

        if pending is not None:
            blocks.append(" " * indent + pending)
        return blocks

    def _hang(self, label: str, text: str, indent: int, item_indent: int) -> str:
        """Label at ``indent``, text continuing at ``item_indent``."""
        lead = " " * indent + label
        if len(lead) >= item_indent:
            return lead + "\n" + self._wrap(text, indent=item_indent)
        initial = lead.ljust(item_indent)
        wrapped = textwrap.fill(
            text,
            width=self.width,
            initial_indent=initial,
            subsequent_indent=" " * item_indent,
            break_on_hyphens=False,
        )
        return wrapped.replace(_NBSP, " ")

    def _wrap(self, text: str, *, indent: int) -> str:
        wrapped = textwrap.fill(
            text,
            width=self.width,
            initial_indent=" " * indent,
            subsequent_indent=" " * indent,
            break_on_hyphens=False,
            break_long_words=False,
        )
        return wrapped.replace(_NBSP, " ")


def _item_label(marker: str, counter: int) -> str:
    if marker in {"*", "-", "+", "o"}:
        return "*"
    if re.fullmatch(r"\d+\.?", marker):
        return f"{counter}."
    return _inline_text(marker)


def _inline_text(text: str) -> str:
    return re.sub(r"[ \t\r\n]+", " ", _render_inline(parse_inline(text))).strip()


def _render_inline(nodes: list[InlineNode]) -> str:
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, str):
            parts.append(node)
            continue
        code = node.code
        if code == "C":
            parts.append(f'"{plain_text(node.children)}"')
        elif code == "E":
            parts.append(resolve_escape(plain_text(node.children)))
        elif code == "S":
            parts.append(re.sub(r"\s", _NBSP, _render_inline(node.children)))
        elif code in {"X", "Z"}:
            continue
        elif code == "L":
            link = parse_link(node.children)
            if link.url and link.label:
                parts.append(f"{link.label} <{link.url}>")
            else:
                parts.append(link.display)
        else:
            parts.append(_render_inline(node.children))
    return "".join(parts)
