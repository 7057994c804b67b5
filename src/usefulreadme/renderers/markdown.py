"""Convert POD to Markdown with a custom serializer."""

from __future__ import annotations

import re
import textwrap
from typing import Literal
from urllib.parse import quote

from usefulreadme.config import USEFULREADME_METACPAN_URL
from usefulreadme.inline import FormattingCode, InlineNode, parse_inline, parse_link, plain_text, resolve_escape
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

Flavor = Literal["markdown", "gfm"]

_ESCAPE_RE = re.compile(r"([\\`*_\[\]<>])")
_LEADING_BLOCK_RE = re.compile(r"^(#|>|[-+]\s)")
_NUMBERED_START_RE = re.compile(r"^(\d+)\.\s")
_RAW_REGIONS = frozenset({"markdown", "html"})


def convert_pod_to_markdown(pod: str, *, flavor: Flavor = "markdown") -> str:
    """Convert POD text into Markdown.

    Parameters
    ----------
    pod : str
        Canonical POD text.
    flavor : str
        ``markdown`` indents code blocks; ``gfm`` fences them.
    """
    blocks = _serialize_nodes(parse_pod(pod), flavor=flavor)
    content = "\n\n".join(block for block in blocks if block).strip()
    return content + "\n" if content else ""


def convert_pod_to_gfm(pod: str) -> str:
    """Convert POD text into GitHub-flavored Markdown."""
    return convert_pod_to_markdown(pod, flavor="gfm")


def _serialize_nodes(nodes: list[DocumentNode], *, flavor: Flavor) -> list[str]:
    blocks: list[str] = []
    for node in nodes:
        blocks.extend(_serialize_block(node, flavor=flavor))
    return blocks


def _serialize_block(node: DocumentNode, *, flavor: Flavor) -> list[str]:
    if isinstance(node, Heading):
        heading = _serialize_paragraph(node.title)
        blocks = [f"{'#' * min(node.level, 6)} {heading}"] if heading else []
        return blocks + _serialize_nodes(node.children, flavor=flavor)

    if isinstance(node, Text):
        paragraph = _serialize_paragraph(node.content)
        return [paragraph] if paragraph else []

    if isinstance(node, Verbatim):
        return [_serialize_verbatim(node.content, flavor=flavor)]

    if isinstance(node, ListBlock):
        lines = _serialize_list(node, flavor=flavor)
        return ["\n".join(lines)] if lines else []

    if isinstance(node, ListItem):
        # An item outside any list; render it as a one-item list.
        return ["\n".join(_serialize_list(ListBlock(children=[node]), flavor=flavor))]

    if isinstance(node, Region):
        if node.is_pod:
            return _serialize_nodes(node.children, flavor=flavor)
        if node.name in _RAW_REGIONS:
            raw = "\n\n".join(child.content for child in node.children if isinstance(child, Text))
            return [raw] if raw else []
        return []

    if isinstance(node, Command):
        return []

    return []


def _serialize_paragraph(text: str) -> str:
    content = _normalize_text(_serialize_inline(parse_inline(text)))
    numbered = _NUMBERED_START_RE.match(content)
    if numbered:
        return f"{numbered.group(1)}\\.{content[numbered.end(1) + 1:]}"
    if _LEADING_BLOCK_RE.match(content):
        content = "\\" + content
    return content


def _serialize_verbatim(text: str, *, flavor: Flavor) -> str:
    code = textwrap.dedent(text).strip("\n")
    if flavor == "gfm":
        fence = "```"
        while fence in code:
            fence += "`"
        return f"{fence}\n{code}\n{fence}"
    return textwrap.indent(code, "    ", lambda line: True)


def _serialize_list(block: ListBlock, indent: int = 0, *, flavor: Flavor) -> list[str]:
    lines: list[str] = []
    prefix = "  " * indent
    # Marker and term of an item still waiting for its paragraph.
    pending: tuple[str, str] | None = None
    counter = 0

    def _emit_item(marker: str, term: str, text: str) -> None:
        body = f"{term} - {text}" if term and text else term or text
        lines.append(f"{prefix}{marker} {body}".rstrip())

    for child in block.children:
        if isinstance(child, ListItem):
            if pending is not None:
                _emit_item(*pending, "")
            counter += 1
            marker, term = _list_marker(child.marker, counter)
            if child.content:
                _emit_item(marker, term, _serialize_paragraph(child.content))
                pending = None
            else:
                pending = (marker, term)
            continue

        if isinstance(child, Text) and pending is not None:
            _emit_item(*pending, _serialize_paragraph(child.content))
            pending = None
            continue

        if pending is not None:
            _emit_item(*pending, "")
            pending = None

        if isinstance(child, ListBlock):
            lines.extend(_serialize_list(child, indent + 1, flavor=flavor))
            continue

        for nested in _serialize_block(child, flavor=flavor):
            lines.append("")
            lines.append(textwrap.indent(nested, prefix + "  ", lambda line: True))

    if pending is not None:
        _emit_item(*pending, "")
    return lines


def _list_marker(marker: str, counter: int) -> tuple[str, str]:
    """Return the Markdown bullet and, for definition items, the term."""
    if marker in {"*", "-", "+", "o"}:
        return "-", ""
    if re.fullmatch(r"\d+\.?", marker):
        return f"{counter}.", ""
    term = _serialize_paragraph(marker.lstrip("*").strip()) if marker.startswith("*") else _serialize_paragraph(marker)
    return "-", term


def _serialize_inline(nodes: list[InlineNode]) -> str:
    return "".join(_serialize_inline_node(node) for node in nodes)


def _serialize_inline_node(node: InlineNode) -> str:
    if isinstance(node, str):
        return _escape(node)

    code = node.code
    if code == "B":
        inner = _serialize_inline(node.children)
        return f"**{inner}**" if inner else ""
    if code == "I":
        inner = _serialize_inline(node.children)
        return f"_{inner}_" if inner else ""
    if code in {"C", "F"}:
        return _code_span(plain_text(node.children))
    if code == "E":
        return _escape(resolve_escape(plain_text(node.children)))
    if code == "S":
        return _serialize_inline(node.children).replace(" ", "&nbsp;")
    if code in {"X", "Z"}:
        return ""
    if code == "L":
        return _serialize_link(node)
    return _serialize_inline(node.children)


def _serialize_link(node: FormattingCode) -> str:
    link = parse_link(node.children)
    text = _escape(link.display)
    if link.url:
        return f"[{text}]({link.url})"
    if link.name:
        url = USEFULREADME_METACPAN_URL + quote(link.name, safe=":")
        if link.section:
            url += "#" + anchor_for(link.section)
        return f"[{text}]({url})"
    if link.section:
        return f"[{text}](#{anchor_for(link.section)})"
    return text


def anchor_for(title: str) -> str:
    """GitHub-style heading anchor."""
    slug = re.sub(r"[^\w\- ]", "", title.strip().lower())
    return re.sub(r" ", "-", slug)


def _code_span(text: str) -> str:
    if not text:
        return ""
    fence = "`"
    while fence in text:
        fence += "`"
    padding = " " if text.startswith("`") or text.endswith("`") else ""
    return f"{fence}{padding}{text}{padding}{fence}"


def _escape(text: str) -> str:
    return _ESCAPE_RE.sub(r"\\\1", text)


def _normalize_text(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()
