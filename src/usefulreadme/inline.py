"""Parse POD formatting codes (``B<...>``, ``L<...>``, ``C<< ... >>``)."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from typing import Union

from usefulreadme.config import USEFULREADME_MAX_NODE_DEPTH
from usefulreadme.exceptions import ParseError

_CODE_START_RE = re.compile(r"([A-Z])(<+)")

_NAMED_ESCAPES = {
    "lt": "<",
    "gt": ">",
    "verbar": "|",
    "sol": "/",
}


@dataclass
class FormattingCode:
    """A formatting code and its parsed contents."""

    code: str
    children: list[InlineNode] = field(default_factory=list)


InlineNode = Union[str, FormattingCode]


@dataclass
class Link:
    """A decoded ``L<...>`` target."""

    label: str | None
    name: str | None
    section: str | None
    url: str | None

    @property
    def display(self) -> str:
        if self.label:
            return self.label
        if self.url:
            return self.url
        if self.name and self.section:
            return f'"{self.section}" in {self.name}'
        if self.section:
            return f'"{self.section}"'
        return self.name or ""


def parse_inline(text: str, *, max_depth: int = USEFULREADME_MAX_NODE_DEPTH) -> list[InlineNode]:
    """Parse a paragraph into text runs and formatting codes.

    Unterminated codes are closed at the end of the paragraph.
    """
    nodes, _ = _parse(text, 0, None, depth=0, max_depth=max_depth)
    return nodes


def _parse(
    text: str,
    pos: int,
    closer: re.Pattern[str] | str | None,
    *,
    depth: int,
    max_depth: int,
) -> tuple[list[InlineNode], int]:
    if depth > max_depth:
        raise ParseError(f"Formatting codes nested deeper than {max_depth} levels")

    nodes: list[InlineNode] = []
    buffer: list[str] = []

    def _flush() -> None:
        if buffer:
            nodes.append("".join(buffer))
            buffer.clear()

    while pos < len(text):
        if isinstance(closer, str):
            if text.startswith(closer, pos):
                _flush()
                return nodes, pos + len(closer)
        elif closer is not None:
            end = closer.match(text, pos)
            if end:
                _flush()
                return nodes, end.end()

        start = _CODE_START_RE.match(text, pos)
        if start:
            code, brackets = start.group(1), start.group(2)
            inner_pos = start.end()
            if len(brackets) == 1:
                inner_closer: re.Pattern[str] | str = ">"
            elif inner_pos < len(text) and text[inner_pos].isspace():
                inner_closer = re.compile(r"\s+" + ">" * len(brackets))
                while inner_pos < len(text) and text[inner_pos].isspace():
                    inner_pos += 1
            else:
                # Doubled brackets without whitespace: treat as one bracket.
                inner_closer = ">"
                inner_pos = start.start() + 2
            _flush()
            children, pos = _parse(text, inner_pos, inner_closer, depth=depth + 1, max_depth=max_depth)
            nodes.append(FormattingCode(code=code, children=children))
            continue

        buffer.append(text[pos])
        pos += 1

    _flush()
    return nodes, pos


def resolve_escape(name: str) -> str:
    """Resolve the contents of an ``E<...>`` code to a character."""
    name = name.strip()
    if name in _NAMED_ESCAPES:
        return _NAMED_ESCAPES[name]
    if re.fullmatch(r"0[xX][0-9a-fA-F]+", name):
        return chr(int(name, 16))
    if re.fullmatch(r"0[0-7]+", name):
        return chr(int(name, 8))
    if name.isdigit():
        return chr(int(name))
    resolved = html.unescape(f"&{name};")
    return resolved if resolved != f"&{name};" else f"E<{name}>"


def plain_text(nodes: list[InlineNode]) -> str:
    """Flatten inline nodes to plain text."""
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, str):
            parts.append(node)
        elif node.code == "E":
            parts.append(resolve_escape(plain_text(node.children)))
        elif node.code in {"X", "Z"}:
            continue
        elif node.code == "L":
            parts.append(parse_link(node.children).display)
        else:
            parts.append(plain_text(node.children))
    return "".join(parts)


def parse_link(children: list[InlineNode]) -> Link:
    """Decode the ``text|name/"section"`` forms of an ``L<...>`` code."""
    raw = plain_text_raw(children)
    label: str | None = None
    target = raw
    if "|" in raw:
        label, target = raw.split("|", 1)
        label = label.strip() or None
    target = target.strip()

    if re.match(r"^[a-zA-Z][\w+.\-]*:[^:\s]\S*$", target):
        return Link(label=label, name=None, section=None, url=target)

    name: str | None = target
    section: str | None = None
    if "/" in target:
        name, section = target.split("/", 1)
        section = section.strip().strip('"') or None
        name = name.strip() or None
    elif target.startswith('"') and target.endswith('"'):
        name, section = None, target.strip('"')
    return Link(label=label, name=name, section=section, url=None)


def plain_text_raw(nodes: list[InlineNode]) -> str:
    """Flatten like ``plain_text`` but keep ``L<>`` targets intact."""
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, str):
            parts.append(node)
        elif node.code == "E":
            parts.append(resolve_escape(plain_text(node.children)))
        elif node.code in {"X", "Z"}:
            continue
        else:
            parts.append(plain_text_raw(node.children))
    return "".join(parts)
