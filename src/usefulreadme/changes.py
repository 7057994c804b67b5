"""Parse CPAN-style changelogs and slice out one release."""

from __future__ import annotations

import re

from usefulreadme.config import DEFAULT_CHANGELOG, USEFULREADME_MAX_NODE_DEPTH
from usefulreadme.exceptions import ParseError
from usefulreadme.schemas import (
    Changelog,
    DocumentNode,
    Heading,
    ListBlock,
    ListItem,
    Release,
    ReleaseEntry,
    Text,
)
from usefulreadme.utils.logging_config import get_logger

logger = get_logger(__name__)

_VERSION_TOKEN = r"v?\d[\w.\-]*|\{\{\$NEXT\}\}"
_DATE_RE = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2}(?:[T ]\d{2}:\d{2}(?::\d{2})?(?:\.\d+)?(?:Z|[+-]\d{2}:?\d{2})?)?)"
    r"(?:\s+(?P<note>.*))?$"
)
_BULLET_RE = re.compile(r"^[-*+]\s+(?P<text>.*)$")
_GROUP_RE = re.compile(r"^\[\s*(?P<name>.*?)\s*\]$")


def parse_changelog(text: str, *, version_like: str | None = None) -> Changelog:
    """Parse changelog text into releases.

    Args:
        text: Raw changelog contents.
        version_like: Extra token accepted as a release version, e.g. an
            unexpanded ``{{$NEXT}}`` placeholder or any caller-supplied
            version that does not look like a number.

    Returns:
        The parsed changelog; releases keep their source order and later
        duplicates of a version are dropped.
    """
    tokens = _VERSION_TOKEN
    if version_like:
        tokens = f"{re.escape(version_like)}|{tokens}"
    release_re = re.compile(rf"^(?P<version>{tokens})(?:\s+(?P<rest>.*))?$")

    preamble: list[str] = []
    releases: list[Release] = []
    seen: set[str] = set()
    release: Release | None = None
    group: ReleaseEntry | None = None
    stack: list[tuple[int, ReleaseEntry]] = []
    last: ReleaseEntry | None = None

    for raw_line in text.replace("\r\n", "\n").split("\n"):
        line = raw_line.expandtabs(8).rstrip()
        if not line.strip():
            continue

        indent = len(line) - len(line.lstrip())
        content = line.strip()

        if indent == 0:
            match = release_re.match(content)
            if match:
                date, note = _split_date(match.group("rest") or "")
                release = Release(version=match.group("version"), date=date, note=note)
                if release.version in seen:
                    logger.warning("Duplicate release in changelog", extra={"version": release.version})
                else:
                    seen.add(release.version)
                    releases.append(release)
                group = None
                stack = []
                last = None
                continue
            if release is None:
                preamble.append(content)
                continue

        if release is None:
            preamble.append(content)
            continue

        group_match = _GROUP_RE.match(content)
        if group_match:
            group = ReleaseEntry(text=group_match.group("name") or None)
            release.entries.append(group)
            stack = []
            last = group
            continue

        bullet = _BULLET_RE.match(content)
        if bullet is None and last is not None:
            last.text = f"{last.text} {content}" if last.text else content
            continue

        entry = ReleaseEntry(text=(bullet.group("text") if bullet else content) or None)
        while stack and stack[-1][0] >= indent:
            stack.pop()
        if stack:
            parent = stack[-1][1].children
        elif group is not None:
            parent = group.children
        else:
            parent = release.entries
        parent.append(entry)
        stack.append((indent, entry))
        last = entry

    return Changelog(preamble="\n".join(preamble) or None, releases=releases)


def release_to_nodes(
    entry: Release | ReleaseEntry, *, depth: int = 0, max_depth: int = USEFULREADME_MAX_NODE_DEPTH
) -> list[DocumentNode]:
    """Flatten a release (or entry) into POD list nodes, depth first.

    An entry with text becomes a ``* text`` item; children become a nested
    list. An entry with neither contributes nothing.
    """
    if depth > max_depth:
        raise ParseError(f"Changelog nesting exceeds {max_depth} levels")

    nodes: list[DocumentNode] = []
    if isinstance(entry, ReleaseEntry):
        if entry.text:
            nodes.append(ListItem(marker="*", content=entry.text))
        children = entry.children
    else:
        children = entry.entries

    if children:
        items: list[DocumentNode] = []
        for child in children:
            items.extend(release_to_nodes(child, depth=depth + 1, max_depth=max_depth))
        nodes.append(ListBlock(indent="4", children=items))
    return nodes


def recent_changes_section(
    changelog_text: str,
    version: str,
    *,
    changelog_name: str = DEFAULT_CHANGELOG,
    header: str = "RECENT CHANGES",
) -> Heading | None:
    """Build the recent-changes section for ``version``.

    Returns ``None`` when the changelog has a single release (assumed to be
    an "initial release" stub), when the version is absent, or when the
    release has no entries.
    """
    changelog = parse_changelog(changelog_text, version_like=version)

    if len(changelog.releases) <= 1:
        logger.debug("Changelog has at most one release; skipping", extra={"changelog": changelog_name})
        return None

    release = changelog.find_release(version)
    if release is None:
        logger.debug("Version not found in changelog", extra={"version": version, "changelog": changelog_name})
        return None

    entries = release_to_nodes(release)
    if not entries:
        return None

    text = f"Changes for version {version}"
    if release.date:
        text += f" ({release.date[:10]})"

    return Heading(
        level=1,
        title=header,
        children=[
            Text(content=text),
            *entries,
            Text(content=f"See the F<{changelog_name}> file for more details."),
        ],
    )


def _split_date(rest: str) -> tuple[str | None, str | None]:
    rest = rest.strip()
    if not rest:
        return None, None
    match = _DATE_RE.match(rest)
    if match:
        return match.group("date"), (match.group("note") or "").strip() or None
    return None, rest
