"""Changelog models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ReleaseEntry(BaseModel):
    """One changelog bullet (or ``[Group]``) and its sub-entries."""

    text: str | None = None
    children: list[ReleaseEntry] = Field(default_factory=list)


class Release(BaseModel):
    """A versioned block of change entries."""

    version: str
    date: str | None = None
    note: str | None = None
    entries: list[ReleaseEntry] = Field(default_factory=list)


class Changelog(BaseModel):
    """Parsed change history, newest release first as written."""

    preamble: str | None = None
    releases: list[Release] = Field(default_factory=list)

    def find_release(self, version: str) -> Release | None:
        """Return the release whose version string equals ``version`` exactly."""
        for release in self.releases:
            if release.version == version:
                return release
        return None
