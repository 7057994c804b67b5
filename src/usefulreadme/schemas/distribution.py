"""Distribution metadata and file-set models."""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

_PACKAGE_RE = re.compile(r"^\s*package\s+([A-Za-z_]\w*(?:::\w+)*)", re.MULTILINE)


class DistFile(BaseModel):
    """A file in the distribution, path relative to the distribution root."""

    name: str
    content: str = ""


class Distribution(BaseModel):
    """Metadata snapshot for one distribution.

    Attributes:
        name: Distribution name, e.g. ``Foo-Bar``.
        version: Resolved version string (opaque, may be a placeholder).
        main_module: Path of the main module within ``files``.
        runtime_requires: Runtime dependency names mapped to a minimum
            version, or ``None`` when any version will do.
        files: The distribution's file set, in gathering order.
    """

    name: str
    version: str
    main_module: str
    runtime_requires: dict[str, str | None] = Field(default_factory=dict)
    files: list[DistFile] = Field(default_factory=list)

    def find_file(self, name: str) -> DistFile | None:
        """Return the first file called ``name``."""
        for file in self.files:
            if file.name == name:
                return file
        return None

    @property
    def package_name(self) -> str:
        """Package declared by the main module, falling back to the dist name."""
        main = self.find_file(self.main_module)
        if main is not None:
            match = _PACKAGE_RE.search(main.content)
            if match:
                return match.group(1)
        return self.name.replace("-", "::")
