"""Local configuration for usefulreadme."""

from __future__ import annotations

import os

DEFAULT_TYPE = "text"
DEFAULT_CHANGELOG = "Changes"
DEFAULT_MAX_NODE_DEPTH = 100
DEFAULT_TEXT_WIDTH = 76
DEFAULT_METACPAN_URL = "https://metacpan.org/pod/"

# Heading requests used when no ``sections`` option is given. Underscores read as spaces.
DEFAULT_SECTIONS: tuple[str, ...] = tuple(
    name.replace("_", " ")
    for name in (
        "name",
        "version",
        "synopsis",
        "description",
        "requirements",
        "installation",
        "/support|bugs/",
        "source",
        "/authors?/",
        "/contributors?/",
        "/copyright|license|copyright_and_license/",
        "see_also",
    )
)

CPAN_URL = "https://www.cpan.org"
CPAN_INSTALL_GUIDE_URL = "https://www.cpan.org/modules/INSTALL.html"
DZIL_URL = "https://dzil.org/"

USEFULREADME_TYPE = os.getenv("USEFULREADME_TYPE", DEFAULT_TYPE)
USEFULREADME_MAX_NODE_DEPTH = int(os.getenv("USEFULREADME_MAX_NODE_DEPTH", str(DEFAULT_MAX_NODE_DEPTH)))
USEFULREADME_TEXT_WIDTH = int(os.getenv("USEFULREADME_TEXT_WIDTH", str(DEFAULT_TEXT_WIDTH)))
USEFULREADME_METACPAN_URL = os.getenv("USEFULREADME_METACPAN_URL", DEFAULT_METACPAN_URL)
USEFULREADME_LOG_LEVEL = os.getenv("USEFULREADME_LOG_LEVEL", "WARNING")
