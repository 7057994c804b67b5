"""Configuration for the preview server."""

from __future__ import annotations

import os

MAX_POD_SIZE = int(os.getenv("USEFULREADME_MAX_POD_SIZE", str(512 * 1024)))  # characters
MAX_DISPLAY_SIZE = int(os.getenv("USEFULREADME_MAX_DISPLAY_SIZE", "300000"))  # characters
DEFAULT_DIST_NAME = "Example-Dist"
DEFAULT_DIST_VERSION = "0.01"

APP_TITLE = "usefulreadme"
APP_DESCRIPTION = "Render README files from POD."
