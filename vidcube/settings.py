from __future__ import annotations

import os
from pathlib import Path

# Application-wide constants and resolved paths
# vidcube/ -> project root
BASE = Path(__file__).resolve().parent.parent
PUBLIC_DIR = Path(os.getenv("PUBLIC_DIR", str(BASE / "public"))).resolve()

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "8080"))
# Exposes GET /_ls (public dir listing); diagnostic only
DEBUG_LISTING: bool = os.getenv("DEBUG_LISTING", "").strip().lower() in ("1", "true", "yes")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Media
SAMPLE_VIDEO = "https://interactive-examples.mdn.mozilla.net/media/cc0-videos/flower.mp4"
DEFAULT_MEDIA_TYPE = "video/mp4"
ACCEPTED_MEDIA_PREFIXES = ("video/", "image/")

# Upload / search form choices
DEFAULT_UPLOAD_TITLE = "My demo video"
GENRES = ("Sports", "Food", "Music")
