"""
Track Solo - Configuration
All settings loaded from environment variables with sensible defaults.

The service is stateless: uploads are processed entirely in memory and the
resulting archive is streamed straight back to the client.  Nothing is
written to disk.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
_ = load_dotenv()

# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------
APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
APP_PORT = int(os.getenv("APP_PORT", "8000"))
APP_ENV = os.getenv("APP_ENV", "development")
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
DEBUG = os.getenv("DEBUG", "true").lower() == "true"

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent

TEMPLATES_DIR = BASE_DIR / "templates"

# ---------------------------------------------------------------------------
# Logging - stdout only
# ---------------------------------------------------------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# ---------------------------------------------------------------------------
# MIDI processing
# ---------------------------------------------------------------------------
# 7-bit velocity domain
MIN_VELOCITY = 0
MAX_VELOCITY = 127

# Amount subtracted from note-on velocities of the non-soloed tracks
DEFAULT_VELOCITY_REDUCTION = int(os.getenv("DEFAULT_VELOCITY_REDUCTION", "30"))

if not MIN_VELOCITY <= DEFAULT_VELOCITY_REDUCTION <= MAX_VELOCITY:
    raise RuntimeError(
        "DEFAULT_VELOCITY_REDUCTION must be between "
        f"{MIN_VELOCITY} and {MAX_VELOCITY} (got {DEFAULT_VELOCITY_REDUCTION})."
    )

# Name used for the variant that keeps every track untouched
ALL_TRACKS_LABEL = "All"

# zlib level for archive entries (None = zlib default)
_compression_level = os.getenv("ARCHIVE_COMPRESSION_LEVEL", "")
ARCHIVE_COMPRESSION_LEVEL = int(_compression_level) if _compression_level else None

# ---------------------------------------------------------------------------
# Upload limits
# ---------------------------------------------------------------------------
MAX_UPLOAD_SIZE_MB = int(os.getenv("MAX_UPLOAD_SIZE_MB", "16"))
MAX_UPLOAD_SIZE_BYTES = MAX_UPLOAD_SIZE_MB * 1024 * 1024
