"""
Centralized configuration for Routine Anchor.

Deployment-level switches live here and are read from the environment.
Scheduling and analytics tunables live in the YAML settings file
(see routine_anchor.settings).
"""

import os

# ============================================================
# Logging
# ============================================================

LOG_LEVEL: str = os.environ.get("ROUTINE_ANCHOR_LOG_LEVEL", "INFO")
"""Root log level passed to configure_logging()."""

_log_json = os.environ.get("ROUTINE_ANCHOR_LOG_JSON")
LOG_JSON: bool | None = None if _log_json is None else _log_json.strip().lower() in ("1", "true", "yes")
"""Force JSON (True) or human (False) log lines. None auto-detects from the TTY."""

# ============================================================
# TimeBlock limits
# ============================================================

MAX_TITLE_LENGTH = 100
MAX_NOTES_LENGTH = 500
MAX_CATEGORY_LENGTH = 50

MIN_BLOCK_MINUTES = 1
MAX_BLOCK_MINUTES = 24 * 60

UNCATEGORIZED = "Uncategorized"
"""Bucket name for blocks without a category."""
