from __future__ import annotations

import os
from pathlib import Path

APP_ENV_HOME = "ROUTINE_ANCHOR_HOME"
APP_ENV_CONFIG = "ROUTINE_ANCHOR_CONFIG"

SETTINGS_FILENAME = "routine_anchor.yaml"


def project_root() -> Path:
    """
    Repository/project root directory.
    Contains routine_anchor/, config/ and tests/.
    """
    return Path(__file__).parent.parent.resolve()


def app_home() -> Path:
    """
    User-writable home for Routine Anchor.
    Override with ROUTINE_ANCHOR_HOME.
    """
    if os.environ.get(APP_ENV_HOME):
        return Path(os.environ[APP_ENV_HOME]).expanduser().resolve()
    return (Path.home() / ".routine_anchor").resolve()


def settings_path() -> Path:
    """
    Tunables file location.

    Resolution order:
    1. ROUTINE_ANCHOR_CONFIG env var (explicit override)
    2. <app home>/config/routine_anchor.yaml, if it exists
    3. <project root>/config/routine_anchor.yaml
    """
    if os.environ.get(APP_ENV_CONFIG):
        return Path(os.environ[APP_ENV_CONFIG]).expanduser().resolve()
    user_file = app_home() / "config" / SETTINGS_FILENAME
    if user_file.exists():
        return user_file
    return project_root() / "config" / SETTINGS_FILENAME
