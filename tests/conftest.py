"""
Test configuration — ensures repo root is in sys.path + determinism guards.

This allows tests to import routine_anchor and tests.fixtures directly.
Settings are isolated per test: the user's ~/.routine_anchor and any
ROUTINE_ANCHOR_CONFIG in the environment are never read.
"""

import sys
from datetime import date, datetime
from pathlib import Path

import pytest

# Add repo root to sys.path so tests can import routine_anchor.*, tests.fixtures
REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from routine_anchor.settings import Settings, get_settings  # noqa: E402
from routine_anchor.time_truth import BlockStatus, TimeBlock  # noqa: E402
from tests.fixtures import InMemoryStore  # noqa: E402

# Wednesday, mid-morning
NOW = datetime(2026, 3, 11, 10, 30)
TODAY = NOW.date()


# =============================================================================
# DETERMINISM GUARD: isolate settings from the developer's machine
# =============================================================================


@pytest.fixture(autouse=True)
def isolate_settings(monkeypatch, tmp_path):
    """Point the app home at a temp dir and drop any cached settings."""
    monkeypatch.setenv("ROUTINE_ANCHOR_HOME", str(tmp_path / "home"))
    monkeypatch.delenv("ROUTINE_ANCHOR_CONFIG", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# SHARED FIXTURES
# =============================================================================


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def settings() -> Settings:
    """Built-in defaults, independent of config/routine_anchor.yaml."""
    return Settings()


@pytest.fixture
def make_block():
    """
    Factory for blocks on TODAY (or any day).

    make_block(9, 60, "Work") -> 09:00-10:00 today
    """

    def _make(
        start_hour: int,
        duration_minutes: int = 60,
        title: str = "Block",
        day: date = TODAY,
        status: BlockStatus = BlockStatus.NOT_STARTED,
        start_minute: int = 0,
        **kwargs,
    ) -> TimeBlock:
        return TimeBlock.on(
            day,
            start_hour,
            duration_minutes,
            title,
            start_minute=start_minute,
            status=status,
            created_at=NOW,
            **kwargs,
        )

    return _make


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()
