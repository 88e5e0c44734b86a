"""
Routine Anchor — time-block scheduling core.

Schedules time blocks, tracks their status, detects conflicts, suggests
free slots and rolls completion data up into daily, weekly and monthly
reports.

    from routine_anchor import ScheduleService, ReportEngine, TimeBlock
"""

from routine_anchor.analytics import ReportEngine
from routine_anchor.schedule import ScheduleService, WriteResult
from routine_anchor.settings import Settings, SettingsError, get_settings, load_settings
from routine_anchor.store import BlockStore
from routine_anchor.time_truth import (
    BlockStatus,
    DailyProgress,
    TimeBlock,
    ValidationError,
    ValidationIssue,
    find_conflicts,
    suggest_slots,
    validate,
)

__version__ = "1.0.0"

__all__ = [
    "BlockStatus",
    "BlockStore",
    "DailyProgress",
    "ReportEngine",
    "ScheduleService",
    "Settings",
    "SettingsError",
    "TimeBlock",
    "ValidationError",
    "ValidationIssue",
    "WriteResult",
    "find_conflicts",
    "get_settings",
    "load_settings",
    "suggest_slots",
    "validate",
]
