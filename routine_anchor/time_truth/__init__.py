"""
Time Truth Module

The foundation layer: time blocks, their lifecycle, conflicts, slot
suggestions and the daily roll-up. Everything here operates on in-memory
collections supplied by the caller; nothing reads or writes storage.

Objects:
- TimeBlock (a scheduled interval with a status)
- DailyProgress (per-day completion summary)
- Suggestion (a free slot inside a day segment)

Invariants:
- A block belongs to the calendar day of its start time
- Blocks on the same day never overlap once accepted
- Completed / skipped are never overwritten by time-based refresh
- DailyProgress is recomputed from blocks, never patched
"""

from .blocks import BlockStatus, TimeBlock, day_start, local_day, new_block_id, sort_blocks
from .conflicts import Conflict, find_all_conflicts, find_conflicts, overlaps, same_day
from .progress import DailyProgress, PerformanceLevel, WeeklyStats, aggregate, weekly_statistics
from .status import StatusChange, apply_status, derive_status, refresh_all_for_now, reset_status
from .suggester import DaySegment, Suggestion, default_segments, suggest_slots
from .validation import (
    CreationPolicy,
    ValidationError,
    ValidationIssue,
    check_policies,
    daily_limit_policy,
    ensure_valid,
    validate,
)

__all__ = [
    "BlockStatus",
    "TimeBlock",
    "day_start",
    "local_day",
    "new_block_id",
    "sort_blocks",
    "Conflict",
    "find_all_conflicts",
    "find_conflicts",
    "overlaps",
    "same_day",
    "DailyProgress",
    "PerformanceLevel",
    "WeeklyStats",
    "aggregate",
    "weekly_statistics",
    "StatusChange",
    "apply_status",
    "derive_status",
    "refresh_all_for_now",
    "reset_status",
    "DaySegment",
    "Suggestion",
    "default_segments",
    "suggest_slots",
    "CreationPolicy",
    "ValidationError",
    "ValidationIssue",
    "check_policies",
    "daily_limit_policy",
    "ensure_valid",
    "validate",
]
