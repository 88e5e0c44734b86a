"""
Daily progress roll-up.

A DailyProgress is always rebuilt from the day's blocks by aggregate();
its counters are never patched incrementally, so the summary cannot drift
from the blocks it describes. Only the user-entered fields (rating, notes,
summary_viewed) are carried over from the previous record.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from enum import StrEnum

from .blocks import BlockStatus, TimeBlock, local_day
from .validation import ValidationError, ValidationIssue

logger = logging.getLogger(__name__)


class PerformanceLevel(StrEnum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    NONE = "none"


@dataclass
class DailyProgress:
    date: date
    total_blocks: int = 0
    completed_blocks: int = 0
    skipped_blocks: int = 0
    in_progress_blocks: int = 0
    total_planned_minutes: int = 0
    completed_minutes: int = 0
    day_rating: int | None = None
    day_notes: str | None = None
    summary_viewed: bool = field(default=False, compare=False)

    @property
    def not_started_blocks(self) -> int:
        return self.total_blocks - self.completed_blocks - self.skipped_blocks - self.in_progress_blocks

    @property
    def completion_percentage(self) -> float:
        """Completed share of the day's blocks (0.0 to 1.0)."""
        if self.total_blocks <= 0:
            return 0.0
        return self.completed_blocks / self.total_blocks

    @property
    def skip_rate(self) -> float:
        if self.total_blocks <= 0:
            return 0.0
        return self.skipped_blocks / self.total_blocks

    @property
    def time_completion_percentage(self) -> float:
        if self.total_planned_minutes <= 0:
            return 0.0
        return min(self.completed_minutes / self.total_planned_minutes, 1.0)

    @property
    def has_scheduled_blocks(self) -> bool:
        return self.total_blocks > 0

    @property
    def is_day_complete(self) -> bool:
        """Every block has an outcome (completed or skipped)."""
        return self.total_blocks > 0 and self.completed_blocks + self.skipped_blocks == self.total_blocks

    @property
    def performance_score(self) -> float:
        """
        Completion rate plus a consistency bonus of up to 0.2 for few skips,
        plus 0.1 for a finished day with nothing skipped. Capped at 1.0.
        """
        if self.total_blocks <= 0:
            return 0.0
        score = self.completion_percentage + (1.0 - self.skip_rate) * 0.2
        if self.is_day_complete and self.skipped_blocks == 0:
            score += 0.1
        return min(score, 1.0)

    @property
    def performance_level(self) -> PerformanceLevel:
        pct = self.completion_percentage
        if pct >= 0.9:
            return PerformanceLevel.EXCELLENT
        if pct >= 0.7:
            return PerformanceLevel.GOOD
        if pct >= 0.5:
            return PerformanceLevel.FAIR
        if pct >= 0.2:
            return PerformanceLevel.POOR
        return PerformanceLevel.NONE

    @property
    def suggestions(self) -> list[str]:
        tips = []
        if self.skip_rate > 0.3:
            tips.append("Consider shortening time blocks to make them more manageable")
        if self.completion_percentage < 0.5 and self.total_blocks > 6:
            tips.append("Try scheduling fewer blocks to build consistency")
        if not tips:
            tips.append("Keep up the great work with your routine!")
        return tips

    @property
    def validation_errors(self) -> list[str]:
        errors = []
        if min(self.total_blocks, self.completed_blocks, self.skipped_blocks, self.in_progress_blocks) < 0:
            errors.append("Block counts cannot be negative")
        if self.completed_blocks + self.skipped_blocks + self.in_progress_blocks > self.total_blocks:
            errors.append("Sum of block statuses cannot exceed total blocks")
        if self.total_planned_minutes < 0 or self.completed_minutes < 0:
            errors.append("Minutes cannot be negative")
        if self.completed_minutes > self.total_planned_minutes:
            errors.append("Completed minutes cannot exceed planned minutes")
        if self.day_rating is not None and not 1 <= self.day_rating <= 5:
            errors.append("Day rating must be between 1 and 5")
        return errors

    @property
    def is_valid(self) -> bool:
        return not self.validation_errors

    def set_day_rating(self, rating: int | None) -> None:
        if rating is not None and not 1 <= rating <= 5:
            raise ValidationError(
                [ValidationIssue("invalid_rating", "day_rating", "Day rating must be between 1 and 5")]
            )
        self.day_rating = rating

    def set_day_notes(self, notes: str | None) -> None:
        self.day_notes = notes or None

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "total_blocks": self.total_blocks,
            "completed_blocks": self.completed_blocks,
            "skipped_blocks": self.skipped_blocks,
            "in_progress_blocks": self.in_progress_blocks,
            "not_started_blocks": self.not_started_blocks,
            "completion_percentage": round(self.completion_percentage, 4),
            "skip_rate": round(self.skip_rate, 4),
            "total_planned_minutes": self.total_planned_minutes,
            "completed_minutes": self.completed_minutes,
            "performance_score": round(self.performance_score, 4),
            "performance_level": self.performance_level.value,
            "day_rating": self.day_rating,
            "day_notes": self.day_notes,
        }


def aggregate(
    day: date,
    blocks: Iterable[TimeBlock],
    now: datetime | None = None,
    previous: DailyProgress | None = None,
    tz: tzinfo | None = None,
) -> DailyProgress:
    """
    Rebuild the DailyProgress for `day` from its blocks.

    Args:
        day: The calendar day.
        blocks: Blocks for the day; blocks from other days are ignored.
        now: When given, active in-progress blocks earn elapsed-time credit
            in completed_minutes.
        previous: Existing record whose rating/notes should be kept.

    Returns:
        A new DailyProgress. Same inputs always give an equal result.
    """
    progress = DailyProgress(date=day)
    if previous is not None:
        progress.day_rating = previous.day_rating
        progress.day_notes = previous.day_notes
        progress.summary_viewed = previous.summary_viewed

    for block in blocks:
        if local_day(block.start_time, tz) != day:
            continue

        minutes = block.duration_minutes
        progress.total_blocks += 1
        progress.total_planned_minutes += minutes

        if block.status == BlockStatus.COMPLETED:
            progress.completed_blocks += 1
            progress.completed_minutes += minutes
        elif block.status == BlockStatus.SKIPPED:
            progress.skipped_blocks += 1
        elif block.status == BlockStatus.IN_PROGRESS:
            progress.in_progress_blocks += 1
            if now is not None:
                progress.completed_minutes += int(block.progress_at(now) * minutes)

    return progress


@dataclass(frozen=True)
class WeeklyStats:
    total_days: int
    completed_days: int
    average_completion: float
    total_blocks: int
    total_completed: int

    def to_dict(self) -> dict:
        return {
            "total_days": self.total_days,
            "completed_days": self.completed_days,
            "average_completion": round(self.average_completion, 4),
            "total_blocks": self.total_blocks,
            "total_completed": self.total_completed,
        }


def weekly_statistics(entries: Iterable[DailyProgress]) -> WeeklyStats:
    """Summary over a run of DailyProgress records (normally one week)."""
    entries = list(entries)
    total_days = len(entries)
    return WeeklyStats(
        total_days=total_days,
        completed_days=sum(1 for e in entries if e.is_day_complete),
        average_completion=(
            sum(e.completion_percentage for e in entries) / total_days if total_days else 0.0
        ),
        total_blocks=sum(e.total_blocks for e in entries),
        total_completed=sum(e.completed_blocks for e in entries),
    )
