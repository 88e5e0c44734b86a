"""
TimeBlock entity and its lifecycle status.

A TimeBlock is a scheduled interval [start_time, end_time) that belongs to
exactly one calendar day: the local date of its start_time. Times may be
naive (treated as wall-clock in the caller's calendar) or timezone-aware;
a single collection should not mix the two.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo
from enum import StrEnum
from typing import Any

from routine_anchor.config import UNCATEGORIZED


class BlockStatus(StrEnum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def is_finished(self) -> bool:
        """Terminal states are set by the user and never auto-overwritten."""
        return self in (BlockStatus.COMPLETED, BlockStatus.SKIPPED)

    @property
    def can_transition(self) -> bool:
        return not self.is_finished

    @property
    def available_transitions(self) -> tuple["BlockStatus", ...]:
        return _TRANSITIONS[self]

    @property
    def sort_priority(self) -> int:
        """Higher sorts first when two blocks start at the same time."""
        return _SORT_PRIORITY[self]


_DISPLAY_NAMES = {
    BlockStatus.NOT_STARTED: "Upcoming",
    BlockStatus.IN_PROGRESS: "In Progress",
    BlockStatus.COMPLETED: "Completed",
    BlockStatus.SKIPPED: "Skipped",
}

_TRANSITIONS = {
    BlockStatus.NOT_STARTED: (BlockStatus.IN_PROGRESS, BlockStatus.COMPLETED, BlockStatus.SKIPPED),
    # NOT_STARTED here is the reset path
    BlockStatus.IN_PROGRESS: (BlockStatus.COMPLETED, BlockStatus.SKIPPED, BlockStatus.NOT_STARTED),
    BlockStatus.COMPLETED: (),
    BlockStatus.SKIPPED: (),
}

_SORT_PRIORITY = {
    BlockStatus.IN_PROGRESS: 3,
    BlockStatus.NOT_STARTED: 2,
    BlockStatus.COMPLETED: 1,
    BlockStatus.SKIPPED: 0,
}


def new_block_id() -> str:
    return f"block_{uuid.uuid4().hex[:12]}"


def local_day(moment: datetime, tz: tzinfo | None = None) -> date:
    """Calendar day of an instant, in tz when both tz and the instant are aware."""
    if tz is not None and moment.tzinfo is not None:
        moment = moment.astimezone(tz)
    return moment.date()


def day_start(day: date, tz: tzinfo | None = None) -> datetime:
    """Midnight at the start of day (aware in tz when given)."""
    return datetime(day.year, day.month, day.day, tzinfo=tz)


@dataclass(eq=False)
class TimeBlock:
    title: str
    start_time: datetime
    end_time: datetime
    notes: str | None = None
    category: str | None = None
    icon: str | None = None
    status: BlockStatus = BlockStatus.NOT_STARTED
    id: str = field(default_factory=new_block_id)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self):
        self.status = BlockStatus(self.status)
        if self.created_at is None:
            self.created_at = datetime.now(self.start_time.tzinfo)
        if self.updated_at is None:
            self.updated_at = self.created_at

    # Identity is the id, not the field values
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeBlock):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @classmethod
    def on(
        cls,
        day: date,
        start_hour: int,
        duration_minutes: int,
        title: str,
        start_minute: int = 0,
        tz: tzinfo | None = None,
        **kwargs: Any,
    ) -> "TimeBlock":
        """Build a block from a day plus wall-clock start and a length."""
        start = day_start(day, tz) + timedelta(hours=start_hour, minutes=start_minute)
        return cls(
            title=title,
            start_time=start,
            end_time=start + timedelta(minutes=duration_minutes),
            **kwargs,
        )

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    @property
    def duration_minutes(self) -> int:
        return int(self.duration.total_seconds() // 60)

    @property
    def duration_hours(self) -> float:
        return self.duration_minutes / 60.0

    @property
    def scheduled_date(self) -> date:
        return self.start_time.date()

    @property
    def category_label(self) -> str:
        return self.category or UNCATEGORIZED

    def day(self, tz: tzinfo | None = None) -> date:
        return local_day(self.start_time, tz)

    def is_active_at(self, now: datetime) -> bool:
        return self.start_time <= now < self.end_time

    def progress_at(self, now: datetime) -> float:
        """Elapsed fraction (0.0 to 1.0) while active, else 0.0."""
        if not self.is_active_at(now):
            return 0.0
        total = self.duration.total_seconds()
        if total <= 0:
            return 0.0
        elapsed = (now - self.start_time).total_seconds()
        return min(max(elapsed / total, 0.0), 1.0)

    def remaining_minutes_at(self, now: datetime) -> int | None:
        if not self.is_active_at(now):
            return None
        return max(0, int((self.end_time - now).total_seconds() // 60))

    def touch(self, now: datetime | None = None) -> None:
        self.updated_at = now if now is not None else datetime.now(self.start_time.tzinfo)

    def copy_to_date(self, day: date, now: datetime | None = None) -> "TimeBlock":
        """
        Same wall-clock slot on another day, as a fresh not-started block.
        """
        start = datetime.combine(day, self.start_time.timetz())
        return TimeBlock(
            title=self.title,
            start_time=start,
            end_time=start + self.duration,
            notes=self.notes,
            category=self.category,
            icon=self.icon,
            created_at=now,
        )

    def sort_key(self) -> tuple:
        return (self.start_time, -self.status.sort_priority, self.title)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "duration_minutes": self.duration_minutes,
            "notes": self.notes,
            "category": self.category,
            "icon": self.icon,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


def sort_blocks(blocks) -> list[TimeBlock]:
    """Start time, then in-progress before upcoming before finished, then title."""
    return sorted(blocks, key=TimeBlock.sort_key)
