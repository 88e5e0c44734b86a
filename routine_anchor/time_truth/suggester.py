"""
Time slot suggestions.

For each day segment, walk a cursor forward from the segment start and
test a duration-long probe against that day's blocks:

- free: emit a Suggestion and advance the cursor by the configured step
  (an hour by default)
- taken: jump the cursor to the latest end among the overlapping blocks

This is a greedy scan for a human-facing list of options, not an optimal
packing of the day.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo

from routine_anchor.settings import SegmentSettings, Settings, get_settings

from .blocks import TimeBlock, day_start, local_day
from .conflicts import find_conflicts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DaySegment:
    label: str
    start_hour: int
    end_hour: int
    peak_start_hour: int | None = None
    peak_end_hour: int | None = None

    @classmethod
    def from_settings(cls, segment: SegmentSettings) -> "DaySegment":
        return cls(
            label=segment.label,
            start_hour=segment.start_hour,
            end_hour=segment.end_hour,
            peak_start_hour=segment.peak_start_hour,
            peak_end_hour=segment.peak_end_hour,
        )

    def is_peak(self, hour: int) -> bool:
        """Whether a slot starting at `hour` falls in the segment's peak range (inclusive)."""
        if self.peak_start_hour is None or self.peak_end_hour is None:
            return False
        return self.peak_start_hour <= hour <= self.peak_end_hour


@dataclass(frozen=True)
class Suggestion:
    start_time: datetime
    end_time: datetime
    segment_label: str
    is_optimal: bool

    @property
    def duration_minutes(self) -> int:
        return int((self.end_time - self.start_time).total_seconds() // 60)

    def to_dict(self) -> dict:
        return {
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "segment": self.segment_label,
            "is_optimal": self.is_optimal,
            "duration_minutes": self.duration_minutes,
        }


def default_segments(settings: Settings | None = None) -> list[DaySegment]:
    settings = settings or get_settings()
    return [DaySegment.from_settings(s) for s in settings.segments]


def suggest_slots(
    day: date,
    existing_blocks: Iterable[TimeBlock],
    duration: timedelta | None = None,
    segments: Sequence[DaySegment] | None = None,
    advance: timedelta | None = None,
    tz: tzinfo | None = None,
    settings: Settings | None = None,
) -> list[Suggestion]:
    """
    Propose free intervals on `day`.

    Args:
        day: Calendar day to fill.
        existing_blocks: Current blocks; other days are ignored.
        duration: Length of each proposed slot (settings default, 1h).
        segments: Ordered day partitions (settings default).
        advance: Cursor step after a hit (settings default, 1h).
        tz: Calendar timezone for aware blocks; slots are built aware in tz.

    Returns:
        Suggestions ordered by start time.
    """
    if duration is None or advance is None or segments is None:
        settings = settings or get_settings()
    if duration is None:
        duration = timedelta(minutes=settings.suggestions.default_duration_minutes)
    if advance is None:
        advance = timedelta(minutes=settings.suggestions.advance_minutes)
    if segments is None:
        segments = default_segments(settings)

    if duration <= timedelta(0) or advance <= timedelta(0):
        return []

    midnight = day_start(day, tz)
    day_blocks = [b for b in existing_blocks if local_day(b.start_time, tz) == day]

    suggestions: list[Suggestion] = []
    for segment in segments:
        segment_start = midnight + timedelta(hours=segment.start_hour)
        segment_end = midnight + timedelta(hours=segment.end_hour)
        cursor = segment_start

        while cursor + duration <= segment_end:
            probe = TimeBlock(title="", start_time=cursor, end_time=cursor + duration)
            conflicts = find_conflicts(probe, day_blocks, tz=tz)

            if not conflicts:
                suggestions.append(
                    Suggestion(
                        start_time=cursor,
                        end_time=cursor + duration,
                        segment_label=segment.label,
                        is_optimal=segment.is_peak(cursor.hour),
                    )
                )
                cursor += advance
            else:
                # Conflicts all end after the cursor, so this always moves forward
                cursor = max(block.end_time for block in conflicts)
                if tz is not None and cursor.tzinfo is not None:
                    cursor = cursor.astimezone(tz)

    suggestions.sort(key=lambda s: s.start_time)
    logger.debug("Suggested %d slot(s) for %s", len(suggestions), day.isoformat())
    return suggestions
