"""
Grouping and counting helpers behind the weekly and monthly reports.

Each function takes the blocks already narrowed to a reporting window and
returns value objects from analytics.models. Empty input gives empty or
zero-valued results.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import date, datetime, timedelta, tzinfo

from routine_anchor.time_truth.blocks import BlockStatus, TimeBlock, local_day
from routine_anchor.time_truth.progress import DailyProgress, aggregate

from .models import (
    CategoryPerformance,
    CompletionStatistics,
    HourStats,
    ProductiveDay,
    TimeOfDayStats,
    WeeklyBreakdown,
)


def completion_rate(blocks: Iterable[TimeBlock]) -> float:
    blocks = list(blocks)
    if not blocks:
        return 0.0
    completed = sum(1 for b in blocks if b.status == BlockStatus.COMPLETED)
    return completed / len(blocks)


def group_by_day(blocks: Iterable[TimeBlock], tz: tzinfo | None = None) -> dict[date, list[TimeBlock]]:
    grouped: dict[date, list[TimeBlock]] = defaultdict(list)
    for block in blocks:
        grouped[local_day(block.start_time, tz)].append(block)
    return dict(grouped)


def completion_statistics(
    blocks: Iterable[TimeBlock],
    start_date: date | None = None,
    end_date: date | None = None,
    tz: tzinfo | None = None,
) -> CompletionStatistics:
    """Counts and minutes per status, optionally limited to [start_date, end_date]."""
    total = completed = skipped = in_progress = 0
    total_minutes = completed_minutes = 0

    for block in blocks:
        day = local_day(block.start_time, tz)
        if start_date is not None and day < start_date:
            continue
        if end_date is not None and day > end_date:
            continue

        total += 1
        total_minutes += block.duration_minutes
        if block.status == BlockStatus.COMPLETED:
            completed += 1
            completed_minutes += block.duration_minutes
        elif block.status == BlockStatus.SKIPPED:
            skipped += 1
        elif block.status == BlockStatus.IN_PROGRESS:
            in_progress += 1

    return CompletionStatistics(
        start_date=start_date,
        end_date=end_date,
        total_blocks=total,
        completed_blocks=completed,
        skipped_blocks=skipped,
        in_progress_blocks=in_progress,
        total_minutes=total_minutes,
        completed_minutes=completed_minutes,
    )


def daily_breakdown(
    blocks: Iterable[TimeBlock],
    progress: Iterable[DailyProgress] = (),
    tz: tzinfo | None = None,
) -> list[DailyProgress]:
    """One freshly aggregated DailyProgress per day that has blocks, oldest first."""
    stored = {entry.date: entry for entry in progress}
    return [
        aggregate(day, day_blocks, previous=stored.get(day), tz=tz)
        for day, day_blocks in sorted(group_by_day(blocks, tz).items())
    ]


def category_performance(blocks: Iterable[TimeBlock]) -> list[CategoryPerformance]:
    """Per-category results, best completion rate first (ties by name)."""
    totals: dict[str, list[int]] = defaultdict(lambda: [0, 0, 0])  # total, completed, minutes
    for block in blocks:
        bucket = totals[block.category_label]
        bucket[0] += 1
        if block.status == BlockStatus.COMPLETED:
            bucket[1] += 1
        bucket[2] += block.duration_minutes

    performance = [
        CategoryPerformance(
            category=category,
            total_blocks=total,
            completed_blocks=completed,
            total_minutes=minutes,
        )
        for category, (total, completed, minutes) in totals.items()
    ]
    performance.sort(key=lambda p: (-p.completion_rate, p.category))
    return performance


def time_of_day_stats(
    blocks: Iterable[TimeBlock],
    min_blocks: int = 3,
    top_n: int = 3,
    tz: tzinfo | None = None,
) -> TimeOfDayStats:
    """
    Completion by start hour.

    Only hours with at least min_blocks blocks are ranked, so a single
    lucky block cannot make an hour look like the best one.
    """
    counts: dict[int, list[int]] = defaultdict(lambda: [0, 0])  # completed, total
    for block in blocks:
        start = block.start_time
        if tz is not None and start.tzinfo is not None:
            start = start.astimezone(tz)
        bucket = counts[start.hour]
        if block.status == BlockStatus.COMPLETED:
            bucket[0] += 1
        bucket[1] += 1

    hourly = tuple(
        HourStats(hour=hour, completed=completed, total=total)
        for hour, (completed, total) in sorted(counts.items())
    )
    ranked = sorted(
        (s for s in hourly if s.total >= min_blocks),
        key=lambda s: (-s.completion_rate, s.hour),
    )
    return TimeOfDayStats(
        hourly_breakdown=hourly,
        most_productive_hours=tuple(s.hour for s in ranked[:top_n]),
    )


def productive_days(
    blocks: Iterable[TimeBlock],
    min_blocks: int = 3,
    min_rate: float = 0.8,
    top_n: int = 5,
    tz: tzinfo | None = None,
) -> list[ProductiveDay]:
    """Days with enough blocks and a high completion rate, best first."""
    candidates = []
    for day, day_blocks in group_by_day(blocks, tz).items():
        total = len(day_blocks)
        if total < min_blocks:
            continue
        completed = sum(1 for b in day_blocks if b.status == BlockStatus.COMPLETED)
        if completed / total < min_rate:
            continue
        candidates.append(ProductiveDay(date=day, total_blocks=total, completed_blocks=completed))

    candidates.sort(key=lambda d: (-d.completion_rate, d.date))
    return candidates[:top_n]


def weekly_breakdowns(
    blocks: Iterable[TimeBlock],
    window_start: datetime,
    window_end: datetime,
    tz: tzinfo | None = None,
) -> list[WeeklyBreakdown]:
    """Consecutive 7-day slices from midnight of window_start's day until window_end."""
    blocks = list(blocks)
    breakdowns = []
    if tz is not None and window_start.tzinfo is not None:
        window_start = window_start.astimezone(tz)
    cursor = window_start.replace(hour=0, minute=0, second=0, microsecond=0)

    while cursor < window_end:
        week_end = cursor + timedelta(days=7)
        week_blocks = [b for b in blocks if cursor <= b.start_time < week_end]
        breakdowns.append(
            WeeklyBreakdown(
                week_start=cursor.date(),
                week_end=(week_end - timedelta(days=1)).date(),
                week_number=cursor.isocalendar().week,
                total_blocks=len(week_blocks),
                completed_blocks=sum(1 for b in week_blocks if b.status == BlockStatus.COMPLETED),
            )
        )
        cursor = week_end

    return breakdowns
