"""
Streaks: runs of consecutive days with at least one completed block
(completion_percentage > 0).
"""

from collections.abc import Iterable
from datetime import date

from routine_anchor.time_truth.progress import DailyProgress


def _completion_by_day(progress: Iterable[DailyProgress]) -> dict[date, float]:
    """One value per day; duplicate records for a day keep the best."""
    by_day: dict[date, float] = {}
    for entry in progress:
        pct = entry.completion_percentage
        if pct > by_day.get(entry.date, -1.0):
            by_day[entry.date] = pct
    return by_day


def current_streak(progress: Iterable[DailyProgress], today: date) -> int:
    """
    Streak ending today.

    Walks backward from today. A day counts if it had completions and is
    at most one day before the previously counted day (today itself for
    the first step, so a streak still alive through yesterday counts even
    before anything is done today). Stops at the first gap or zero day.
    """
    by_day = _completion_by_day(progress)
    streak = 0
    reference = today

    for day in sorted(by_day, reverse=True):
        if day > today:
            continue
        if (reference - day).days > 1 or by_day[day] <= 0:
            break
        streak += 1
        reference = day

    return streak


def longest_streak(progress: Iterable[DailyProgress], today: date | None = None) -> int:
    """
    Longest run of consecutive days with completions, anywhere in history.

    Days after `today` are ignored when it is given.
    """
    by_day = _completion_by_day(progress)
    longest = 0
    running = 0
    last_day: date | None = None

    for day in sorted(by_day):
        if today is not None and day > today:
            break
        if by_day[day] <= 0:
            running = 0
        elif last_day is not None and (day - last_day).days == 1:
            running += 1
        else:
            running = 1
        longest = max(longest, running)
        last_day = day

    return longest
