"""
Week-over-week trend of the completion rate.

"This week" runs from the start of the current calendar week up to now;
"last week" is the 7 days before that. A move of more than the threshold
(0.05 by default) either way is a trend, anything smaller is stable.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta, tzinfo

from routine_anchor.time_truth.blocks import TimeBlock

from .breakdowns import completion_rate
from .models import TrendAnalysis, TrendDirection


def week_start(now: datetime, first_weekday: int = 0, tz: tzinfo | None = None) -> datetime:
    """Midnight on the first day of the week containing now (0 = Monday)."""
    if tz is not None and now.tzinfo is not None:
        now = now.astimezone(tz)
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight - timedelta(days=(now.weekday() - first_weekday) % 7)


def classify_trend(this_week_rate: float, last_week_rate: float, threshold: float = 0.05) -> TrendDirection:
    if this_week_rate > last_week_rate + threshold:
        return TrendDirection.IMPROVING
    if this_week_rate < last_week_rate - threshold:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


def trend_message(direction: TrendDirection, change: float) -> str:
    percentage = int(round(abs(change) * 100))
    if direction == TrendDirection.IMPROVING:
        return f"Your completion rate improved by {percentage}% this week!"
    if direction == TrendDirection.DECLINING:
        return f"Your completion rate decreased by {percentage}% this week. Let's get back on track!"
    return "Your completion rate remained stable this week. Consistency is key!"


def analyze_trend(
    blocks: Iterable[TimeBlock],
    now: datetime,
    first_weekday: int = 0,
    threshold: float = 0.05,
    tz: tzinfo | None = None,
) -> TrendAnalysis:
    blocks = list(blocks)
    this_start = week_start(now, first_weekday, tz)
    last_start = this_start - timedelta(days=7)

    this_week = [b for b in blocks if this_start <= b.start_time < now]
    last_week = [b for b in blocks if last_start <= b.start_time < this_start]

    this_rate = completion_rate(this_week)
    last_rate = completion_rate(last_week)
    change = this_rate - last_rate
    direction = classify_trend(this_rate, last_rate, threshold)

    return TrendAnalysis(
        direction=direction,
        this_week_rate=this_rate,
        last_week_rate=last_rate,
        percentage_change=change,
        message=trend_message(direction, change),
    )
