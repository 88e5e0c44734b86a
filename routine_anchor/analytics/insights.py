"""
Advisory heuristics over a set of blocks.

Both generators are side-effect free and return an empty list when no
rule fires. Thresholds come from InsightSettings.
"""

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import tzinfo

from routine_anchor.settings import InsightSettings
from routine_anchor.time_truth.blocks import BlockStatus, TimeBlock

from .breakdowns import category_performance, completion_rate, group_by_day
from .models import (
    CategoryPerformance,
    ImpactLevel,
    ImprovementSuggestion,
    InsightType,
    ProductivityInsight,
)

logger = logging.getLogger(__name__)


def format_hour(hour: int) -> str:
    """12-hour clock label, e.g. 9 -> '9 AM', 0 -> '12 AM'."""
    suffix = "AM" if hour < 12 else "PM"
    return f"{hour % 12 or 12} {suffix}"


def most_productive_hour(blocks: Iterable[TimeBlock], tz: tzinfo | None = None) -> int | None:
    """Start hour with the most completed blocks (earliest hour on ties)."""
    counts: Counter[int] = Counter()
    for block in blocks:
        if block.status != BlockStatus.COMPLETED:
            continue
        start = block.start_time
        if tz is not None and start.tzinfo is not None:
            start = start.astimezone(tz)
        counts[start.hour] += 1

    if not counts:
        return None
    return min(counts, key=lambda hour: (-counts[hour], hour))


def improvement_suggestions(
    blocks: Iterable[TimeBlock],
    settings: InsightSettings | None = None,
    tz: tzinfo | None = None,
    category_perf: Sequence[CategoryPerformance] | None = None,
) -> list[ImprovementSuggestion]:
    """
    Rules, each independent:
    - too many blocks per scheduled day on average
    - any block longer than long_block_minutes
    - the weakest category completes below weak_category_rate
    """
    settings = settings or InsightSettings()
    blocks = list(blocks)
    suggestions: list[ImprovementSuggestion] = []

    days = group_by_day(blocks, tz)
    if days:
        per_day = len(blocks) / len(days)
        if per_day > settings.max_blocks_per_day:
            suggestions.append(
                ImprovementSuggestion(
                    kind="reduce_daily_blocks",
                    title="Reduce Daily Blocks",
                    description=(
                        f"You're scheduling {int(per_day)} blocks per day. "
                        "Consider reducing to 6-8 for better focus."
                    ),
                    impact=ImpactLevel.HIGH,
                )
            )

    long_blocks = [b for b in blocks if b.duration_minutes > settings.long_block_minutes]
    if long_blocks:
        suggestions.append(
            ImprovementSuggestion(
                kind="break_down_long_blocks",
                title="Break Down Long Tasks",
                description=(
                    f"You have {len(long_blocks)} blocks over {settings.long_block_minutes} minutes. "
                    "Try breaking them into smaller chunks."
                ),
                impact=ImpactLevel.MEDIUM,
            )
        )

    if category_perf is None:
        category_perf = category_performance(blocks)
    if category_perf:
        weakest = category_perf[-1]
        if weakest.completion_rate < settings.weak_category_rate:
            suggestions.append(
                ImprovementSuggestion(
                    kind="focus_category",
                    title=f"Focus on {weakest.category}",
                    description=(
                        f"Your completion rate for {weakest.category} is only "
                        f"{int(weakest.completion_rate * 100)}%. Consider scheduling these tasks "
                        "at your peak productivity times."
                    ),
                    impact=ImpactLevel.HIGH,
                )
            )

    logger.debug("Generated %d improvement suggestions from %d blocks", len(suggestions), len(blocks))
    return suggestions


def productivity_insights(
    blocks: Iterable[TimeBlock],
    settings: InsightSettings | None = None,
    tz: tzinfo | None = None,
) -> list[ProductivityInsight]:
    settings = settings or InsightSettings()
    blocks = list(blocks)
    insights: list[ProductivityInsight] = []
    if not blocks:
        return insights

    rate = completion_rate(blocks)
    if rate >= settings.strong_completion_rate:
        insights.append(
            ProductivityInsight(
                type=InsightType.POSITIVE,
                title="Excellent Completion Rate",
                message=f"You're completing {int(rate * 100)}% of your time blocks. Keep up the great work!",
            )
        )
    elif rate < settings.weak_category_rate:
        insights.append(
            ProductivityInsight(
                type=InsightType.IMPROVEMENT,
                title="Room for Improvement",
                message=f"You're completing {int(rate * 100)}% of blocks. Try breaking tasks into smaller chunks.",
            )
        )

    hour = most_productive_hour(blocks, tz)
    if hour is not None:
        insights.append(
            ProductivityInsight(
                type=InsightType.INFO,
                title="Peak Productivity Time",
                message=(
                    f"You complete most tasks around {format_hour(hour)}. "
                    "Schedule important work during this time."
                ),
            )
        )

    categories = category_performance(blocks)
    if categories:
        strongest = categories[0].category
        insights.append(
            ProductivityInsight(
                type=InsightType.POSITIVE,
                title=f"Strong in {strongest}",
                message=f"You have the highest completion rate in {strongest} tasks. Build on this strength!",
            )
        )

    return insights
