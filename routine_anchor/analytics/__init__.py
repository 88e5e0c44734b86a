"""
Analytics: weekly/monthly reports, streaks, trends and advisory insights.

All functions are pure over the blocks and progress records passed in and
degrade to zero or empty results on empty input.
"""

from .breakdowns import (
    category_performance,
    completion_rate,
    completion_statistics,
    daily_breakdown,
    group_by_day,
    productive_days,
    time_of_day_stats,
    weekly_breakdowns,
)
from .insights import format_hour, improvement_suggestions, most_productive_hour, productivity_insights
from .models import (
    CategoryPerformance,
    CompletionStatistics,
    HourStats,
    ImpactLevel,
    ImprovementSuggestion,
    InsightType,
    MonthlyReport,
    ProductiveDay,
    ProductivityInsight,
    TimeOfDayStats,
    TrendAnalysis,
    TrendDirection,
    WeeklyBreakdown,
    WeeklyReport,
)
from .reports import ReportEngine
from .streaks import current_streak, longest_streak
from .trends import analyze_trend, classify_trend, trend_message, week_start

__all__ = [
    "ReportEngine",
    "category_performance",
    "completion_rate",
    "completion_statistics",
    "daily_breakdown",
    "group_by_day",
    "productive_days",
    "time_of_day_stats",
    "weekly_breakdowns",
    "format_hour",
    "improvement_suggestions",
    "most_productive_hour",
    "productivity_insights",
    "current_streak",
    "longest_streak",
    "analyze_trend",
    "classify_trend",
    "trend_message",
    "week_start",
    "CategoryPerformance",
    "CompletionStatistics",
    "HourStats",
    "ImpactLevel",
    "ImprovementSuggestion",
    "InsightType",
    "MonthlyReport",
    "ProductiveDay",
    "ProductivityInsight",
    "TimeOfDayStats",
    "TrendAnalysis",
    "TrendDirection",
    "WeeklyBreakdown",
    "WeeklyReport",
]
