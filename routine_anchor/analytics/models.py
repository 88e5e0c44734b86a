"""
Report value objects.

All frozen: a report is recomputed on every call and never edited.
Durations are whole minutes; rates are 0.0 to 1.0.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum

from routine_anchor.time_truth.progress import DailyProgress


def _rate(part: int, whole: int) -> float:
    return part / whole if whole > 0 else 0.0


class TrendDirection(StrEnum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class ImpactLevel(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class InsightType(StrEnum):
    POSITIVE = "positive"
    IMPROVEMENT = "improvement"
    INFO = "info"


@dataclass(frozen=True)
class CompletionStatistics:
    start_date: date | None
    end_date: date | None
    total_blocks: int
    completed_blocks: int
    skipped_blocks: int
    in_progress_blocks: int
    total_minutes: int
    completed_minutes: int

    @property
    def not_started_blocks(self) -> int:
        return self.total_blocks - self.completed_blocks - self.skipped_blocks - self.in_progress_blocks

    @property
    def pending_blocks(self) -> int:
        return self.not_started_blocks + self.in_progress_blocks

    @property
    def completion_rate(self) -> float:
        return _rate(self.completed_blocks, self.total_blocks)

    @property
    def average_block_minutes(self) -> float:
        return self.total_minutes / self.total_blocks if self.total_blocks > 0 else 0.0

    def to_dict(self) -> dict:
        return {
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "total_blocks": self.total_blocks,
            "completed_blocks": self.completed_blocks,
            "skipped_blocks": self.skipped_blocks,
            "in_progress_blocks": self.in_progress_blocks,
            "not_started_blocks": self.not_started_blocks,
            "completion_rate": round(self.completion_rate, 4),
            "total_minutes": self.total_minutes,
            "completed_minutes": self.completed_minutes,
            "average_block_minutes": round(self.average_block_minutes, 2),
        }


@dataclass(frozen=True)
class CategoryPerformance:
    category: str
    total_blocks: int
    completed_blocks: int
    total_minutes: int

    @property
    def completion_rate(self) -> float:
        return _rate(self.completed_blocks, self.total_blocks)

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "total_blocks": self.total_blocks,
            "completed_blocks": self.completed_blocks,
            "completion_rate": round(self.completion_rate, 4),
            "total_minutes": self.total_minutes,
        }


@dataclass(frozen=True)
class HourStats:
    hour: int
    completed: int
    total: int

    @property
    def completion_rate(self) -> float:
        return _rate(self.completed, self.total)


@dataclass(frozen=True)
class TimeOfDayStats:
    hourly_breakdown: tuple[HourStats, ...]  # sorted by hour
    most_productive_hours: tuple[int, ...]  # best first

    def for_hour(self, hour: int) -> HourStats | None:
        for stats in self.hourly_breakdown:
            if stats.hour == hour:
                return stats
        return None

    def to_dict(self) -> dict:
        return {
            "hourly_breakdown": {
                str(s.hour): {"completed": s.completed, "total": s.total}
                for s in self.hourly_breakdown
            },
            "most_productive_hours": list(self.most_productive_hours),
        }


@dataclass(frozen=True)
class TrendAnalysis:
    direction: TrendDirection
    this_week_rate: float
    last_week_rate: float
    percentage_change: float
    message: str

    def to_dict(self) -> dict:
        return {
            "direction": self.direction.value,
            "this_week_rate": round(self.this_week_rate, 4),
            "last_week_rate": round(self.last_week_rate, 4),
            "percentage_change": round(self.percentage_change, 4),
            "message": self.message,
        }


@dataclass(frozen=True)
class WeeklyBreakdown:
    week_start: date
    week_end: date  # inclusive
    week_number: int
    total_blocks: int
    completed_blocks: int

    @property
    def completion_rate(self) -> float:
        return _rate(self.completed_blocks, self.total_blocks)

    def to_dict(self) -> dict:
        return {
            "week_start": self.week_start.isoformat(),
            "week_end": self.week_end.isoformat(),
            "week_number": self.week_number,
            "total_blocks": self.total_blocks,
            "completed_blocks": self.completed_blocks,
            "completion_rate": round(self.completion_rate, 4),
        }


@dataclass(frozen=True)
class ImprovementSuggestion:
    kind: str
    title: str
    description: str
    impact: ImpactLevel

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "title": self.title,
            "description": self.description,
            "impact": self.impact.value,
        }


@dataclass(frozen=True)
class ProductivityInsight:
    type: InsightType
    title: str
    message: str

    def to_dict(self) -> dict:
        return {"type": self.type.value, "title": self.title, "message": self.message}


@dataclass(frozen=True)
class ProductiveDay:
    date: date
    total_blocks: int
    completed_blocks: int

    @property
    def completion_rate(self) -> float:
        return _rate(self.completed_blocks, self.total_blocks)

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "total_blocks": self.total_blocks,
            "completed_blocks": self.completed_blocks,
            "completion_rate": round(self.completion_rate, 4),
        }


@dataclass(frozen=True)
class WeeklyReport:
    window_start: datetime
    window_end: datetime
    statistics: CompletionStatistics
    daily_breakdown: tuple[DailyProgress, ...]
    category_performance: tuple[CategoryPerformance, ...]
    time_of_day: TimeOfDayStats
    current_streak: int
    longest_streak: int
    trend: TrendAnalysis

    @property
    def total_blocks(self) -> int:
        return self.statistics.total_blocks

    @property
    def completed_blocks(self) -> int:
        return self.statistics.completed_blocks

    @property
    def skipped_blocks(self) -> int:
        return self.statistics.skipped_blocks

    @property
    def completion_rate(self) -> float:
        return self.statistics.completion_rate

    @property
    def total_scheduled_minutes(self) -> int:
        return self.statistics.total_minutes

    @property
    def total_completed_minutes(self) -> int:
        return self.statistics.completed_minutes

    def to_dict(self) -> dict:
        return {
            "window_start": self.window_start.isoformat(),
            "window_end": self.window_end.isoformat(),
            "statistics": self.statistics.to_dict(),
            "daily_breakdown": [d.to_dict() for d in self.daily_breakdown],
            "category_performance": [c.to_dict() for c in self.category_performance],
            "time_of_day": self.time_of_day.to_dict(),
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "trend": self.trend.to_dict(),
        }


@dataclass(frozen=True)
class MonthlyReport:
    window_start: datetime
    window_end: datetime
    month: int
    year: int
    statistics: CompletionStatistics
    weekly_breakdowns: tuple[WeeklyBreakdown, ...]
    improvements: tuple[ImprovementSuggestion, ...]
    most_productive_days: tuple[ProductiveDay, ...]

    @property
    def total_scheduled_minutes(self) -> int:
        return self.statistics.total_minutes

    @property
    def total_completed_minutes(self) -> int:
        return self.statistics.completed_minutes

    def to_dict(self) -> dict:
        return {
            "window_start": self.window_start.isoformat(),
            "window_end": self.window_end.isoformat(),
            "month": self.month,
            "year": self.year,
            "statistics": self.statistics.to_dict(),
            "weekly_breakdowns": [w.to_dict() for w in self.weekly_breakdowns],
            "improvements": [i.to_dict() for i in self.improvements],
            "most_productive_days": [d.to_dict() for d in self.most_productive_days],
        }
