"""
ReportEngine: weekly and monthly reports over a snapshot of blocks and
stored DailyProgress records.

The engine holds settings only. Every call recomputes from the inputs, so
two calls with the same snapshot and the same `now` return equal reports.
"""

import logging
from collections.abc import Iterable
from datetime import date, datetime, timedelta, tzinfo

from routine_anchor.settings import Settings, get_settings
from routine_anchor.time_truth.blocks import TimeBlock, local_day
from routine_anchor.time_truth.progress import DailyProgress

from . import breakdowns, insights, streaks, trends
from .models import CompletionStatistics, MonthlyReport, ProductivityInsight, WeeklyReport

logger = logging.getLogger(__name__)


class ReportEngine:
    """
    Builds report value objects.

    Args:
        settings: Thresholds and window sizes. Defaults to get_settings().
        tz: Calendar used to assign blocks to days when times are aware.
    """

    def __init__(self, settings: Settings | None = None, tz: tzinfo | None = None):
        self.settings = settings or get_settings()
        self.tz = tz

    def _now(self) -> datetime:
        return datetime.now(self.tz)

    def _window(self, blocks: Iterable[TimeBlock], days: int, now: datetime) -> tuple[datetime, list[TimeBlock]]:
        """Blocks starting within the trailing `days` days, up to the end of today."""
        start = now - timedelta(days=days)
        today = local_day(now, self.tz)
        selected = [
            b for b in blocks
            if b.start_time >= start and local_day(b.start_time, self.tz) <= today
        ]
        return start, selected

    # =========================================================================
    # WEEKLY
    # =========================================================================

    def weekly_report(
        self,
        blocks: Iterable[TimeBlock],
        progress: Iterable[DailyProgress] = (),
        now: datetime | None = None,
    ) -> WeeklyReport:
        now = now or self._now()
        cfg = self.settings.reports
        blocks = list(blocks)
        progress = list(progress)

        window_start, window_blocks = self._window(blocks, cfg.weekly_window_days, now)
        daily = breakdowns.daily_breakdown(window_blocks, progress, self.tz)

        # Streaks look at the whole history: stored records plus what the blocks say now
        history = progress + breakdowns.daily_breakdown(blocks, progress, self.tz)
        today = local_day(now, self.tz)

        report = WeeklyReport(
            window_start=window_start,
            window_end=now,
            statistics=breakdowns.completion_statistics(
                window_blocks, local_day(window_start, self.tz), today, self.tz
            ),
            daily_breakdown=tuple(daily),
            category_performance=tuple(breakdowns.category_performance(window_blocks)),
            time_of_day=breakdowns.time_of_day_stats(
                window_blocks, cfg.min_blocks_per_hour, cfg.top_hours, self.tz
            ),
            current_streak=streaks.current_streak(history, today),
            longest_streak=streaks.longest_streak(history, today),
            trend=trends.analyze_trend(blocks, now, cfg.first_weekday, cfg.trend_threshold, self.tz),
        )
        logger.debug(
            "Weekly report %s..%s: %d blocks, rate %.2f",
            report.window_start.date(),
            today,
            report.total_blocks,
            report.completion_rate,
        )
        return report

    # =========================================================================
    # MONTHLY
    # =========================================================================

    def monthly_report(
        self,
        blocks: Iterable[TimeBlock],
        progress: Iterable[DailyProgress] = (),
        now: datetime | None = None,
    ) -> MonthlyReport:
        # progress is unused; both reports take the same arguments
        now = now or self._now()
        cfg = self.settings.reports
        window_start, window_blocks = self._window(blocks, cfg.monthly_window_days, now)
        today = local_day(now, self.tz)
        category_perf = breakdowns.category_performance(window_blocks)

        report = MonthlyReport(
            window_start=window_start,
            window_end=now,
            month=today.month,
            year=today.year,
            statistics=breakdowns.completion_statistics(
                window_blocks, local_day(window_start, self.tz), today, self.tz
            ),
            weekly_breakdowns=tuple(
                breakdowns.weekly_breakdowns(window_blocks, window_start, now, self.tz)
            ),
            improvements=tuple(
                insights.improvement_suggestions(
                    window_blocks, self.settings.insights, self.tz, category_perf
                )
            ),
            most_productive_days=tuple(
                breakdowns.productive_days(
                    window_blocks,
                    cfg.productive_day_min_blocks,
                    cfg.productive_day_min_rate,
                    cfg.top_productive_days,
                    self.tz,
                )
            ),
        )
        logger.debug(
            "Monthly report %s..%s: %d blocks, %d suggestions",
            report.window_start.date(),
            today,
            report.statistics.total_blocks,
            len(report.improvements),
        )
        return report

    # =========================================================================
    # AD HOC
    # =========================================================================

    def completion_statistics(
        self,
        blocks: Iterable[TimeBlock],
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> CompletionStatistics:
        return breakdowns.completion_statistics(blocks, start_date, end_date, self.tz)

    def productivity_insights(self, blocks: Iterable[TimeBlock]) -> list[ProductivityInsight]:
        return insights.productivity_insights(blocks, self.settings.insights, self.tz)
