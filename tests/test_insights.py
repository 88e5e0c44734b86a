"""
Tests for improvement suggestions and productivity insights.
"""

from datetime import date

import pytest

from routine_anchor.analytics import (
    ImpactLevel,
    InsightType,
    ReportEngine,
    format_hour,
    improvement_suggestions,
    most_productive_hour,
    productivity_insights,
)
from routine_anchor.settings import InsightSettings
from routine_anchor.time_truth import BlockStatus, TimeBlock

C = BlockStatus.COMPLETED
S = BlockStatus.SKIPPED


def block(hour, status=C, category="Work", minutes=30, day=11, start_minute=0):
    return TimeBlock.on(
        date(2026, 3, day), hour, minutes, "Block", start_minute=start_minute, status=status, category=category
    )


class TestImprovementSuggestions:
    def test_none_for_healthy_schedule(self):
        assert improvement_suggestions([block(9), block(10)]) == []

    def test_empty_input(self):
        assert improvement_suggestions([]) == []

    def test_overloaded_days(self):
        blocks = [block(h, start_minute=m) for h in range(8, 14) for m in (0, 30)]  # 12 in one day
        [suggestion] = improvement_suggestions(blocks)
        assert suggestion.kind == "reduce_daily_blocks"
        assert suggestion.impact == ImpactLevel.HIGH
        assert "12 blocks per day" in suggestion.description

    def test_average_uses_distinct_days(self):
        # 12 blocks over two days is 6 per day
        blocks = [block(h, day=10 + (h % 2)) for h in range(8, 20)]
        assert improvement_suggestions(blocks) == []

    def test_long_blocks(self):
        [suggestion] = improvement_suggestions([block(9, minutes=121), block(13, minutes=120)])
        assert suggestion.kind == "break_down_long_blocks"
        assert suggestion.impact == ImpactLevel.MEDIUM
        assert suggestion.description.startswith("You have 1 blocks over 120 minutes")

    def test_weak_category(self):
        blocks = [block(9), block(10, S, "Admin"), block(11, S, "Admin"), block(12, C, "Admin")]
        [suggestion] = improvement_suggestions(blocks)
        assert suggestion.kind == "focus_category"
        assert suggestion.title == "Focus on Admin"
        assert "only 33%" in suggestion.description

    def test_thresholds_from_settings(self):
        strict = InsightSettings(max_blocks_per_day=1, long_block_minutes=20, weak_category_rate=1.0)
        blocks = [block(9), block(10, S)]
        kinds = [s.kind for s in improvement_suggestions(blocks, strict)]
        assert kinds == ["reduce_daily_blocks", "break_down_long_blocks", "focus_category"]


class TestProductivityInsights:
    def test_empty(self):
        assert productivity_insights([]) == []

    def test_strong_completion(self):
        blocks = [block(9), block(9, start_minute=30), block(10, category="Health")]
        insights = productivity_insights(blocks)
        assert [(i.type, i.title) for i in insights] == [
            (InsightType.POSITIVE, "Excellent Completion Rate"),
            (InsightType.INFO, "Peak Productivity Time"),
            (InsightType.POSITIVE, "Strong in Health"),
        ]
        assert "100%" in insights[0].message
        assert "9 AM" in insights[1].message

    def test_weak_completion(self):
        blocks = [block(14), block(15, S), block(16, S)]
        insights = productivity_insights(blocks)
        assert insights[0].type == InsightType.IMPROVEMENT
        assert "33%" in insights[0].message
        assert "2 PM" in insights[1].message

    def test_middle_completion_has_no_rate_insight(self):
        blocks = [block(9), block(10), block(11, S)]
        titles = [i.title for i in productivity_insights(blocks)]
        assert "Excellent Completion Rate" not in titles
        assert "Room for Improvement" not in titles

    def test_nothing_completed_has_no_peak_hour(self):
        insights = productivity_insights([block(9, S)])
        assert "Peak Productivity Time" not in [i.title for i in insights]

    def test_engine_uses_its_settings(self, settings):
        engine = ReportEngine(settings=settings)
        assert engine.productivity_insights([block(9)])[0].title == "Excellent Completion Rate"


class TestHelpers:
    @pytest.mark.parametrize("hour,label", [(0, "12 AM"), (9, "9 AM"), (12, "12 PM"), (23, "11 PM")])
    def test_format_hour(self, hour, label):
        assert format_hour(hour) == label

    def test_most_productive_hour_ties_go_early(self):
        assert most_productive_hour([block(15), block(9)]) == 9

    def test_most_productive_hour_counts_completions(self):
        blocks = [block(9), block(15), block(15, start_minute=30), block(9, S, start_minute=30)]
        assert most_productive_hour(blocks) == 15
