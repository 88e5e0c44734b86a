"""
Tests for block validation and creation policies.
"""

from datetime import datetime, timedelta, timezone

import pytest

from routine_anchor.time_truth import (
    TimeBlock,
    ValidationError,
    check_policies,
    daily_limit_policy,
    ensure_valid,
    validate,
)


def codes(issues):
    return [i.code for i in issues]


class TestValidate:
    def test_valid_block_has_no_issues(self, make_block):
        assert validate(make_block(9, 60, "Deep work")) == []

    def test_blank_title(self, make_block):
        assert codes(validate(make_block(9, 60, "   "))) == ["empty_title"]

    def test_title_boundary(self, make_block):
        assert validate(make_block(9, 60, "x" * 100)) == []
        assert codes(validate(make_block(9, 60, "x" * 101))) == ["title_too_long"]

    def test_notes_and_category_limits(self, make_block):
        block = make_block(9, 60, "Ok", notes="n" * 501, category="c" * 51)
        assert codes(validate(block)) == ["notes_too_long", "category_too_long"]

    def test_reports_every_problem_at_once(self, make_block):
        block = make_block(9, 60, "", notes="n" * 501)
        assert codes(validate(block)) == ["empty_title", "notes_too_long"]

    def test_end_before_start(self, now):
        block = TimeBlock(title="Backwards", start_time=now, end_time=now - timedelta(minutes=5))
        assert codes(validate(block)) == ["invalid_time_range"]

    def test_zero_length(self, now):
        block = TimeBlock(title="Empty", start_time=now, end_time=now)
        assert codes(validate(block)) == ["invalid_time_range"]

    def test_sub_minute_block(self, now):
        block = TimeBlock(title="Blink", start_time=now, end_time=now + timedelta(seconds=30))
        assert codes(validate(block)) == ["duration_too_short"]

    def test_longer_than_a_day(self, now):
        block = TimeBlock(title="Marathon", start_time=now, end_time=now + timedelta(hours=25))
        assert codes(validate(block)) == ["duration_too_long"]

    def test_crossing_midnight(self, make_block):
        assert codes(validate(make_block(23, 90, "Late"))) == ["spans_days"]

    def test_ending_at_midnight_is_allowed(self, make_block):
        assert validate(make_block(23, 60, "Wind down")) == []

    def test_mixed_naive_and_aware(self, now):
        block = TimeBlock(
            title="Mixed",
            start_time=now,
            end_time=(now + timedelta(hours=1)).replace(tzinfo=timezone.utc),
        )
        assert codes(validate(block)) == ["mixed_timezones"]


class TestEnsureValid:
    def test_raises_with_issues(self, make_block):
        with pytest.raises(ValidationError) as exc_info:
            ensure_valid(make_block(9, 60, ""))
        assert codes(exc_info.value.issues) == ["empty_title"]
        assert "Title cannot be empty" in str(exc_info.value)

    def test_validation_error_is_value_error(self):
        assert issubclass(ValidationError, ValueError)

    def test_valid_block_passes(self, make_block):
        ensure_valid(make_block(9))


class TestPolicies:
    def test_daily_limit_blocks_fourth(self, make_block):
        existing = [make_block(h) for h in (8, 9, 10)]
        issues = check_policies(make_block(14), existing, [daily_limit_policy(3)])
        assert codes(issues) == ["daily_limit_reached"]

    def test_daily_limit_allows_under_cap(self, make_block):
        existing = [make_block(8), make_block(9)]
        assert check_policies(make_block(14), existing, [daily_limit_policy(3)]) == []

    def test_block_does_not_count_against_itself(self, make_block):
        existing = [make_block(8), make_block(9)]
        editing = make_block(10)
        assert check_policies(editing, existing + [editing], [daily_limit_policy(3)]) == []

    def test_no_policies(self, make_block):
        assert check_policies(make_block(9), [make_block(h) for h in range(10)], []) == []

    def test_custom_policy(self, make_block):
        from routine_anchor.time_truth import ValidationIssue

        def no_weekends(block, existing):
            if block.start_time.weekday() >= 5:
                return ValidationIssue("weekend", "start_time", "No weekend blocks")
            return None

        saturday = TimeBlock(
            title="Chores",
            start_time=datetime(2026, 3, 14, 9),
            end_time=datetime(2026, 3, 14, 10),
        )
        assert codes(check_policies(saturday, [], [no_weekends])) == ["weekend"]
        assert check_policies(make_block(9), [], [no_weekends]) == []
