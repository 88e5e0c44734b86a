"""
Pre-commit validation for time blocks.

validate() reports every problem at once as data; nothing here raises
unless the caller asks for it with ensure_valid().

Creation policies are caller-owned rules (plan limits, quotas) that run
alongside validation on the write path. They are injected, never built in.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import time, timedelta, tzinfo

from routine_anchor.config import (
    MAX_BLOCK_MINUTES,
    MAX_CATEGORY_LENGTH,
    MAX_NOTES_LENGTH,
    MAX_TITLE_LENGTH,
    MIN_BLOCK_MINUTES,
)

from .blocks import TimeBlock, local_day


@dataclass(frozen=True)
class ValidationIssue:
    code: str
    field: str
    message: str


class ValidationError(ValueError):
    """A block (or day rating) was rejected. Carries every issue found."""

    def __init__(self, issues: Iterable[ValidationIssue]):
        self.issues = list(issues)
        super().__init__("; ".join(issue.message for issue in self.issues))


CreationPolicy = Callable[[TimeBlock, Sequence[TimeBlock]], ValidationIssue | None]
"""(candidate, existing blocks that day) -> issue, or None to allow."""


def _spans_day_boundary(block: TimeBlock, tz: tzinfo | None) -> bool:
    start_day = local_day(block.start_time, tz)
    end = block.end_time
    if tz is not None and end.tzinfo is not None:
        end = end.astimezone(tz)
    if end.date() == start_day:
        return False
    # Ending exactly at the following midnight stays on the start day
    return not (end.date() == start_day + timedelta(days=1) and end.time() == time(0))


def validate(block: TimeBlock, tz: tzinfo | None = None) -> list[ValidationIssue]:
    """
    Check a candidate block against the TimeBlock contract.

    Returns:
        List of ValidationIssue; empty when the block may be accepted.
    """
    issues: list[ValidationIssue] = []

    title = block.title or ""
    if not title.strip():
        issues.append(ValidationIssue("empty_title", "title", "Title cannot be empty"))
    if len(title) > MAX_TITLE_LENGTH:
        issues.append(
            ValidationIssue(
                "title_too_long", "title", f"Title cannot exceed {MAX_TITLE_LENGTH} characters"
            )
        )

    if block.notes is not None and len(block.notes) > MAX_NOTES_LENGTH:
        issues.append(
            ValidationIssue(
                "notes_too_long", "notes", f"Notes cannot exceed {MAX_NOTES_LENGTH} characters"
            )
        )

    if block.category is not None and len(block.category) > MAX_CATEGORY_LENGTH:
        issues.append(
            ValidationIssue(
                "category_too_long",
                "category",
                f"Category cannot exceed {MAX_CATEGORY_LENGTH} characters",
            )
        )

    if (block.start_time.tzinfo is None) != (block.end_time.tzinfo is None):
        issues.append(
            ValidationIssue(
                "mixed_timezones",
                "end_time",
                "Start and end time must both be timezone-aware or both naive",
            )
        )
        return issues

    if block.start_time >= block.end_time:
        issues.append(
            ValidationIssue("invalid_time_range", "end_time", "Start time must be before end time")
        )
        return issues

    minutes = block.duration.total_seconds() / 60
    if minutes < MIN_BLOCK_MINUTES:
        issues.append(
            ValidationIssue(
                "duration_too_short",
                "end_time",
                f"Duration must be at least {MIN_BLOCK_MINUTES} minute",
            )
        )
    elif minutes > MAX_BLOCK_MINUTES:
        issues.append(
            ValidationIssue("duration_too_long", "end_time", "Duration cannot exceed 24 hours")
        )
    elif _spans_day_boundary(block, tz):
        issues.append(
            ValidationIssue(
                "spans_days", "end_time", "Time block cannot cross midnight into another day"
            )
        )

    return issues


def ensure_valid(block: TimeBlock, tz: tzinfo | None = None) -> None:
    """Raise ValidationError if validate() finds anything."""
    issues = validate(block, tz)
    if issues:
        raise ValidationError(issues)


def check_policies(
    block: TimeBlock,
    existing: Sequence[TimeBlock],
    policies: Iterable[CreationPolicy],
) -> list[ValidationIssue]:
    issues = []
    for policy in policies:
        issue = policy(block, existing)
        if issue is not None:
            issues.append(issue)
    return issues


def daily_limit_policy(limit: int) -> CreationPolicy:
    """
    Policy capping how many blocks a single day may hold.

    Example of a caller-supplied plan limit (e.g. a free tier of 3 blocks).
    """

    def _policy(block: TimeBlock, existing: Sequence[TimeBlock]) -> ValidationIssue | None:
        others = [b for b in existing if b.id != block.id]
        if len(others) >= limit:
            return ValidationIssue(
                "daily_limit_reached",
                "start_time",
                f"Daily limit of {limit} time blocks reached",
            )
        return None

    return _policy
