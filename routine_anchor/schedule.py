"""
ScheduleService — the write path for time blocks.

Every write runs as one unit under a single-writer lock:

    validate -> creation policies -> conflict check -> save -> re-aggregate

so two concurrent edits can never both pass the conflict check against a
stale snapshot. The service owns no storage; reads and writes go through
the injected BlockStore. Rejected writes come back as WriteResult with
success=False and the issues or conflicts that caused them.
"""

import dataclasses
import logging
import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo

from routine_anchor.observability import OperationContext
from routine_anchor.settings import Settings, get_settings
from routine_anchor.store import BlockStore
from routine_anchor.time_truth import (
    BlockStatus,
    Conflict,
    CreationPolicy,
    DailyProgress,
    StatusChange,
    Suggestion,
    TimeBlock,
    ValidationIssue,
    aggregate,
    apply_status,
    check_policies,
    default_segments,
    find_all_conflicts,
    find_conflicts,
    local_day,
    refresh_all_for_now,
    reset_status,
    sort_blocks,
    suggest_slots,
    validate,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({"title", "start_time", "end_time", "notes", "category", "icon"})


@dataclass
class WriteResult:
    """Outcome of one write. Exactly one of issues / conflicts is set on rejection."""

    success: bool
    message: str
    block: TimeBlock | None = None
    issues: list[ValidationIssue] = field(default_factory=list)
    conflicts: list[TimeBlock] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "block": self.block.to_dict() if self.block else None,
            "issues": [dataclasses.asdict(i) for i in self.issues],
            "conflicts": [b.id for b in self.conflicts],
        }


class ScheduleService:
    """
    Serialized schedule writes over a BlockStore.

    Args:
        store: Storage collaborator.
        settings: Suggestion and segment tunables. Defaults to get_settings().
        policies: Creation policies run before every insert
            (e.g. daily_limit_policy(3)).
        tz: Calendar timezone for aware datetimes.
    """

    def __init__(
        self,
        store: BlockStore,
        settings: Settings | None = None,
        policies: Iterable[CreationPolicy] = (),
        tz: tzinfo | None = None,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.policies: list[CreationPolicy] = list(policies)
        self.tz = tz
        self._lock = threading.RLock()

    def _now(self) -> datetime:
        return datetime.now(self.tz)

    def _day(self, block: TimeBlock) -> date:
        return local_day(block.start_time, self.tz)

    # =========================================================================
    # WRITES
    # =========================================================================

    def add_block(self, block: TimeBlock, now: datetime | None = None) -> WriteResult:
        with self._lock, OperationContext("add_block"):
            return self._add(block, now)

    def _add(self, block: TimeBlock, now: datetime | None) -> WriteResult:
        issues = validate(block, self.tz)
        if issues:
            logger.warning("Rejected block %s: %s", block.id, ", ".join(i.code for i in issues))
            return WriteResult(False, issues[0].message, block, issues=issues)

        day = self._day(block)
        existing = self.store.load_blocks(day)

        issues = check_policies(block, existing, self.policies)
        if issues:
            logger.warning("Block %s blocked by policy: %s", block.id, ", ".join(i.code for i in issues))
            return WriteResult(False, issues[0].message, block, issues=issues)

        conflicts = find_conflicts(block, existing, excluding_id=block.id, tz=self.tz)
        if conflicts:
            logger.warning("Block %s conflicts with %d block(s) on %s", block.id, len(conflicts), day)
            return WriteResult(False, _conflict_message(conflicts), block, conflicts=conflicts)

        self.store.save(block)
        self._recompute(day, now)
        logger.info("Added block %s on %s", block.id, day, extra={"block_id": block.id})
        return WriteResult(True, "Time block added", block)

    def update_block(self, block: TimeBlock, now: datetime | None = None, **changes) -> WriteResult:
        """
        Apply field changes to a stored block.

        The edited copy is validated and conflict-checked (ignoring the block
        itself) before it replaces the stored one. A move onto another day
        also runs the creation policies against that day. On rejection the
        stored block is untouched.

        Raises:
            ValueError: a change names a field that cannot be edited here.
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot edit field(s): {', '.join(sorted(unknown))}")

        with self._lock, OperationContext("update_block"):
            candidate = dataclasses.replace(block, **changes)

            issues = validate(candidate, self.tz)
            if issues:
                logger.warning("Rejected edit of %s: %s", block.id, ", ".join(i.code for i in issues))
                return WriteResult(False, issues[0].message, block, issues=issues)

            old_day = self._day(block)
            new_day = self._day(candidate)
            existing = self.store.load_blocks(new_day)

            # Moving onto another day is an insert there
            if new_day != old_day:
                issues = check_policies(candidate, existing, self.policies)
                if issues:
                    logger.warning(
                        "Move of %s blocked by policy: %s", block.id, ", ".join(i.code for i in issues)
                    )
                    return WriteResult(False, issues[0].message, block, issues=issues)

            conflicts = find_conflicts(candidate, existing, excluding_id=block.id, tz=self.tz)
            if conflicts:
                logger.warning("Edit of %s conflicts with %d block(s)", block.id, len(conflicts))
                return WriteResult(False, _conflict_message(conflicts), block, conflicts=conflicts)

            candidate.touch(now)
            self.store.save(candidate)
            self._recompute(new_day, now)
            if old_day != new_day:
                self._recompute(old_day, now)
            logger.info("Updated block %s (%s)", block.id, ", ".join(sorted(changes)))
            return WriteResult(True, "Time block updated", candidate)

    def delete_block(self, block: TimeBlock, now: datetime | None = None) -> WriteResult:
        with self._lock, OperationContext("delete_block"):
            day = self._day(block)
            self.store.delete(block)
            self._recompute(day, now)
            logger.info("Deleted block %s from %s", block.id, day)
            return WriteResult(True, "Time block deleted", block)

    def set_status(
        self,
        block: TimeBlock,
        status: BlockStatus,
        now: datetime | None = None,
    ) -> WriteResult:
        with self._lock, OperationContext("set_status"):
            applied, message = apply_status(block, status, now)
            if not applied:
                logger.warning("Status change refused for %s: %s", block.id, message)
                return WriteResult(False, message, block)

            self.store.save(block)
            self._recompute(self._day(block), now)
            logger.info("Block %s is now %s", block.id, block.status.value)
            return WriteResult(True, message, block)

    def refresh(self, now: datetime | None = None, day: date | None = None) -> list[StatusChange]:
        """Re-derive time-driven statuses for a day (today by default)."""
        now = now or self._now()
        day = day or local_day(now, self.tz)

        with self._lock, OperationContext("refresh"):
            changes = refresh_all_for_now(self.store.load_blocks(day), now)
            for change in changes:
                self.store.save(change.block)
            if changes:
                self._recompute(day, now)
                logger.info("Refreshed %d block status(es) on %s", len(changes), day)
            return changes

    def reset_day(self, day: date, now: datetime | None = None) -> int:
        """Put every block of the day back to not_started, outcomes included."""
        with self._lock, OperationContext("reset_day"):
            reset = 0
            for block in self.store.load_blocks(day):
                applied, _ = reset_status(block, now, include_finished=True)
                if applied:
                    self.store.save(block)
                    reset += 1
            self._recompute(day, now)
            logger.info("Reset %d block(s) on %s", reset, day)
            return reset

    def copy_day(self, source: date, target: date, now: datetime | None = None) -> list[WriteResult]:
        """
        Copy a day's blocks onto another day as fresh not-started blocks.

        Each copy goes through the full add path, so copies that conflict
        with blocks already on the target day (or hit a policy) are reported
        and skipped.
        """
        with self._lock, OperationContext("copy_day"):
            results = [
                self._add(block.copy_to_date(target, now), now)
                for block in sort_blocks(self.store.load_blocks(source))
            ]
            copied = sum(1 for r in results if r.success)
            logger.info("Copied %d/%d block(s) from %s to %s", copied, len(results), source, target)
            return results

    def rate_day(
        self,
        day: date,
        rating: int | None,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> DailyProgress:
        """
        Store the user's rating (1-5) and optional notes for a day.

        Raises:
            ValidationError: rating outside 1-5.
        """
        with self._lock, OperationContext("rate_day"):
            progress = self._recompute(day, now, save=False)
            progress.set_day_rating(rating)
            if notes is not None:
                progress.set_day_notes(notes)
            self.store.save(progress)
            return progress

    def progress_for(self, day: date, now: datetime | None = None) -> DailyProgress:
        """DailyProgress for the day, created on first reference."""
        with self._lock:
            return self._recompute(day, now)

    def _recompute(self, day: date, now: datetime | None, save: bool = True) -> DailyProgress:
        stored = self.store.load_progress(day)
        progress = aggregate(
            day,
            self.store.load_blocks(day),
            now=now,
            previous=stored[0] if stored else None,
            tz=self.tz,
        )
        if save:
            self.store.save(progress)
        logger.debug(
            "Progress %s: %d/%d completed", day, progress.completed_blocks, progress.total_blocks
        )
        return progress

    # =========================================================================
    # READS
    # =========================================================================

    def blocks_for(self, day: date) -> list[TimeBlock]:
        return sort_blocks(self.store.load_blocks(day))

    def current_block(self, now: datetime | None = None) -> TimeBlock | None:
        now = now or self._now()
        for block in self.blocks_for(local_day(now, self.tz)):
            if block.is_active_at(now):
                return block
        return None

    def next_block(self, now: datetime | None = None) -> TimeBlock | None:
        """First not-started block later today."""
        now = now or self._now()
        for block in self.blocks_for(local_day(now, self.tz)):
            if block.start_time > now and block.status == BlockStatus.NOT_STARTED:
                return block
        return None

    def suggest_for(self, day: date, duration: timedelta | None = None) -> list[Suggestion]:
        return suggest_slots(
            day,
            self.store.load_blocks(day),
            duration=duration,
            segments=default_segments(self.settings),
            tz=self.tz,
            settings=self.settings,
        )

    def audit_day(self, day: date) -> list[Conflict]:
        """Overlapping pairs already in the store (e.g. from an import)."""
        return find_all_conflicts(self.store.load_blocks(day), self.tz)


def _conflict_message(conflicts: Sequence[TimeBlock]) -> str:
    titles = ", ".join(f"'{b.title}'" for b in conflicts)
    return f"Time block conflicts with {titles}"
