"""
Conflict detection for time blocks.

Two blocks conflict when they sit on the same calendar day and their
half-open intervals [start, end) intersect:

    a.start < b.end and b.start < a.end

That single test covers a starting inside b, a ending inside b, and a
fully containing b (or the reverse). Touching edges (a.end == b.start)
do not conflict. Blocks on different days never conflict.

Conflicts are returned as data. The caller decides whether to reject the
write, prompt the user, or look for another slot.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, tzinfo

from .blocks import TimeBlock, local_day, sort_blocks

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Conflict:
    block_a_id: str
    block_b_id: str
    overlap_start: datetime
    overlap_end: datetime

    @property
    def overlap_minutes(self) -> int:
        return int((self.overlap_end - self.overlap_start).total_seconds() // 60)

    def to_dict(self) -> dict:
        return {
            "block_a_id": self.block_a_id,
            "block_b_id": self.block_b_id,
            "overlap_start": self.overlap_start.isoformat(),
            "overlap_end": self.overlap_end.isoformat(),
            "overlap_minutes": self.overlap_minutes,
        }


def same_day(a: TimeBlock, b: TimeBlock, tz: tzinfo | None = None) -> bool:
    return local_day(a.start_time, tz) == local_day(b.start_time, tz)


def overlaps(a: TimeBlock, b: TimeBlock, tz: tzinfo | None = None) -> bool:
    """True iff a and b share a calendar day and their intervals intersect."""
    if not same_day(a, b, tz):
        return False
    return a.start_time < b.end_time and b.start_time < a.end_time


def find_conflicts(
    candidate: TimeBlock,
    existing: Iterable[TimeBlock],
    excluding_id: str | None = None,
    tz: tzinfo | None = None,
) -> list[TimeBlock]:
    """
    Blocks in `existing` that the candidate would collide with.

    Args:
        candidate: Block about to be inserted or saved after an edit.
        existing: Current blocks (any days; other days are ignored).
        excluding_id: Id to skip, normally the candidate's own id when editing.

    Returns:
        Conflicting blocks in start order; empty when the slot is free.
    """
    conflicting = [
        block
        for block in existing
        if not (excluding_id is not None and block.id == excluding_id)
        and overlaps(candidate, block, tz)
    ]
    return sort_blocks(conflicting)


def find_all_conflicts(blocks: Iterable[TimeBlock], tz: tzinfo | None = None) -> list[Conflict]:
    """
    Every overlapping pair within a collection.

    Should come back empty when every write went through find_conflicts();
    useful as an audit of a store's contents.
    """
    ordered = sort_blocks(blocks)
    conflicts = []

    for i, a in enumerate(ordered):
        for b in ordered[i + 1 :]:
            if b.start_time >= a.end_time:
                # Sorted by start: nothing after b can overlap a either
                break
            if overlaps(a, b, tz):
                conflicts.append(
                    Conflict(
                        block_a_id=a.id,
                        block_b_id=b.id,
                        overlap_start=max(a.start_time, b.start_time),
                        overlap_end=min(a.end_time, b.end_time),
                    )
                )

    if conflicts:
        logger.debug("Found %d overlapping block pair(s)", len(conflicts))
    return conflicts
