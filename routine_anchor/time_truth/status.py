"""
Status state machine for time blocks.

    not_started -> in_progress -> {completed, skipped}
    not_started -> {completed, skipped}
    in_progress -> not_started            (reset)

not_started / in_progress are re-derivable from the wall clock;
completed / skipped are only ever set by an explicit caller transition.
A block whose end has passed is left as it is: it is never auto-marked
completed or skipped.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from .blocks import BlockStatus, TimeBlock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusChange:
    block: TimeBlock
    previous: BlockStatus
    current: BlockStatus


def derive_status(block: TimeBlock, now: datetime) -> BlockStatus:
    """Status the block should have at `now`. Pure: never mutates the block."""
    if block.status.is_finished:
        return block.status
    if now >= block.end_time:
        return block.status
    if block.start_time <= now:
        return BlockStatus.IN_PROGRESS
    return BlockStatus.NOT_STARTED


def apply_status(
    block: TimeBlock,
    new_status: BlockStatus,
    now: datetime | None = None,
    force: bool = False,
) -> tuple[bool, str]:
    """
    Move a block to new_status, refreshing updated_at.

    Transitions not allowed by the state machine leave the block untouched.
    force skips the transition table (used by an explicit routine reset).

    Returns:
        (applied, message)
    """
    new_status = BlockStatus(new_status)
    current = block.status

    if new_status == current:
        return False, f"Block already {current.value}"

    if not force:
        if not current.can_transition:
            return False, f"Block is {current.value}; finished blocks keep their outcome"
        if new_status not in current.available_transitions:
            return False, f"Cannot move block from {current.value} to {new_status.value}"

    block.status = new_status
    block.touch(now)
    logger.debug("Block %s: %s -> %s", block.id, current.value, new_status.value)
    return True, f"Block moved from {current.value} to {new_status.value}"


def reset_status(
    block: TimeBlock,
    now: datetime | None = None,
    include_finished: bool = False,
) -> tuple[bool, str]:
    """Return a block to not_started. Finished blocks only with include_finished."""
    if block.status.is_finished and not include_finished:
        return False, f"Block is {block.status.value}; pass include_finished to reset it"
    return apply_status(block, BlockStatus.NOT_STARTED, now, force=include_finished)


def refresh_all_for_now(blocks: Iterable[TimeBlock], now: datetime) -> list[StatusChange]:
    """
    Re-derive the status of every non-finished block for `now`.

    Returns the changes made, so the caller knows which days need their
    DailyProgress re-aggregated. An empty list means nothing moved.
    """
    changes: list[StatusChange] = []
    for block in blocks:
        if block.status.is_finished:
            continue
        target = derive_status(block, now)
        if target == block.status:
            continue
        previous = block.status
        applied, _ = apply_status(block, target, now)
        if applied:
            changes.append(StatusChange(block=block, previous=previous, current=target))

    if changes:
        logger.debug("Status refresh at %s changed %d block(s)", now.isoformat(), len(changes))
    return changes
