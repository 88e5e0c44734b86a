"""
BlockStore — the storage collaborator ScheduleService writes through.

Routine Anchor owns no persistence. Callers hand ScheduleService anything
that satisfies this protocol (a database adapter, a file-backed cache, the
in-memory double used in tests). Reads are treated as already validated.
"""

from datetime import date
from typing import Protocol

from routine_anchor.time_truth.blocks import TimeBlock
from routine_anchor.time_truth.progress import DailyProgress


class BlockStore(Protocol):
    """
    Ranges are inclusive calendar days. With end omitted the range is the
    single day `start`.
    """

    def load_blocks(self, start: date, end: date | None = None) -> list[TimeBlock]: ...

    def load_progress(self, start: date, end: date | None = None) -> list[DailyProgress]: ...

    def save(self, entity: TimeBlock | DailyProgress) -> None:
        """Insert or replace. Blocks are keyed by id, progress by date."""
        ...

    def delete(self, entity: TimeBlock | DailyProgress) -> None: ...
