"""
In-memory BlockStore for deterministic service tests.

Holds the very objects it is given (no copies), keyed by block id and
progress date. Counts saves so tests can assert on write traffic.
"""

from datetime import date, tzinfo

from routine_anchor.time_truth import DailyProgress, TimeBlock, local_day


class InMemoryStore:
    def __init__(self, blocks=(), progress=(), tz: tzinfo | None = None):
        self.tz = tz
        self.blocks: dict[str, TimeBlock] = {b.id: b for b in blocks}
        self.progress: dict[date, DailyProgress] = {p.date: p for p in progress}
        self.saves = 0
        self.deletes = 0

    def load_blocks(self, start: date, end: date | None = None) -> list[TimeBlock]:
        end = end or start
        return [b for b in self.blocks.values() if start <= local_day(b.start_time, self.tz) <= end]

    def load_progress(self, start: date, end: date | None = None) -> list[DailyProgress]:
        end = end or start
        return [p for d, p in sorted(self.progress.items()) if start <= d <= end]

    def save(self, entity: TimeBlock | DailyProgress) -> None:
        self.saves += 1
        if isinstance(entity, TimeBlock):
            self.blocks[entity.id] = entity
        elif isinstance(entity, DailyProgress):
            self.progress[entity.date] = entity
        else:
            raise TypeError(f"Cannot store {type(entity).__name__}")

    def delete(self, entity: TimeBlock | DailyProgress) -> None:
        self.deletes += 1
        if isinstance(entity, TimeBlock):
            self.blocks.pop(entity.id, None)
        elif isinstance(entity, DailyProgress):
            self.progress.pop(entity.date, None)
        else:
            raise TypeError(f"Cannot delete {type(entity).__name__}")
