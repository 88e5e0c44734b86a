"""
Tests for the block status state machine and time-driven refresh.
"""

from datetime import datetime, timedelta

import pytest

from routine_anchor.time_truth import (
    BlockStatus,
    apply_status,
    derive_status,
    refresh_all_for_now,
    reset_status,
)


class TestBlockStatusMetadata:
    def test_values_are_stable_strings(self):
        assert [s.value for s in BlockStatus] == ["not_started", "in_progress", "completed", "skipped"]

    def test_finished_states(self):
        assert BlockStatus.COMPLETED.is_finished
        assert BlockStatus.SKIPPED.is_finished
        assert not BlockStatus.NOT_STARTED.is_finished
        assert not BlockStatus.IN_PROGRESS.is_finished

    def test_finished_states_have_no_transitions(self):
        assert BlockStatus.COMPLETED.available_transitions == ()
        assert BlockStatus.SKIPPED.can_transition is False

    def test_in_progress_can_reset(self):
        assert BlockStatus.NOT_STARTED in BlockStatus.IN_PROGRESS.available_transitions

    def test_sort_priority_puts_active_first(self):
        ordered = sorted(BlockStatus, key=lambda s: -s.sort_priority)
        assert ordered == [
            BlockStatus.IN_PROGRESS,
            BlockStatus.NOT_STARTED,
            BlockStatus.COMPLETED,
            BlockStatus.SKIPPED,
        ]

    def test_display_name(self):
        assert BlockStatus.IN_PROGRESS.display_name == "In Progress"


class TestDeriveStatus:
    def test_before_start_is_not_started(self, make_block, now):
        block = make_block(11)
        assert derive_status(block, now) == BlockStatus.NOT_STARTED

    def test_inside_interval_is_in_progress(self, make_block, now):
        block = make_block(10)
        assert derive_status(block, now) == BlockStatus.IN_PROGRESS

    def test_start_instant_is_in_progress(self, make_block):
        block = make_block(10)
        assert derive_status(block, block.start_time) == BlockStatus.IN_PROGRESS

    def test_expired_not_started_is_left_alone(self, make_block, now):
        block = make_block(8)
        assert derive_status(block, now) == BlockStatus.NOT_STARTED

    def test_expired_in_progress_is_left_alone(self, make_block, now):
        block = make_block(8, status=BlockStatus.IN_PROGRESS)
        assert derive_status(block, now) == BlockStatus.IN_PROGRESS

    @pytest.mark.parametrize("status", [BlockStatus.COMPLETED, BlockStatus.SKIPPED])
    def test_finished_never_overwritten(self, make_block, now, status):
        block = make_block(10, status=status)
        assert derive_status(block, now) == status

    def test_does_not_mutate(self, make_block, now):
        block = make_block(10)
        derive_status(block, now)
        assert block.status == BlockStatus.NOT_STARTED


class TestApplyStatus:
    def test_start_then_complete(self, make_block, now):
        block = make_block(10)
        ok, _ = apply_status(block, BlockStatus.IN_PROGRESS, now)
        assert ok
        ok, _ = apply_status(block, BlockStatus.COMPLETED, now)
        assert ok
        assert block.status == BlockStatus.COMPLETED
        assert block.updated_at == now

    def test_skip_directly_from_not_started(self, make_block, now):
        block = make_block(11)
        ok, _ = apply_status(block, "skipped", now)
        assert ok
        assert block.status == BlockStatus.SKIPPED

    def test_completed_cannot_be_reopened(self, make_block, now):
        block = make_block(9, status=BlockStatus.COMPLETED)
        ok, message = apply_status(block, BlockStatus.IN_PROGRESS, now)
        assert not ok
        assert "finished" in message
        assert block.status == BlockStatus.COMPLETED

    def test_same_status_is_a_noop(self, make_block, now):
        block = make_block(11)
        before = block.updated_at
        ok, _ = apply_status(block, BlockStatus.NOT_STARTED, now)
        assert not ok
        assert block.updated_at == before

    def test_force_bypasses_table(self, make_block, now):
        block = make_block(9, status=BlockStatus.SKIPPED)
        ok, _ = apply_status(block, BlockStatus.NOT_STARTED, now, force=True)
        assert ok
        assert block.status == BlockStatus.NOT_STARTED


class TestResetStatus:
    def test_in_progress_resets(self, make_block, now):
        block = make_block(10, status=BlockStatus.IN_PROGRESS)
        ok, _ = reset_status(block, now)
        assert ok
        assert block.status == BlockStatus.NOT_STARTED

    def test_finished_needs_include_finished(self, make_block, now):
        block = make_block(9, status=BlockStatus.COMPLETED)
        ok, _ = reset_status(block, now)
        assert not ok
        ok, _ = reset_status(block, now, include_finished=True)
        assert ok
        assert block.status == BlockStatus.NOT_STARTED


class TestRefreshAllForNow:
    def test_moves_only_blocks_that_changed(self, make_block, now):
        active = make_block(10)
        upcoming = make_block(12)
        done = make_block(10, 30, status=BlockStatus.COMPLETED)

        changes = refresh_all_for_now([active, upcoming, done], now)

        assert [c.block for c in changes] == [active]
        assert changes[0].previous == BlockStatus.NOT_STARTED
        assert changes[0].current == BlockStatus.IN_PROGRESS
        assert upcoming.status == BlockStatus.NOT_STARTED
        assert done.status == BlockStatus.COMPLETED

    def test_second_refresh_is_empty(self, make_block, now):
        blocks = [make_block(10), make_block(11)]
        refresh_all_for_now(blocks, now)
        assert refresh_all_for_now(blocks, now) == []

    def test_in_progress_before_start_goes_back(self, make_block, now):
        # Clock moved backwards (e.g. device time corrected)
        block = make_block(10, status=BlockStatus.IN_PROGRESS)
        changes = refresh_all_for_now([block], block.start_time - timedelta(minutes=5))
        assert len(changes) == 1
        assert block.status == BlockStatus.NOT_STARTED

    def test_end_instant_is_not_active(self, make_block):
        block = make_block(10)
        refresh_all_for_now([block], datetime(2026, 3, 11, 11, 0))
        assert block.status == BlockStatus.NOT_STARTED
