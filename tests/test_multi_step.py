# =============================================================================
# tests/test_multi_step.py - MultiStepRunner Tests
# =============================================================================
# This module contains tests for:
# - Strict in-order execution
# - Stopping at the first failure (later steps stay pending, never run)
# - Progress as the share of completed steps
# - Cancellation between steps
# - Snapshot batching for listeners
# =============================================================================

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from core.models.progress import Phase, StepStatus
from core.progress.cancellation import CancelToken
from core.progress.multi_step import MultiStepRunner, StepExecutor


STEPS = [
    ("style", "Style analysis"),
    ("visual", "Visual identity"),
    ("save", "Save"),
]


def make_runner(**kwargs) -> MultiStepRunner:
    return MultiStepRunner(STEPS, auto_reset_delay=0, **kwargs)


# =============================================================================
# Configuration
# =============================================================================

class TestConfiguration:
    """Test step setup and lookups."""

    def test_initial_steps_pending(self):
        runner = make_runner()

        assert runner.step_ids == ["style", "visual", "save"]
        assert all(s.status == StepStatus.PENDING for s in runner.steps)
        assert runner.phase == Phase.IDLE
        assert runner.progress == 0

    def test_duplicate_step_ids_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            MultiStepRunner([("a", "A"), ("a", "Again")])

    def test_mapping_definitions(self):
        runner = MultiStepRunner([{"id": "a", "label": "Step A"}, {"id": "b"}])

        assert runner.get_step("a").label == "Step A"
        assert runner.get_step("b").label == "b"

    def test_unknown_step_lookup(self):
        with pytest.raises(KeyError):
            make_runner().get_step("nope")

    @pytest.mark.asyncio
    async def test_unknown_executor_rejected_before_running(self):
        first = AsyncMock()
        runner = make_runner()

        with pytest.raises(KeyError):
            await runner.execute_steps([
                StepExecutor("style", first),
                StepExecutor("typo", AsyncMock()),
            ])

        first.assert_not_called()

    @pytest.mark.asyncio
    async def test_repeated_executor_rejected(self):
        style = AsyncMock()
        runner = make_runner()

        with pytest.raises(ValueError, match="Duplicate executor"):
            await runner.execute_steps([
                StepExecutor("style", style),
                StepExecutor("style", style),
                StepExecutor("visual", AsyncMock()),
                StepExecutor("save", AsyncMock()),
            ])

        style.assert_not_called()

    @pytest.mark.asyncio
    async def test_skipped_step_rejected(self):
        """Leaving out a configured step cannot yield a successful run."""
        style = AsyncMock()
        runner = make_runner()

        with pytest.raises(ValueError, match="save"):
            await runner.execute_steps([
                StepExecutor("style", style),
                StepExecutor("visual", AsyncMock()),
            ])

        style.assert_not_called()
        assert runner.phase == Phase.IDLE
        assert runner.loading_state.phase == Phase.IDLE

    @pytest.mark.asyncio
    async def test_reordered_steps_rejected(self):
        runner = make_runner()

        with pytest.raises(ValueError, match="order"):
            await runner.execute_steps([
                StepExecutor("visual", AsyncMock()),
                StepExecutor("style", AsyncMock()),
                StepExecutor("save", AsyncMock()),
            ])


# =============================================================================
# Execution
# =============================================================================

class TestExecution:
    """Test execute_steps() outcomes."""

    @pytest.mark.asyncio
    async def test_all_steps_complete(self):
        order = []

        def record(name):
            async def run():
                order.append(name)
            return run

        runner = make_runner()
        ok = await runner.execute_steps([
            StepExecutor("style", record("style"), success_message="Style done"),
            StepExecutor("visual", record("visual")),
            StepExecutor("save", record("save")),
        ])

        assert ok is True
        assert order == ["style", "visual", "save"]
        assert runner.progress == 100
        assert runner.phase == Phase.SUCCESS
        assert runner.get_step("style").message == "Style done"
        assert runner.loading_state.phase == Phase.SUCCESS

    @pytest.mark.asyncio
    async def test_stops_at_first_failure(self):
        """The failing step is in error; later steps are never invoked."""
        visual = AsyncMock(side_effect=RuntimeError("Rate limited"))
        save = AsyncMock()

        runner = make_runner()
        ok = await runner.execute_steps([
            StepExecutor("style", AsyncMock()),
            StepExecutor("visual", visual),
            StepExecutor("save", save),
        ])

        assert ok is False
        save.assert_not_called()
        assert runner.get_step("style").status == StepStatus.COMPLETE
        assert runner.get_step("visual").status == StepStatus.ERROR
        assert runner.get_step("visual").message == "Rate limited"
        assert runner.get_step("save").status == StepStatus.PENDING
        assert runner.failed_step.id == "visual"
        assert runner.phase == Phase.ERROR
        assert runner.loading_state.error == "Rate limited"

    @pytest.mark.asyncio
    async def test_first_step_failure(self):
        runner = make_runner()
        ok = await runner.execute_steps([
            StepExecutor("style", AsyncMock(side_effect=ValueError("Rate limited"))),
            StepExecutor("visual", AsyncMock()),
            StepExecutor("save", AsyncMock()),
        ])

        assert ok is False
        assert runner.progress == 0
        statuses = [s.status for s in runner.steps]
        assert statuses == [StepStatus.ERROR, StepStatus.PENDING, StepStatus.PENDING]

    @pytest.mark.asyncio
    async def test_progress_counts_completed_steps(self):
        seen = []

        async def check():
            seen.append(runner.progress)

        runner = make_runner()
        await runner.execute_steps([
            StepExecutor("style", check),
            StepExecutor("visual", check),
            StepExecutor("save", check),
        ])

        assert seen == pytest.approx([0, 100 / 3, 200 / 3])

    @pytest.mark.asyncio
    async def test_current_step_index_follows_run(self):
        seen = []

        async def check():
            seen.append(runner.current_step_index)

        runner = make_runner()
        await runner.execute_steps([
            StepExecutor("style", check),
            StepExecutor("visual", check),
            StepExecutor("save", check),
        ])

        assert seen == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_empty_run_succeeds(self):
        runner = MultiStepRunner(auto_reset_delay=0)

        ok = await runner.execute_steps([])

        assert ok is True
        assert runner.progress == 100
        assert runner.phase == Phase.SUCCESS

    @pytest.mark.asyncio
    async def test_rerun_resets_steps(self):
        runner = make_runner()
        await runner.execute_steps([
            StepExecutor("style", AsyncMock(side_effect=RuntimeError("boom"))),
            StepExecutor("visual", AsyncMock()),
            StepExecutor("save", AsyncMock()),
        ])

        ok = await runner.execute_steps([
            StepExecutor("style", AsyncMock()),
            StepExecutor("visual", AsyncMock()),
            StepExecutor("save", AsyncMock()),
        ])

        assert ok is True
        assert runner.failed_step is None

    @pytest.mark.asyncio
    async def test_mapping_executors(self):
        runner = make_runner()
        ok = await runner.execute_steps([
            {"stepId": "style", "executor": AsyncMock(), "loadingMessage": "Analyzing..."},
            {"step_id": "visual", "executor": lambda: None},
            {"step_id": "save", "executor": AsyncMock()},
        ])

        assert ok is True


# =============================================================================
# Cancellation
# =============================================================================

class TestCancellation:
    """Test the cancel token checked between steps."""

    @pytest.mark.asyncio
    async def test_cancel_during_step_stops_before_next(self):
        token = CancelToken()
        save = AsyncMock()

        async def visual():
            token.cancel("User cancelled")

        runner = make_runner()
        ok = await runner.execute_steps([
            StepExecutor("style", AsyncMock()),
            StepExecutor("visual", visual),
            StepExecutor("save", save),
        ], cancel_token=token)

        assert ok is False
        save.assert_not_called()
        assert runner.get_step("visual").status == StepStatus.COMPLETE
        assert runner.get_step("save").status == StepStatus.ERROR
        assert runner.get_step("save").message == "User cancelled"

    @pytest.mark.asyncio
    async def test_already_cancelled_runs_nothing(self):
        token = CancelToken()
        token.cancel()
        style = AsyncMock()

        runner = make_runner()
        ok = await runner.execute_steps([
            StepExecutor("style", style),
            StepExecutor("visual", AsyncMock()),
            StepExecutor("save", AsyncMock()),
        ], cancel_token=token)

        assert ok is False
        style.assert_not_called()
        assert runner.failed_step.message == "Generation cancelled"
        assert runner.cancelled is True


# =============================================================================
# Observers
# =============================================================================

class TestObservers:
    """Test announcements and snapshot listeners."""

    @pytest.mark.asyncio
    async def test_completed_steps_announced(self):
        announcer = MagicMock()
        runner = make_runner(announcer=announcer)

        await runner.execute_steps([
            StepExecutor("style", AsyncMock()),
            StepExecutor("visual", AsyncMock()),
            StepExecutor("save", AsyncMock()),
        ])

        announcer.assert_any_call("Style analysis completed", "polite")
        announcer.assert_any_call("Save completed", "polite")

    @pytest.mark.asyncio
    async def test_listener_never_sees_partial_state(self):
        """No snapshot shows a loading step while the overall state is idle."""
        seen = []
        runner = make_runner(on_change=seen.append)

        await runner.execute_steps([
            StepExecutor("style", AsyncMock()),
            StepExecutor("visual", AsyncMock(side_effect=RuntimeError("boom"))),
            StepExecutor("save", AsyncMock()),
        ])

        assert seen
        for snapshot in seen:
            loading = [s for s in snapshot.steps if s.status == StepStatus.LOADING]
            assert len(loading) <= 1
            if loading:
                assert snapshot.phase == Phase.LOADING

        assert seen[-1].phase == Phase.ERROR
        assert seen[-1].error == "boom"

    def test_set_step_status_and_reset(self):
        runner = make_runner()
        runner.set_step_status("style", StepStatus.COMPLETE, "ok")
        runner.next_step()

        assert runner.current_step_index == 1
        assert runner.progress == pytest.approx(100 / 3)

        runner.reset()

        assert runner.current_step_index == 0
        assert runner.progress == 0

    def test_next_step_stops_at_last(self):
        runner = make_runner()
        for _ in range(5):
            runner.next_step()

        assert runner.current_step_index == 2


# =============================================================================
# Aborting Errors
# =============================================================================

class WorkerTimeLimit(Exception):
    pass


class TestAbortOn:
    """Test exception types that mark the step failed and then propagate."""

    @pytest.mark.asyncio
    async def test_abort_error_propagates_after_marking_step(self):
        save = AsyncMock()
        runner = make_runner(abort_on=(WorkerTimeLimit,))

        with pytest.raises(WorkerTimeLimit):
            await runner.execute_steps([
                StepExecutor("style", AsyncMock()),
                StepExecutor("visual", AsyncMock(side_effect=WorkerTimeLimit("too slow"))),
                StepExecutor("save", save),
            ])

        save.assert_not_called()
        assert runner.get_step("visual").status == StepStatus.ERROR
        assert runner.get_step("visual").message == "too slow"
        assert runner.get_step("save").status == StepStatus.PENDING
        assert runner.phase == Phase.ERROR

    @pytest.mark.asyncio
    async def test_without_abort_on_it_is_an_ordinary_failure(self):
        runner = make_runner()

        ok = await runner.execute_steps([
            StepExecutor("style", AsyncMock(side_effect=WorkerTimeLimit("too slow"))),
            StepExecutor("visual", AsyncMock()),
            StepExecutor("save", AsyncMock()),
        ])

        assert ok is False
        assert runner.failed_step.message == "too slow"


class TestCancelledFlag:
    """Test that only cancellation-caused stops report cancelled."""

    @pytest.mark.asyncio
    async def test_cancelled_error_inside_step(self):
        token = CancelToken()

        async def visual():
            token.cancel("User cancelled")
            token.raise_if_cancelled()

        runner = make_runner()
        ok = await runner.execute_steps([
            StepExecutor("style", AsyncMock()),
            StepExecutor("visual", visual),
            StepExecutor("save", AsyncMock()),
        ], cancel_token=token)

        assert ok is False
        assert runner.cancelled is True
        assert runner.failed_step.id == "visual"

    @pytest.mark.asyncio
    async def test_unrelated_failure_with_pending_cancel(self):
        token = CancelToken()

        async def visual():
            token.cancel("User cancelled")
            raise RuntimeError("Rate limited")

        runner = make_runner()
        ok = await runner.execute_steps([
            StepExecutor("style", AsyncMock()),
            StepExecutor("visual", visual),
            StepExecutor("save", AsyncMock()),
        ], cancel_token=token)

        assert ok is False
        assert runner.cancelled is False
        assert runner.failed_step.message == "Rate limited"
