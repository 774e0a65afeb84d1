# =============================================================================
# tests/test_loading_state.py - LoadingState Tests
# =============================================================================
# This module contains tests for:
# - Phase transitions and their messages
# - Progress clamping
# - Auto-reset scheduling and cancellation
# - The execute() error boundary
# - Announcements and listeners
# =============================================================================

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

from core.models.progress import Phase
from core.progress.loading_state import LoadingState, clamp_progress


# =============================================================================
# Transitions
# =============================================================================

class TestTransitions:
    """Test set_loading / set_success / set_error / reset."""

    def test_initial_state_is_idle(self):
        state = LoadingState()

        assert state.phase == Phase.IDLE
        assert state.message == ""
        assert state.error is None
        assert state.progress == 0

    def test_set_loading_uses_default_message(self):
        state = LoadingState(default_message="Working...")
        state.set_loading()

        assert state.phase == Phase.LOADING
        assert state.is_loading
        assert state.message == "Working..."

    def test_set_loading_clears_previous_error(self):
        state = LoadingState(auto_reset_delay=0)
        state.set_error("boom")
        state.set_loading("Retrying...")

        assert state.error is None
        assert state.message == "Retrying..."

    def test_set_success_message(self):
        state = LoadingState(auto_reset_delay=0)
        state.set_success()

        assert state.phase == Phase.SUCCESS
        assert state.message == "Success!"

    def test_set_error_zeroes_progress(self):
        """Error clears the message and drops progress to 0."""
        state = LoadingState(auto_reset_delay=0)
        state.set_loading()
        state.set_progress(60)
        state.set_error("Rate limited")

        assert state.phase == Phase.ERROR
        assert state.error == "Rate limited"
        assert state.message == ""
        assert state.progress == 0

    def test_reset_returns_to_idle(self):
        state = LoadingState(auto_reset_delay=0)
        state.set_loading("x")
        state.set_progress(50)
        state.reset()

        assert state.snapshot().model_dump() == LoadingState().snapshot().model_dump()


# =============================================================================
# Progress
# =============================================================================

class TestProgress:
    """Test progress clamping."""

    @pytest.mark.parametrize("value,expected", [
        (-5, 0),
        (0, 0),
        (42.5, 42.5),
        (100, 100),
        (250, 100),
        (float("nan"), 0),
    ])
    def test_clamp_progress(self, value, expected):
        assert clamp_progress(value) == expected

    def test_increment_is_clamped(self):
        state = LoadingState()
        state.set_progress(95)
        state.increment_progress(10)

        assert state.progress == 100

    def test_default_increment(self):
        state = LoadingState()
        state.increment_progress()
        state.increment_progress()

        assert state.progress == 20

    def test_progress_does_not_change_phase(self):
        state = LoadingState()
        state.set_progress(30)

        assert state.phase == Phase.IDLE


# =============================================================================
# Auto-Reset
# =============================================================================

class TestAutoReset:
    """Test the timed return to idle after success/error."""

    @pytest.mark.asyncio
    async def test_success_resets_after_delay(self):
        state = LoadingState(auto_reset_delay=0.01)
        state.set_success("Done")

        assert state.reset_pending
        await asyncio.sleep(0.05)

        assert state.phase == Phase.IDLE
        assert state.message == ""
        assert not state.reset_pending

    @pytest.mark.asyncio
    async def test_error_resets_after_delay(self):
        state = LoadingState(auto_reset_delay=0.01)
        state.set_error("boom")
        await asyncio.sleep(0.05)

        assert state.phase == Phase.IDLE
        assert state.error is None

    @pytest.mark.asyncio
    async def test_new_transition_cancels_pending_reset(self):
        """A success followed by loading must not be wiped by the old timer."""
        state = LoadingState(auto_reset_delay=0.02)
        state.set_success()
        state.set_loading("Again")
        await asyncio.sleep(0.05)

        assert state.phase == Phase.LOADING
        assert state.message == "Again"

    @pytest.mark.asyncio
    async def test_zero_delay_disables_reset(self):
        state = LoadingState(auto_reset_delay=0)
        state.set_success()
        await asyncio.sleep(0.01)

        assert state.phase == Phase.SUCCESS
        assert not state.reset_pending

    def test_no_reset_without_event_loop(self):
        state = LoadingState(auto_reset_delay=0.01)
        state.set_success()

        assert state.phase == Phase.SUCCESS
        assert not state.reset_pending


# =============================================================================
# Error Boundary
# =============================================================================

class TestExecute:
    """Test execute() with succeeding and failing functions."""

    @pytest.mark.asyncio
    async def test_success_returns_result(self):
        state = LoadingState(auto_reset_delay=0)
        on_success = MagicMock()

        async def fetch():
            assert state.phase == Phase.LOADING
            return 42

        result = await state.execute(fetch, loading_message="Fetching...", on_success=on_success)

        assert result == 42
        assert state.phase == Phase.SUCCESS
        on_success.assert_called_once_with(42)

    @pytest.mark.asyncio
    async def test_failure_becomes_state(self):
        state = LoadingState(auto_reset_delay=0)
        on_error = MagicMock()
        error = ValueError("Rate limited")

        async def fetch():
            raise error

        result = await state.execute(fetch, on_error=on_error)

        assert result is None
        assert state.phase == Phase.ERROR
        assert state.error == "Rate limited"
        on_error.assert_called_once_with(error)

    @pytest.mark.asyncio
    async def test_raising_on_error_reaches_caller(self):
        """The state is already error when the callback's exception escapes."""
        state = LoadingState(auto_reset_delay=0)
        on_error = MagicMock(side_effect=KeyError("handler bug"))

        async def fetch():
            raise ValueError("Rate limited")

        with pytest.raises(KeyError):
            await state.execute(fetch, on_error=on_error)

        assert state.phase == Phase.ERROR
        assert state.error == "Rate limited"

    @pytest.mark.asyncio
    async def test_empty_error_message_gets_fallback(self):
        state = LoadingState(auto_reset_delay=0)

        async def fetch():
            raise RuntimeError()

        await state.execute(fetch)

        assert state.error == "An unknown error occurred"

    @pytest.mark.asyncio
    async def test_sync_function_accepted(self):
        state = LoadingState(auto_reset_delay=0)

        result = await state.execute(lambda: "plain")

        assert result == "plain"
        assert state.phase == Phase.SUCCESS


# =============================================================================
# Side Channels
# =============================================================================

class TestAnnouncementsAndListeners:
    """Test announcer calls and snapshot listeners."""

    def test_transitions_are_announced(self):
        announcer = MagicMock()
        state = LoadingState(announcer=announcer, auto_reset_delay=0)

        state.set_loading("Analyzing...")
        state.set_error("boom")

        announcer.assert_any_call("Analyzing...", "polite")
        announcer.assert_any_call("Error: boom", "assertive")

    def test_announce_changes_false_silences(self):
        announcer = MagicMock()
        state = LoadingState(announcer=announcer, announce_changes=False)

        state.set_loading("x")

        announcer.assert_not_called()

    def test_failing_announcer_is_ignored(self):
        announcer = MagicMock(side_effect=RuntimeError("socket closed"))
        state = LoadingState(announcer=announcer, auto_reset_delay=0)

        state.set_success("Done")

        assert state.phase == Phase.SUCCESS

    def test_listener_receives_snapshots(self):
        seen = []
        state = LoadingState()
        unsubscribe = state.subscribe(seen.append)

        state.set_loading("a")
        state.set_progress(10)
        unsubscribe()
        state.set_progress(20)

        assert [s.progress for s in seen] == [0, 10]
        assert seen[0].phase == Phase.LOADING

    def test_failing_listener_does_not_break_others(self):
        seen = []
        state = LoadingState(on_change=MagicMock(side_effect=RuntimeError("bad")))
        state.subscribe(seen.append)

        state.set_loading()

        assert len(seen) == 1
