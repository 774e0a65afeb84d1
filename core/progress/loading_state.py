# =============================================================================
# core/progress/loading_state.py - Loading/Progress State
# =============================================================================
# Single source of truth for "what is happening now" for one unit of async
# work. Tracks a phase (idle/loading/success/error), a message, an error and
# a 0-100 progress value.
#
# Behaviour:
# - success and error schedule an automatic return to idle after
#   auto_reset_delay seconds; any later transition cancels that reset
# - every transition is announced through an optional announcer
#   (fire-and-forget; announcer failures are ignored)
# - listeners receive a ProgressSnapshot after every committed change
# - execute() is the error boundary: the wrapped function's exceptions
#   become state and a None return value, they are never re-raised
#
# Usage:
#   state = LoadingState(announcer=announcer.announce)
#   result = await state.execute(fetch_data, loading_message="Fetching...")
#   if result is None:
#       print(state.error)
# =============================================================================

from __future__ import annotations

import asyncio
import inspect
import logging
import math
from typing import Any, Awaitable, Callable, Literal, TypeVar

from core.models.progress import Phase, ProgressSnapshot
from core.progress.cancellation import CANCELLED_MESSAGE
from lib.utils import describe_error

logger = logging.getLogger(__name__)

T = TypeVar("T")

Priority = Literal["polite", "assertive"]
Announcer = Callable[[str, Priority], Any]
Listener = Callable[[ProgressSnapshot], Any]

DEFAULT_LOADING_MESSAGE = "Loading..."
DEFAULT_SUCCESS_MESSAGE = "Success!"
DEFAULT_AUTO_RESET_DELAY = 3.0


def clamp_progress(value: float) -> float:
    """Clamp a progress value into [0, 100]. NaN counts as 0."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return 0.0
    return float(max(0.0, min(100.0, value)))


def safe_announce(announcer: Announcer | None, message: str, priority: Priority) -> None:
    """
    Send a message to the announcer, ignoring any failure.

    Announcements are a side channel (screen readers, toasts, WebSocket
    notices); losing one must never affect the work being reported.
    """
    if announcer is None or not message:
        return
    try:
        announcer(message, priority)
    except Exception as e:
        logger.debug(f"Announcement dropped ({priority}): {e}")


class LoadingState:
    """
    Phase/message/error/progress record for one unit of async work.

    Attributes:
        default_message: Used by set_loading() when no message is given
        default_success_message: Used by set_success() when no message is given
        auto_reset_delay: Seconds before success/error return to idle (<= 0 disables)
        announce_changes: Whether transitions are sent to the announcer

    Example:
        state = LoadingState(auto_reset_delay=3.0)
        state.set_loading("Analyzing your writing style...")
        state.set_progress(40)
        state.set_success("Done!")
        # three seconds later, if nothing else happened: state.phase == Phase.IDLE
    """

    def __init__(
        self,
        default_message: str = DEFAULT_LOADING_MESSAGE,
        default_success_message: str = DEFAULT_SUCCESS_MESSAGE,
        auto_reset_delay: float = DEFAULT_AUTO_RESET_DELAY,
        announce_changes: bool = True,
        announcer: Announcer | None = None,
        on_change: Listener | None = None,
    ):
        self.default_message = default_message
        self.default_success_message = default_success_message
        self.auto_reset_delay = auto_reset_delay
        self.announce_changes = announce_changes
        self.announcer = announcer

        self._phase = Phase.IDLE
        self._message = ""
        self._error: str | None = None
        self._progress = 0.0
        self._reset_handle: asyncio.TimerHandle | None = None
        self._listeners: list[Listener] = [on_change] if on_change else []

    # -------------------------------------------------------------------------
    # Read Access
    # -------------------------------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def message(self) -> str:
        return self._message

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def is_loading(self) -> bool:
        return self._phase == Phase.LOADING

    @property
    def reset_pending(self) -> bool:
        """True while an auto-reset is scheduled."""
        return self._reset_handle is not None

    def snapshot(self) -> ProgressSnapshot:
        """Immutable copy of the current state."""
        return ProgressSnapshot(
            phase=self._phase,
            message=self._message,
            error=self._error,
            progress=self._progress,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with a snapshot after every change.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def set_loading(self, message: str | None = None) -> None:
        """Enter the loading phase and clear any previous error."""
        self._cancel_reset()
        text = message or self.default_message

        self._phase = Phase.LOADING
        self._message = text
        self._error = None

        self._announce(text, "polite")
        self._notify()

    def set_success(self, message: str | None = None) -> None:
        """Enter the success phase and schedule the auto-reset."""
        self._cancel_reset()
        text = message or self.default_success_message

        self._phase = Phase.SUCCESS
        self._message = text
        self._error = None

        self._announce(text, "polite")
        self._schedule_reset()
        self._notify()

    def set_error(self, message: str) -> None:
        """Enter the error phase, zero the progress and schedule the auto-reset."""
        self._cancel_reset()
        text = message if isinstance(message, str) and message else describe_error(message)

        self._phase = Phase.ERROR
        self._message = ""
        self._error = text
        self._progress = 0.0

        self._announce(f"Error: {text}", "assertive")
        self._schedule_reset()
        self._notify()

    def reset(self) -> None:
        """Return to idle immediately and drop any scheduled auto-reset."""
        self._cancel_reset()
        self._clear()
        self._notify()

    def set_progress(self, value: float) -> None:
        """Set progress, clamped to [0, 100]. The phase is unchanged."""
        self._progress = clamp_progress(value)
        self._notify()

    def increment_progress(self, amount: float = 10) -> None:
        """Add to progress, clamped to [0, 100]."""
        self.set_progress(self._progress + amount)

    # -------------------------------------------------------------------------
    # Error Boundary
    # -------------------------------------------------------------------------

    async def execute(
        self,
        async_fn: Callable[[], Awaitable[T] | T],
        loading_message: str | None = None,
        success_message: str | None = None,
        on_success: Callable[[T], Any] | None = None,
        on_error: Callable[[Exception], Any] | None = None,
    ) -> T | None:
        """
        Run async_fn with full loading-state bookkeeping.

        loading -> await async_fn() -> success, then on_success(result)
        loading -> await async_fn() raises -> error, then on_error(exc)

        Args:
            async_fn: Zero-argument callable; may return an awaitable or a value
            loading_message: Message while running (default_message if omitted)
            success_message: Message on success (default_success_message if omitted)
            on_success: Called with the result after entering success
            on_error: Called with the exception after entering error

        Returns:
            The result, or None if async_fn raised

        Raises:
            asyncio.CancelledError: If the awaiting task itself is cancelled
            Exception: Whatever on_error raises; the state is already error
        """
        try:
            self.set_loading(loading_message)
            result = async_fn()
            if inspect.isawaitable(result):
                result = await result

            self.set_success(success_message)
            if on_success is not None:
                on_success(result)

            return result

        except asyncio.CancelledError:
            self.set_error(CANCELLED_MESSAGE)
            raise

        except Exception as e:
            logger.debug(f"Wrapped function failed: {e!r}")
            self.set_error(describe_error(e))
            if on_error is not None:
                on_error(e)

            return None

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _clear(self) -> None:
        self._phase = Phase.IDLE
        self._message = ""
        self._error = None
        self._progress = 0.0

    def _cancel_reset(self) -> None:
        if self._reset_handle is not None:
            self._reset_handle.cancel()
            self._reset_handle = None

    def _schedule_reset(self) -> None:
        if self.auto_reset_delay is None or self.auto_reset_delay <= 0:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, auto-reset not scheduled")
            return

        self._reset_handle = loop.call_later(self.auto_reset_delay, self._auto_reset)

    def _auto_reset(self) -> None:
        self._reset_handle = None
        self._clear()
        self._notify()

    def _announce(self, message: str, priority: Priority) -> None:
        if self.announce_changes:
            safe_announce(self.announcer, message, priority)

    def _notify(self) -> None:
        if not self._listeners:
            return

        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Progress listener failed")
