# =============================================================================
# core/progress/cancellation.py - Cooperative Cancellation
# =============================================================================
# A CancelToken is handed to a pipeline run and to every collaborator it
# calls. Nothing is interrupted by force:
# - the runner checks the token before starting each step
# - collaborators call raise_if_cancelled() before remote calls
# - callbacks registered with add_callback() can abort in-flight work
# =============================================================================

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

CANCELLED_MESSAGE = "Generation cancelled"


class PipelineCancelledError(ApplicationError):
    """Raised by a collaborator that notices its run was cancelled."""

    def __init__(self, reason: str = CANCELLED_MESSAGE):
        super().__init__(
            message=reason,
            code="PIPELINE_CANCELLED",
            suggestion="Start the generation again when ready",
        )


class CancelToken:
    """
    One-shot cancellation flag shared by a run and its collaborators.

    Example:
        token = CancelToken()
        ok = await runner.execute_steps(executors, cancel_token=token)

        # elsewhere (e.g. a watcher task)
        token.cancel("User left the page")
    """

    def __init__(self):
        self._reason: str | None = None
        self._event: asyncio.Event | None = None
        self._callbacks: list[Callable[[str], object]] = []

    @property
    def cancelled(self) -> bool:
        return self._reason is not None

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str = CANCELLED_MESSAGE) -> bool:
        """
        Mark the token cancelled.

        Returns:
            True if this call cancelled it, False if it already was
        """
        if self._reason is not None:
            return False

        self._reason = reason or CANCELLED_MESSAGE
        logger.info(f"Cancellation requested: {self._reason}")

        if self._event is not None:
            self._event.set()

        for callback in list(self._callbacks):
            try:
                callback(self._reason)
            except Exception as e:
                logger.warning(f"Cancel callback failed: {e}")

        return True

    def add_callback(self, callback: Callable[[str], object]) -> None:
        """Run callback(reason) on cancel, immediately if already cancelled."""
        if self._reason is not None:
            callback(self._reason)
            return
        self._callbacks.append(callback)

    def raise_if_cancelled(self) -> None:
        """
        Raises:
            PipelineCancelledError: If the token has been cancelled
        """
        if self._reason is not None:
            raise PipelineCancelledError(self._reason)

    async def wait(self) -> str:
        """Block until cancelled; returns the reason."""
        if self._reason is not None:
            return self._reason
        if self._event is None:
            self._event = asyncio.Event()
        await self._event.wait()
        return self._reason or CANCELLED_MESSAGE
