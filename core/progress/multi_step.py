# =============================================================================
# core/progress/multi_step.py - Multi-Step Pipeline Runner
# =============================================================================
# Drives an ordered list of named steps to completion, one at a time,
# exposing per-step status for progress UIs:
#
#   Analyzing style... -> Creating visuals... -> Assembling document... -> Saving
#
# Rules:
# - steps run strictly in order; step i+1 starts only after step i settles
# - the first failing step is marked "error" and the run stops there;
#   later steps stay "pending" and their executors are never called
# - no step is skipped, reordered or retried
# - failures become state (status + message), never exceptions
#
# The runner also drives an attached LoadingState so that single-phase
# consumers see loading -> success/error for the whole run.
#
# Usage:
#   runner = MultiStepRunner([("style", "Style analysis"), ("save", "Save")])
#   ok = await runner.execute_steps([
#       StepExecutor("style", analyze, loading_message="Analyzing..."),
#       StepExecutor("save", persist, loading_message="Saving..."),
#   ])
# =============================================================================

from __future__ import annotations

import asyncio
import inspect
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Iterator, Mapping, Sequence

from core.models.progress import Phase, ProgressSnapshot, Step, StepStatus
from core.progress.cancellation import CANCELLED_MESSAGE, CancelToken, PipelineCancelledError
from core.progress.loading_state import (
    Announcer,
    DEFAULT_AUTO_RESET_DELAY,
    Listener,
    LoadingState,
    safe_announce,
)
from lib.utils import describe_error

logger = logging.getLogger(__name__)

STEP_FAILED_MESSAGE = "Step failed"

StepDefinition = tuple[str, str] | Mapping[str, str] | Step


# =============================================================================
# Stage Executor Contract
# =============================================================================

@dataclass(frozen=True)
class StepExecutor:
    """
    One unit of work bound to a configured step.

    Attributes:
        step_id: Id of the step this executor drives
        executor: Zero-argument callable returning an awaitable (or a plain value)
        loading_message: Step/overall message while running
        success_message: Step message once complete
    """

    step_id: str
    executor: Callable[[], Awaitable[Any] | Any]
    loading_message: str | None = None
    success_message: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "StepExecutor":
        """Build from {"stepId"|"step_id", "executor", "loadingMessage"?, ...}."""
        return cls(
            step_id=data.get("step_id") or data["stepId"],
            executor=data["executor"],
            loading_message=data.get("loading_message", data.get("loadingMessage")),
            success_message=data.get("success_message", data.get("successMessage")),
        )


def _to_step(definition: StepDefinition) -> Step:
    if isinstance(definition, Step):
        return Step(id=definition.id, label=definition.label)
    if isinstance(definition, Mapping):
        return Step(id=definition["id"], label=definition.get("label", definition["id"]))
    step_id, label = definition
    return Step(id=step_id, label=label)


# =============================================================================
# Runner
# =============================================================================

class MultiStepRunner:
    """
    Sequential pipeline runner with per-step status.

    Attributes:
        loading_state: The LoadingState driven alongside the steps

    Example:
        runner = MultiStepRunner(
            [("style", "Style analysis"), ("visual", "Visual identity")],
            on_change=lambda snap: print(snap.progress),
        )
        ok = await runner.execute_steps([...])
        if not ok:
            print(runner.failed_step.message)
    """

    def __init__(
        self,
        steps: Iterable[StepDefinition] = (),
        loading_state: LoadingState | None = None,
        announcer: Announcer | None = None,
        on_change: Listener | None = None,
        auto_reset_delay: float = DEFAULT_AUTO_RESET_DELAY,
        abort_on: tuple[type[BaseException], ...] = (),
    ):
        self._steps: list[Step] = [_to_step(s) for s in steps]
        self._index: dict[str, int] = {}
        for position, step in enumerate(self._steps):
            if step.id in self._index:
                raise ValueError(f"Duplicate step id: {step.id}")
            self._index[step.id] = position

        self._announcer = announcer
        # Raised inside a step, these mark it failed and then propagate
        self._abort_on = abort_on
        self._current_step_index = 0
        self._has_run = False
        self._cancelled = False

        self._listeners: list[Listener] = [on_change] if on_change else []
        self._batch_depth = 0
        self._dirty = False

        self.loading_state = loading_state or LoadingState(
            announcer=announcer,
            auto_reset_delay=auto_reset_delay,
        )
        self.loading_state.subscribe(self._on_loading_state_change)

    # -------------------------------------------------------------------------
    # Read Access
    # -------------------------------------------------------------------------

    @property
    def steps(self) -> list[Step]:
        return list(self._steps)

    @property
    def step_ids(self) -> list[str]:
        return [s.id for s in self._steps]

    @property
    def current_step_index(self) -> int:
        return self._current_step_index

    @property
    def progress(self) -> float:
        """Percentage of steps complete."""
        if not self._steps:
            return 100.0 if self._has_run else 0.0
        complete = sum(1 for s in self._steps if s.status == StepStatus.COMPLETE)
        return complete / len(self._steps) * 100

    @property
    def phase(self) -> Phase:
        """
        Overall phase derived from the steps.

        error iff some step is in error; success iff every step is complete.
        """
        statuses = [s.status for s in self._steps]

        if StepStatus.ERROR in statuses:
            return Phase.ERROR
        if not statuses:
            return Phase.SUCCESS if self._has_run else Phase.IDLE
        if all(status == StepStatus.COMPLETE for status in statuses):
            return Phase.SUCCESS
        if any(status != StepStatus.PENDING for status in statuses):
            return Phase.LOADING
        return Phase.IDLE

    @property
    def cancelled(self) -> bool:
        """True if the last run stopped because it was cancelled."""
        return self._cancelled

    @property
    def failed_step(self) -> Step | None:
        return next((s for s in self._steps if s.status == StepStatus.ERROR), None)

    def get_step(self, step_id: str) -> Step:
        """
        Raises:
            KeyError: If no step has this id
        """
        return self._steps[self._position(step_id)]

    def snapshot(self) -> ProgressSnapshot:
        """Immutable view of the run, including every step."""
        failed = self.failed_step
        return ProgressSnapshot(
            phase=self.phase,
            message=self.loading_state.message,
            error=failed.message if failed else None,
            progress=self.progress,
            steps=list(self._steps),
            current_step_index=self._current_step_index,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for run snapshots. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Step Control
    # -------------------------------------------------------------------------

    def set_step_status(
        self,
        step_id: str,
        status: StepStatus,
        message: str | None = None,
    ) -> None:
        """
        Set one step's status and message.

        Raises:
            KeyError: If no step has this id
        """
        with self._transition():
            self._set_status(step_id, StepStatus(status), message)

    def next_step(self) -> None:
        """Advance the cursor, stopping at the last step."""
        with self._transition():
            self._current_step_index = min(
                self._current_step_index + 1,
                max(len(self._steps) - 1, 0),
            )
            self._dirty = True

    def reset(self) -> None:
        """Every step back to pending, cursor to the first step."""
        with self._transition():
            self._reset_steps()
            self._has_run = False
            self.loading_state.reset()

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    async def execute_steps(
        self,
        step_executors: Sequence[StepExecutor | Mapping[str, Any]],
        cancel_token: CancelToken | None = None,
    ) -> bool:
        """
        Run the executors in order, stopping at the first failure.

        Args:
            step_executors: Ordered executors, each bound to a configured step
            cancel_token: Checked before every step

        Returns:
            True if every step completed, False if one failed or the run
            was cancelled

        Raises:
            KeyError: If an executor names a step that was not configured
            ValueError: If the executors repeat, skip or reorder configured steps
            asyncio.CancelledError: If the task running the pipeline is cancelled
            Any type in `abort_on`: Raised by a step; the step is marked failed first

        The executor list is validated before anything runs.
        """
        executors = [
            e if isinstance(e, StepExecutor) else StepExecutor.from_mapping(e)
            for e in step_executors
        ]
        self._validate_executors(executors)

        with self._transition():
            self._reset_steps()
            self._has_run = True
            self._cancelled = False

        if not executors:
            return True

        logger.info(f"Starting pipeline run: {' -> '.join(e.step_id for e in executors)}")

        for item in executors:
            step = self.get_step(item.step_id)

            if cancel_token is not None and cancel_token.cancelled:
                reason = cancel_token.reason or CANCELLED_MESSAGE
                logger.info(f"Pipeline cancelled before step '{step.id}': {reason}")
                self._cancelled = True
                self._fail(step.id, reason)
                return False

            with self._transition():
                self._current_step_index = self._position(step.id)
                self._set_status(step.id, StepStatus.LOADING, item.loading_message)
                self.loading_state.set_loading(item.loading_message or f"{step.label}...")

            logger.info(f"Step '{step.id}' started")

            try:
                result = item.executor()
                if inspect.isawaitable(result):
                    await result

            except asyncio.CancelledError:
                self._fail(step.id, CANCELLED_MESSAGE)
                raise

            except self._abort_on as e:
                logger.warning(f"Step '{step.id}' aborted: {e!r}")
                self._fail(step.id, describe_error(e, STEP_FAILED_MESSAGE))
                raise

            except Exception as e:
                message = describe_error(e, STEP_FAILED_MESSAGE)
                self._cancelled = isinstance(e, PipelineCancelledError)
                logger.warning(f"Step '{step.id}' failed: {message}")
                self._fail(step.id, message)
                return False

            with self._transition():
                self._set_status(step.id, StepStatus.COMPLETE, item.success_message)
                self.loading_state.set_progress(self.progress)

            logger.info(f"Step '{step.id}' complete ({self.progress:.0f}%)")

        self.loading_state.set_success()
        return True

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _validate_executors(self, executors: list[StepExecutor]) -> None:
        ids = [e.step_id for e in executors]

        unknown = [step_id for step_id in ids if step_id not in self._index]
        if unknown:
            raise KeyError(f"Unknown step id(s): {', '.join(unknown)}")

        repeated = sorted({step_id for step_id in ids if ids.count(step_id) > 1})
        if repeated:
            raise ValueError(f"Duplicate executor for step(s): {', '.join(repeated)}")

        if ids != self.step_ids:
            missing = [step_id for step_id in self.step_ids if step_id not in ids]
            if missing:
                raise ValueError(f"No executor for step(s): {', '.join(missing)}")
            raise ValueError(
                f"Executors must follow step order: {' -> '.join(self.step_ids)}"
            )

    def _position(self, step_id: str) -> int:
        try:
            return self._index[step_id]
        except KeyError:
            raise KeyError(f"Unknown step id: {step_id}") from None

    def _set_status(self, step_id: str, status: StepStatus, message: str | None) -> None:
        position = self._position(step_id)
        step = self._steps[position]
        self._steps[position] = step.model_copy(update={"status": status, "message": message})
        self._dirty = True

        if status == StepStatus.COMPLETE:
            safe_announce(self._announcer, f"{step.label} completed", "polite")

    def _reset_steps(self) -> None:
        self._steps = [Step(id=s.id, label=s.label) for s in self._steps]
        self._current_step_index = 0
        self._dirty = True

    def _fail(self, step_id: str, message: str) -> None:
        with self._transition():
            self._set_status(step_id, StepStatus.ERROR, message)
            self.loading_state.set_error(message)

    @contextmanager
    def _transition(self) -> Iterator[None]:
        # Observers get one snapshot per compound change, never a partial one
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty:
                self._dirty = False
                self._notify()

    def _on_loading_state_change(self, _snapshot: ProgressSnapshot) -> None:
        if self._batch_depth:
            self._dirty = True
        else:
            self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return

        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Pipeline listener failed")
