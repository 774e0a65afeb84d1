# =============================================================================
# core/progress/ - Async Work Progress Tracking
# =============================================================================
# This package contains the progress-reporting primitives used by every
# generation workflow:
# - loading_state.py: LoadingState (idle/loading/success/error + progress)
# - multi_step.py: MultiStepRunner (ordered steps, stop at first failure)
# - cancellation.py: CancelToken (cooperative cancellation between steps)
#
# Nothing here talks to Supabase, OpenAI or Redis. Announcers and
# listeners are plain callables supplied by the caller.
# =============================================================================

from .cancellation import CANCELLED_MESSAGE, CancelToken, PipelineCancelledError
from .loading_state import (
    DEFAULT_AUTO_RESET_DELAY,
    LoadingState,
    clamp_progress,
    safe_announce,
)
from .multi_step import STEP_FAILED_MESSAGE, MultiStepRunner, StepExecutor

__all__ = [
    # Cancellation
    "CANCELLED_MESSAGE",
    "CancelToken",
    "PipelineCancelledError",
    # Loading state
    "DEFAULT_AUTO_RESET_DELAY",
    "LoadingState",
    "clamp_progress",
    "safe_announce",
    # Multi-step
    "STEP_FAILED_MESSAGE",
    "MultiStepRunner",
    "StepExecutor",
]
