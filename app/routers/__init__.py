# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - brands.py: Start generations, fetch saved brands
# - tasks.py: Generation progress and cancellation
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import brands
from . import tasks

__all__ = [
    "health",
    "brands",
    "tasks",
]
