# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# This package contains the Celery configuration and task definitions for
# background brand generation.
#
# Components:
# - celery_app.py: Celery application configuration
# - config.py: Worker-specific settings
# - tasks.py: Task definitions (generate_brand)
# - cancellation.py: Cancel requests between API and workers
#
# Usage:
#   # Start worker
#   celery -A workers.celery_app worker -Q generation,default --loglevel=info
#
#   # Submit task (from API)
#   from workers.tasks import generate_brand
#   result = generate_brand.delay(request.model_dump(mode="json"), user_id)
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]
