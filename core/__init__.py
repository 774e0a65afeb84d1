# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the generation logic:
# - models/: Pydantic schemas for data validation
# - progress/: LoadingState, MultiStepRunner, CancelToken
# - services/: Supabase persistence and storage
# - workflows/: The brand generation workflow
#
# Code in this package should NOT import from Celery or the WebSocket layer.
# Announcers and progress listeners are passed in as plain callables.
# =============================================================================
