# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - progress.py: Phase, Step and ProgressSnapshot (progress reporting)
# - brand.py: Stage payloads (style, visual, document) and brand rows
# - generation.py: Generation request, task status and outcome
#
# These models define the "contract" between API, workers and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Progress Models - What is happening now
# -----------------------------------------------------------------------------
from .progress import (
    Phase,
    ProgressSnapshot,
    Step,
    StepStatus,
)

# -----------------------------------------------------------------------------
# Brand Models - Stage payloads and persistence
# -----------------------------------------------------------------------------
from .brand import (
    BrandDocument,
    BrandRecord,
    BrandResponse,
    FontPairing,
    PresentationFormat,
    StyleProfile,
    Swatch,
    ToneProfile,
    VisualIdentity,
)

# -----------------------------------------------------------------------------
# Generation Models - Background task contract
# -----------------------------------------------------------------------------
from .generation import (
    GenerateBrandRequest,
    GenerationOutcome,
    GenerationResponse,
    GenerationTaskStatus,
    TaskState,
)

__all__ = [
    # Progress
    "Phase",
    "ProgressSnapshot",
    "Step",
    "StepStatus",
    # Brand
    "BrandDocument",
    "BrandRecord",
    "BrandResponse",
    "FontPairing",
    "PresentationFormat",
    "StyleProfile",
    "Swatch",
    "ToneProfile",
    "VisualIdentity",
    # Generation
    "GenerateBrandRequest",
    "GenerationOutcome",
    "GenerationResponse",
    "GenerationTaskStatus",
    "TaskState",
]
