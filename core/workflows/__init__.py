# =============================================================================
# core/workflows/ - Multi-Step Generation Workflows
# =============================================================================

from .brand_generation import (
    GENERATION_STEPS,
    BrandGenerationWorkflow,
    GenerationContext,
    GenerationStep,
    steps_for,
)

__all__ = [
    "GENERATION_STEPS",
    "BrandGenerationWorkflow",
    "GenerationContext",
    "GenerationStep",
    "steps_for",
]
