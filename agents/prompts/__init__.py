# =============================================================================
# agents/prompts/ - Prompts for the Generation Agents
# =============================================================================
# This package contains the prompts for each generation stage:
# - style_system.py: Style analysis (JSON)
# - visual_system.py: Palette, fonts and logo concept (JSON)
# - document_system.py: Brand Rider assembly (Markdown)
# - overlays.py: Tone overlay per presentation format
# - logo_system.py: Image prompt for the logo
# =============================================================================

from agents.prompts.style_system import STYLE_SYSTEM_PROMPT, build_style_prompt
from agents.prompts.visual_system import VISUAL_SYSTEM_PROMPT, build_visual_prompt
from agents.prompts.document_system import (
    build_document_prompt,
    build_document_system_prompt,
)
from agents.prompts.overlays import FORMAT_OVERLAYS, get_overlay
from agents.prompts.logo_system import build_logo_prompt

__all__ = [
    "STYLE_SYSTEM_PROMPT",
    "build_style_prompt",
    "VISUAL_SYSTEM_PROMPT",
    "build_visual_prompt",
    "build_document_prompt",
    "build_document_system_prompt",
    "FORMAT_OVERLAYS",
    "get_overlay",
    "build_logo_prompt",
]
