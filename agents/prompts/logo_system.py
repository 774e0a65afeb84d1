# =============================================================================
# agents/prompts/logo_system.py - Logo Prompt
# =============================================================================

from __future__ import annotations

LOGO_STYLE_SUFFIX = (
    "Flat vector logo mark on a plain white background. "
    "No text, no mockups, no photographic elements."
)

# Image APIs reject very long prompts
MAX_LOGO_PROMPT_CHARS = 1000


def build_logo_prompt(logo_prompt: str, palette_hexes: list[str] | None = None) -> str:
    """Combine the visual stage's concept with fixed style constraints."""
    parts = [logo_prompt.strip()]
    if palette_hexes:
        parts.append(f"Use these colors: {', '.join(palette_hexes)}.")
    parts.append(LOGO_STYLE_SUFFIX)
    return " ".join(parts)[:MAX_LOGO_PROMPT_CHARS]
