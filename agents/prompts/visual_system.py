# =============================================================================
# agents/prompts/visual_system.py - Visual Designer Prompt
# =============================================================================
# Prompts for the visual synthesis stage: a 5-swatch palette, a Google
# Fonts pairing and a logo concept prompt.
# =============================================================================

from __future__ import annotations

# Used when the style stage produced nothing usable for a field
DEFAULT_KEYWORD = "professional"
DEFAULT_ROLE = "creator"
DEFAULT_BIO = "A professional creator"

VISUAL_SYSTEM_PROMPT = (
    "You are a brand designer. Propose a color palette (5 swatches, hex), "
    "font pairings (Google Fonts), and a logo concept prompt. "
    "Output valid JSON only, no markdown."
)

VISUAL_OUTPUT_SCHEMA = """{
  "palette": [
    {"name": "Primary", "hex": "#ff4f00"},
    {"name": "Secondary", "hex": "#89bbfe"},
    {"name": "Accent", "hex": "#ffe066"},
    {"name": "Dark", "hex": "#111316"},
    {"name": "Light", "hex": "#ffffff"}
  ],
  "fonts": {
    "heading": "Poppins",
    "body": "Inter"
  },
  "logo_prompt": "A minimal, scalable logo mark. High contrast, geometric style, professional."
}"""


def build_visual_prompt(
    keywords: list[str] | None,
    role_tags: list[str] | None,
    bio: str | None,
) -> str:
    """Build the user message for visual synthesis; empty inputs get defaults."""
    keyword_text = ", ".join(k for k in (keywords or []) if k) or DEFAULT_KEYWORD
    role_text = ", ".join(r for r in (role_tags or []) if r) or DEFAULT_ROLE
    bio_text = (bio or "").strip() or DEFAULT_BIO

    return (
        "Create visual brand identity for:\n"
        f"Keywords: {keyword_text}\n"
        f"Roles: {role_text}\n"
        f"Bio: {bio_text}\n\n"
        f"Return JSON:\n{VISUAL_OUTPUT_SCHEMA}"
    )
