# =============================================================================
# agents/prompts/document_system.py - Document Writer Prompt
# =============================================================================
# Prompts for assembling the one-page Brand Rider. The output is Markdown,
# so this stage does not use JSON mode.
# =============================================================================

from __future__ import annotations

import json

from agents.prompts.overlays import get_overlay
from core.models.brand import PresentationFormat, StyleProfile, VisualIdentity

DOCUMENT_INSTRUCTIONS = (
    "Compose a 1-page Brand Rider. Brevity, clarity, scannability. Output Markdown."
)

DOCUMENT_STRUCTURE = """# Brand Rider

## Tagline
[Memorable one-liner from style data]

## Voice & Tone
- [Bullet points from tone data]

## Signature Phrases
- [Key phrases that define the voice]

## Strengths & Watch-outs
**Strengths:**
- [Bullet list from style data]

**Watch-outs:**
- [Potential weaknesses from style data]

## Color & Type
[Describe the palette and fonts from visual data]

## Bio
[Use the bio from style data, 80-120 words]

## Usage Examples
1. **Email opener**: [Example using the voice]
2. **LinkedIn about**: [Example using the voice]
3. **Website hero**: [Example using the voice]"""


def build_document_system_prompt(format: PresentationFormat | str | None) -> str:
    """Format overlay followed by the fixed instructions."""
    return f"{get_overlay(format)}\n\n{DOCUMENT_INSTRUCTIONS}"


def build_document_prompt(style: StyleProfile, visual: VisualIdentity) -> str:
    """User message carrying both stage outputs as pretty-printed JSON."""
    style_json = json.dumps(style.model_dump(), indent=2)
    visual_json = json.dumps(visual.model_dump(), indent=2)

    return (
        "Create a Brand Rider using this data:\n\n"
        f"Style: {style_json}\n"
        f"Visual: {visual_json}\n\n"
        f"Structure:\n{DOCUMENT_STRUCTURE}"
    )
