# =============================================================================
# agents/prompts/style_system.py - Style Analyst Prompt
# =============================================================================
# System and user prompts for the style analysis stage.
#
# The model reads the user's corpus and returns a StyleProfile as JSON.
# The output schema is spelled out in the user prompt so JSON mode has a
# concrete shape to follow.
# =============================================================================

from __future__ import annotations

STYLE_SYSTEM_PROMPT = """
<role>
You analyze user-provided text to distill a brand voice that is practical, witty, and focused on action.
</role>

<rules>
- Base every observation on the text itself; do not invent credentials or achievements
- Signature phrases should be short and reusable
- The bio is 80-120 words, written in third person
- Output valid JSON only, no markdown formatting
</rules>
""".strip()


STYLE_OUTPUT_SCHEMA = """{
  "tone": {
    "adjectives": ["action-oriented", "witty", "concise"],
    "dos": ["Use active voice", "Keep it real"],
    "donts": ["Avoid jargon", "No passive voice"]
  },
  "signature_phrases": ["phrase1", "phrase2", "phrase3"],
  "strengths": ["clarity", "energy", "authenticity"],
  "weaknesses": ["may be too casual for formal contexts"],
  "tagline": "A memorable one-liner",
  "bio": "80-120 word bio capturing the essence"
}"""


def build_style_prompt(corpus: str) -> str:
    """
    Build the user message for style analysis.

    Args:
        corpus: The (already trimmed and truncated) writing sample

    Returns:
        User prompt string
    """
    return (
        "Analyze this text corpus and extract the brand voice:\n\n"
        f"<corpus>\n{corpus}\n</corpus>\n\n"
        f"Return JSON with this exact structure:\n{STYLE_OUTPUT_SCHEMA}"
    )
