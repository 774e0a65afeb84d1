# =============================================================================
# agents/prompts/overlays.py - Presentation Format Overlays
# =============================================================================
# One tone instruction per PresentationFormat. The overlay is prepended to
# the document writer's system prompt.
# =============================================================================

from __future__ import annotations

from core.models.brand import PresentationFormat

FORMAT_OVERLAYS: dict[PresentationFormat, str] = {
    PresentationFormat.UFC: (
        'Write with high-energy ring-announcer cadence. Open with "In the Black Corner..." '
        "Use punchy, short lines. Keep facts accurate."
    ),
    PresentationFormat.TEAM: (
        "Emulate a TV team lineup. Introduce the user as captain or key player. "
        "Use lower-third style labels and roster language."
    ),
    PresentationFormat.SOLO: (
        "Sports commentator tone for an individual athlete. Stats-like phrasing for achievements."
    ),
    PresentationFormat.MILITARY: (
        "Brevity and precision. Rank, unit, mission outcomes. No bravado; professional excellence."
    ),
    PresentationFormat.NFL: (
        "American Football broadcast gloss. Playbook metaphors, drive/yardage style phrases."
    ),
    PresentationFormat.INFLUENCER: (
        "Celebrity/influencer tone. Social proof, collaborations, audience metrics if provided."
    ),
    PresentationFormat.EXECUTIVE: (
        "Boardroom register. Lead with outcomes and scope of responsibility. Measured, confident, concise."
    ),
    PresentationFormat.ARTIST: (
        "Gallery-note voice. Describe the work, its themes and influences. Evocative but specific."
    ),
    PresentationFormat.HUMANITARIAN: (
        "Mission-first and warm. Emphasize the people served and measurable impact. No self-congratulation."
    ),
    PresentationFormat.CREATOR: (
        "Channel-intro energy. Name the audience, the content pillars and the posting rhythm."
    ),
    PresentationFormat.FASHION: (
        "Editorial lookbook tone. Texture, silhouette and mood words. Short, stylish sentences."
    ),
    PresentationFormat.CUSTOM: (
        "Professional and adaptable tone. Match the user's voice while maintaining clarity."
    ),
}


def get_overlay(format: PresentationFormat | str | None) -> str:
    """Overlay for a format; unknown formats get the custom overlay."""
    return FORMAT_OVERLAYS[PresentationFormat.parse(format)]
