# =============================================================================
# agents/visual_designer.py - Visual Designer Agent
# =============================================================================
# Second generation stage. Turns style keywords, role tags and the bio into
# a palette, a font pairing and a logo concept prompt.
# =============================================================================

from __future__ import annotations

import logging

from agents.base import BaseAgent
from agents.prompts.visual_system import VISUAL_SYSTEM_PROMPT, build_visual_prompt
from app.config import settings
from core.models.brand import VisualIdentity
from core.progress.cancellation import CancelToken

logger = logging.getLogger(__name__)


class VisualDesignerAgent(BaseAgent):
    """Proposes a visual identity for a brand voice."""

    name = "visual_designer"

    def __init__(self, client=None, model: str | None = None, temperature: float | None = None):
        super().__init__(
            client=client,
            model=model,
            temperature=temperature if temperature is not None else settings.VISUAL_TEMPERATURE,
        )

    async def synthesize(
        self,
        keywords: list[str] | None,
        role_tags: list[str] | None,
        bio: str | None,
        cancel_token: CancelToken | None = None,
    ) -> VisualIdentity:
        """
        Create the visual identity.

        Empty inputs are replaced by neutral defaults in the prompt.
        """
        visual = await self.complete_json(
            VISUAL_SYSTEM_PROMPT,
            build_visual_prompt(keywords, role_tags, bio),
            VisualIdentity,
            cancel_token=cancel_token,
        )

        logger.info(
            f"Visual identity created: {len(visual.palette)} swatches, "
            f"{visual.fonts.heading}/{visual.fonts.body}"
        )
        return visual
