# =============================================================================
# agents/logo_designer.py - Logo Designer Agent
# =============================================================================
# Optional generation stage. Renders the visual stage's logo concept with
# the OpenAI images API and returns PNG bytes for upload to storage.
# =============================================================================

from __future__ import annotations

import base64
import binascii
import logging

import openai

from agents.base import AgentError, BaseAgent, EMPTY_RESPONSE_MESSAGE, map_openai_error
from agents.prompts.logo_system import build_logo_prompt
from app.config import settings
from core.progress.cancellation import CancelToken

logger = logging.getLogger(__name__)

LOGO_SIZE = "1024x1024"


class LogoDesignerAgent(BaseAgent):
    """Generates a logo image from a text concept."""

    name = "logo_designer"

    def __init__(self, client=None, model: str | None = None, size: str = LOGO_SIZE):
        super().__init__(client=client, model=model or settings.OPENAI_IMAGE_MODEL)
        self.size = size

    async def generate(
        self,
        logo_prompt: str,
        palette_hexes: list[str] | None = None,
        cancel_token: CancelToken | None = None,
    ) -> bytes:
        """
        Generate a logo.

        Returns:
            PNG image bytes

        Raises:
            AgentError: API failure or an empty/undecodable image
        """
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        client = await self.client.get()
        prompt = build_logo_prompt(logo_prompt, palette_hexes)

        try:
            response = await client.images.generate(
                model=self.model,
                prompt=prompt,
                size=self.size,
                n=1,
                response_format="b64_json",
            )
        except openai.OpenAIError as e:
            if isinstance(e, openai.AuthenticationError):
                self.client.invalidate()
            mapped = map_openai_error(e, self.model)
            logger.warning(f"{self.name} call failed: [{mapped.code}] {e}")
            raise mapped from e

        encoded = response.data[0].b64_json if response.data else None
        if not encoded:
            raise AgentError(
                EMPTY_RESPONSE_MESSAGE,
                code="EMPTY_RESPONSE",
                suggestion="Try again",
                details={"model": self.model},
            )

        try:
            image = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise AgentError(
                "AI returned an unreadable image",
                code="MALFORMED_UPSTREAM_RESPONSE",
                suggestion="Try again",
                details={"model": self.model, "error": str(e)},
            )

        logger.info(f"Logo generated ({len(image)} bytes)")
        return image
