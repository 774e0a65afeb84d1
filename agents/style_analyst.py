# =============================================================================
# agents/style_analyst.py - Style Analyst Agent
# =============================================================================
# First generation stage. Reads the user's writing corpus and returns a
# StyleProfile: tone, signature phrases, strengths, weaknesses, tagline
# and bio.
#
# Usage:
#   from agents.style_analyst import StyleAnalystAgent
#   style = await StyleAnalystAgent().analyze(corpus)
# =============================================================================

from __future__ import annotations

import logging

from agents.base import AgentError, BaseAgent
from agents.prompts.style_system import STYLE_SYSTEM_PROMPT, build_style_prompt
from app.config import settings
from core.models.brand import StyleProfile
from core.progress.cancellation import CancelToken

logger = logging.getLogger(__name__)


class InsufficientCorpusError(AgentError):
    """The corpus is too short to say anything useful about its style."""

    def __init__(self, length: int, minimum: int):
        super().__init__(
            f"Corpus must be at least {minimum} characters",
            code="CORPUS_TOO_SHORT",
            suggestion="Paste a longer writing sample or upload another document",
            details={"length": length, "minimum": minimum},
        )


def prepare_corpus(
    corpus: str | None,
    min_chars: int | None = None,
    max_chars: int | None = None,
) -> str:
    """
    Trim and length-check a corpus.

    Raises:
        InsufficientCorpusError: If fewer than min_chars remain after trimming
    """
    minimum = min_chars if min_chars is not None else settings.MIN_CORPUS_CHARS
    maximum = max_chars if max_chars is not None else settings.MAX_CORPUS_CHARS

    text = (corpus or "").strip()
    if len(text) < minimum:
        raise InsufficientCorpusError(len(text), minimum)

    if len(text) > maximum:
        logger.info(f"Truncating corpus from {len(text)} to {maximum} characters")
        text = text[:maximum]

    return text


class StyleAnalystAgent(BaseAgent):
    """
    Distills a brand voice from a writing sample.

    Example:
        agent = StyleAnalystAgent()
        style = await agent.analyze("I build products that ship...")
        print(style.tagline)
    """

    name = "style_analyst"

    def __init__(self, client=None, model: str | None = None, temperature: float | None = None):
        super().__init__(
            client=client,
            model=model,
            temperature=temperature if temperature is not None else settings.STYLE_TEMPERATURE,
        )

    async def analyze(
        self,
        corpus: str,
        cancel_token: CancelToken | None = None,
    ) -> StyleProfile:
        """
        Analyze a corpus.

        Raises:
            InsufficientCorpusError: Corpus under the minimum length
            AgentError: API failure or malformed response
        """
        text = prepare_corpus(corpus)
        logger.info(f"Analyzing style of {len(text)} character corpus")

        style = await self.complete_json(
            STYLE_SYSTEM_PROMPT,
            build_style_prompt(text),
            StyleProfile,
            cancel_token=cancel_token,
        )

        logger.info(f"Style analyzed: tagline='{style.tagline[:50]}'")
        return style
