# =============================================================================
# agents/document_writer.py - Document Writer Agent
# =============================================================================
# Third generation stage. Assembles the one-page Brand Rider (Markdown)
# from the style and visual outputs, in the requested presentation format.
# =============================================================================

from __future__ import annotations

import logging

from agents.base import BaseAgent, strip_code_fences
from agents.prompts.document_system import (
    build_document_prompt,
    build_document_system_prompt,
)
from app.config import settings
from core.models.brand import (
    BrandDocument,
    PresentationFormat,
    StyleProfile,
    VisualIdentity,
)
from core.progress.cancellation import CancelToken

logger = logging.getLogger(__name__)


class DocumentWriterAgent(BaseAgent):
    """
    Writes the Brand Rider document.

    Example:
        writer = DocumentWriterAgent()
        doc = await writer.assemble(style, visual, PresentationFormat.UFC)
        print(doc.markdown)
    """

    name = "document_writer"

    def __init__(self, client=None, model: str | None = None, temperature: float | None = None):
        super().__init__(
            client=client,
            model=model,
            temperature=temperature if temperature is not None else settings.DOCUMENT_TEMPERATURE,
        )

    async def assemble(
        self,
        style: StyleProfile,
        visual: VisualIdentity,
        format: PresentationFormat | str | None = PresentationFormat.CUSTOM,
        cancel_token: CancelToken | None = None,
    ) -> BrandDocument:
        presentation = PresentationFormat.parse(format)

        content = await self.complete(
            build_document_system_prompt(presentation),
            build_document_prompt(style, visual),
            cancel_token=cancel_token,
        )

        markdown = strip_code_fences(content)

        logger.info(f"Brand Rider assembled ({presentation.value}, {len(markdown)} chars)")
        return BrandDocument(markdown=markdown, format=presentation)
