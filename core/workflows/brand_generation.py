# =============================================================================
# core/workflows/brand_generation.py - Brand Generation Workflow
# =============================================================================
# Wires the generation agents into a MultiStepRunner:
#
#   style -> visual -> document -> [logo] -> save
#
# Each step reads what the previous steps produced from a per-run
# GenerationContext. The brand row is written by the last step only, so a
# failure anywhere earlier leaves nothing in the database. A logo that was
# uploaded before a failed save stays in storage (it is unreferenced).
#
# Usage:
#   workflow = BrandGenerationWorkflow(on_change=publish_snapshot)
#   outcome = await workflow.run(request, user_id)
#   if outcome.success:
#       print(outcome.brand_id)
# =============================================================================

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol
from uuid import UUID

from agents.base import create_openai_resource
from agents.document_writer import DocumentWriterAgent
from agents.logo_designer import LogoDesignerAgent
from agents.style_analyst import StyleAnalystAgent
from agents.visual_designer import VisualDesignerAgent
from app.config import settings
from core.models.brand import (
    BrandDocument,
    BrandRecord,
    StyleProfile,
    VisualIdentity,
)
from core.models.generation import GenerateBrandRequest, GenerationOutcome
from core.progress.cancellation import CancelToken
from core.progress.loading_state import Announcer, Listener
from core.progress.multi_step import MultiStepRunner, StepExecutor
from core.services.brand_service import BrandService
from core.services.storage_service import StorageService
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationStep:
    id: str
    label: str
    loading_message: str
    success_message: str | None = None
    optional: bool = False


GENERATION_STEPS: tuple[GenerationStep, ...] = (
    GenerationStep("style", "Style analysis", "Analyzing your writing style..."),
    GenerationStep("visual", "Visual identity", "Creating visual identity..."),
    GenerationStep("document", "Brand Rider", "Assembling your Brand Rider..."),
    GenerationStep("logo", "Logo", "Designing your logo...", optional=True),
    GenerationStep("save", "Save", "Saving your brand..."),
)


def steps_for(request: GenerateBrandRequest) -> list[GenerationStep]:
    """The steps a request runs; the logo step only when asked for."""
    return [s for s in GENERATION_STEPS if not s.optional or request.generate_logo]


# =============================================================================
# Collaborator Interfaces
# =============================================================================

class BrandStore(Protocol):
    def create_brand(self, record: BrandRecord) -> dict[str, Any]: ...


class LogoStorage(Protocol):
    def upload_logo(self, user_id: str, content: bytes, filename: str | None = None) -> str: ...


# =============================================================================
# Per-Run State
# =============================================================================

@dataclass
class GenerationContext:
    """What the steps of one run hand to each other."""

    request: GenerateBrandRequest
    user_id: str
    cancel_token: CancelToken
    style: StyleProfile | None = None
    visual: VisualIdentity | None = None
    document: BrandDocument | None = None
    logo_url: str | None = None
    brand: dict[str, Any] = field(default_factory=dict)

    def require(self, name: str) -> Any:
        value = getattr(self, name)
        if value is None:
            raise RuntimeError(f"Step output '{name}' is missing")
        return value


# =============================================================================
# Workflow
# =============================================================================

class BrandGenerationWorkflow:
    """
    Runs one brand generation end to end.

    Every collaborator can be injected; by default the agents share one
    lazily created OpenAI client and the Supabase services are used.

    Attributes:
        runner: Runner of the most recent run (None before the first run)
    """

    def __init__(
        self,
        style_analyst: StyleAnalystAgent | None = None,
        visual_designer: VisualDesignerAgent | None = None,
        document_writer: DocumentWriterAgent | None = None,
        logo_designer: LogoDesignerAgent | None = None,
        brand_store: BrandStore | None = None,
        storage: LogoStorage | None = None,
        announcer: Announcer | None = None,
        on_change: Listener | None = None,
        auto_reset_delay: float | None = None,
        abort_on: tuple[type[BaseException], ...] = (),
    ):
        openai_client = create_openai_resource()

        self.style_analyst = style_analyst or StyleAnalystAgent(client=openai_client)
        self.visual_designer = visual_designer or VisualDesignerAgent(client=openai_client)
        self.document_writer = document_writer or DocumentWriterAgent(client=openai_client)
        self.logo_designer = logo_designer or LogoDesignerAgent(client=openai_client)
        self.brand_store = brand_store or BrandService()
        self.storage = storage or StorageService()

        self.announcer = announcer
        self.on_change = on_change
        self.abort_on = abort_on
        self.auto_reset_delay = (
            auto_reset_delay if auto_reset_delay is not None else settings.LOADING_AUTO_RESET_SECONDS
        )
        self.runner: MultiStepRunner | None = None

    async def run(
        self,
        request: GenerateBrandRequest,
        user_id: str | UUID,
        cancel_token: CancelToken | None = None,
    ) -> GenerationOutcome:
        """
        Generate and persist a brand.

        Never raises for a failing step; the failure is reported in the
        outcome (failed_step, error).

        Raises:
            asyncio.CancelledError: If the surrounding task is cancelled
            Any type in `abort_on`: Raised inside a step (e.g. a worker time limit)
        """
        ctx = GenerationContext(
            request=request,
            user_id=normalize_uuid(user_id),
            cancel_token=cancel_token or CancelToken(),
        )
        steps = steps_for(request)

        self.runner = MultiStepRunner(
            [(s.id, s.label) for s in steps],
            announcer=self.announcer,
            on_change=self.on_change,
            auto_reset_delay=self.auto_reset_delay,
            abort_on=self.abort_on,
        )

        handlers = {
            "style": self._analyze_style,
            "visual": self._synthesize_visual,
            "document": self._assemble_document,
            "logo": self._generate_logo,
            "save": self._save_brand,
        }
        executors = [
            StepExecutor(
                step_id=s.id,
                executor=lambda handler=handlers[s.id]: handler(ctx),
                loading_message=s.loading_message,
                success_message=s.success_message,
            )
            for s in steps
        ]

        logger.info(f"Generating brand for user {ctx.user_id} ({request.format.value}, logo={request.generate_logo})")

        success = await self.runner.execute_steps(executors, cancel_token=ctx.cancel_token)
        snapshot = self.runner.snapshot()

        if success:
            logger.info(f"Brand {ctx.brand['id']} generated for user {ctx.user_id}")
        else:
            failed = snapshot.failed_step
            logger.warning(
                f"Brand generation failed for user {ctx.user_id} at "
                f"'{failed.id if failed else '?'}': {failed.message if failed else ''}"
            )

        return GenerationOutcome.from_snapshot(
            snapshot,
            success=success,
            brand_id=ctx.brand.get("id"),
            logo_url=ctx.logo_url,
            cancelled=self.runner.cancelled,
        )

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    async def _analyze_style(self, ctx: GenerationContext) -> None:
        ctx.style = await self.style_analyst.analyze(
            ctx.request.corpus,
            cancel_token=ctx.cancel_token,
        )

    async def _synthesize_visual(self, ctx: GenerationContext) -> None:
        style: StyleProfile = ctx.require("style")
        ctx.visual = await self.visual_designer.synthesize(
            style.keywords,
            ctx.request.role_tags,
            style.bio,
            cancel_token=ctx.cancel_token,
        )

    async def _assemble_document(self, ctx: GenerationContext) -> None:
        ctx.document = await self.document_writer.assemble(
            ctx.require("style"),
            ctx.require("visual"),
            ctx.request.format,
            cancel_token=ctx.cancel_token,
        )

    async def _generate_logo(self, ctx: GenerationContext) -> None:
        visual: VisualIdentity = ctx.require("visual")
        image = await self.logo_designer.generate(
            visual.logo_prompt,
            [swatch.hex for swatch in visual.palette],
            cancel_token=ctx.cancel_token,
        )

        ctx.cancel_token.raise_if_cancelled()
        # Supabase client is synchronous
        ctx.logo_url = await asyncio.to_thread(self.storage.upload_logo, ctx.user_id, image)

    async def _save_brand(self, ctx: GenerationContext) -> None:
        record = BrandRecord.from_generation(
            user_id=ctx.user_id,
            style=ctx.require("style"),
            visual=ctx.require("visual"),
            document=ctx.require("document"),
            upload_ids=ctx.request.upload_ids,
            logo_url=ctx.logo_url,
        )

        ctx.cancel_token.raise_if_cancelled()
        ctx.brand = await asyncio.to_thread(self.brand_store.create_brand, record)
