# =============================================================================
# agents/base.py - Shared OpenAI Plumbing for Generation Agents
# =============================================================================
# Every generation agent talks to OpenAI the same way:
# 1. Get the shared AsyncOpenAI client (created lazily, rebuilt after
#    authentication failures)
# 2. Call chat completions, in JSON mode when a structured payload is wanted
# 3. Strip markdown code fences the model sometimes adds anyway
# 4. Validate the payload with Pydantic at the boundary
#
# Errors are mapped to AgentError codes so the pipeline can show a message
# the user can act on ("Rate limit exceeded. Please try again later.").
#
# Usage:
#   class MyAgent(BaseAgent):
#       async def run(self, text):
#           return await self.complete_json(system, text, MyModel)
# =============================================================================

from __future__ import annotations

import json
import logging
import re
from typing import Any, TypeVar

import openai
from openai import AsyncOpenAI
from pydantic import BaseModel, ValidationError

from app.config import settings
from core.progress.cancellation import CancelToken
from lib.lazy_resource import LazyResource
from lib.utils import ApplicationError

# Set up logging for this module
logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
PAYMENT_REQUIRED_MESSAGE = "Payment required. Please add credits to your workspace."
EMPTY_RESPONSE_MESSAGE = "No content in AI response"

# ```json ... ``` (or ```markdown, or bare ```) around the whole response
CODE_FENCE_START = re.compile(r"^```(?:json|markdown|md)?[ \t]*\n?", re.IGNORECASE)
CODE_FENCE_END = re.compile(r"\n?```\s*$")


# =============================================================================
# Exceptions
# =============================================================================

class AgentError(ApplicationError):
    """
    Error from a generation agent.

    The message is what the user sees on the failed step, so it is written
    for them; technical context goes into details.
    """

    def __init__(
        self,
        message: str,
        code: str = "AGENT_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)


class MalformedResponseError(AgentError):
    """The model answered, but not with the payload we asked for."""

    def __init__(
        self,
        message: str,
        suggestion: str | None = "Try again. If it keeps happening, try a different model.",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message,
            code="MALFORMED_UPSTREAM_RESPONSE",
            suggestion=suggestion,
            details=details,
        )


# =============================================================================
# Client
# =============================================================================

def create_openai_resource() -> LazyResource[AsyncOpenAI]:
    """
    Lazily created AsyncOpenAI client.

    Create one per event loop: the underlying HTTP connection pool is tied
    to the loop that first used it.
    """
    return LazyResource(
        lambda: AsyncOpenAI(
            api_key=settings.OPENAI_API_KEY,
            timeout=settings.OPENAI_TIMEOUT_SECONDS,
        ),
        name="openai",
    )


def strip_code_fences(text: str) -> str:
    """
    Remove a markdown code fence wrapped around the whole response.

    Example:
        strip_code_fences('```json\\n{"a": 1}\\n```')  # '{"a": 1}'
    """
    cleaned = text.strip()
    cleaned = CODE_FENCE_START.sub("", cleaned)
    cleaned = CODE_FENCE_END.sub("", cleaned)
    return cleaned.strip()


def map_openai_error(error: Exception, model: str) -> AgentError:
    """Translate an OpenAI SDK exception into an AgentError."""
    details = {"model": model, "error": str(error)}

    if isinstance(error, openai.RateLimitError):
        return AgentError(
            RATE_LIMIT_MESSAGE,
            code="RATE_LIMITED",
            suggestion="Wait a minute before generating again",
            details=details,
        )

    if isinstance(error, openai.AuthenticationError):
        return AgentError(
            "AI service authentication failed",
            code="OPENAI_AUTH_FAILED",
            suggestion="Check OPENAI_API_KEY in your .env file",
            details=details,
        )

    if isinstance(error, openai.APIStatusError):
        if error.status_code == 402:
            return AgentError(
                PAYMENT_REQUIRED_MESSAGE,
                code="PAYMENT_REQUIRED",
                suggestion="Add credits to the OpenAI account",
                details=details,
            )
        details["status_code"] = error.status_code
        return AgentError(
            f"AI service error: {error.status_code}",
            code="OPENAI_ERROR",
            suggestion="Try again later",
            details=details,
        )

    if isinstance(error, openai.APITimeoutError):
        return AgentError(
            "AI service timed out",
            code="OPENAI_ERROR",
            suggestion="Try again, or raise OPENAI_TIMEOUT_SECONDS",
            details=details,
        )

    return AgentError(
        f"AI service error: {error}",
        code="OPENAI_ERROR",
        suggestion="Check your network connection and try again",
        details=details,
    )


# =============================================================================
# Base Agent
# =============================================================================

class BaseAgent:
    """
    Common behavior for the generation agents.

    Attributes:
        model: OpenAI model ID
        temperature: Generation temperature
        client: LazyResource holding the AsyncOpenAI client (shared between
            agents of one workflow run)
    """

    name = "agent"

    def __init__(
        self,
        client: LazyResource[AsyncOpenAI] | None = None,
        model: str | None = None,
        temperature: float | None = None,
    ):
        self.client = client or create_openai_resource()
        self.model = model or settings.OPENAI_MODEL
        self.temperature = temperature

        logger.debug(f"{type(self).__name__} initialized with model={self.model}, temp={self.temperature}")

    # -------------------------------------------------------------------------
    # OpenAI Calls
    # -------------------------------------------------------------------------

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        json_mode: bool = False,
        cancel_token: CancelToken | None = None,
    ) -> str:
        """
        Run one chat completion and return the message content.

        Raises:
            PipelineCancelledError: If the token was cancelled before the call
            AgentError: On any API failure or an empty response
        """
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        client = await self.client.get()

        request: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }
        if self.temperature is not None:
            request["temperature"] = self.temperature
        if json_mode:
            request["response_format"] = {"type": "json_object"}

        try:
            response = await client.chat.completions.create(**request)
        except openai.OpenAIError as e:
            if isinstance(e, openai.AuthenticationError):
                self.client.invalidate()
            mapped = map_openai_error(e, self.model)
            logger.warning(f"{self.name} call failed: [{mapped.code}] {e}")
            raise mapped from e

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise AgentError(
                EMPTY_RESPONSE_MESSAGE,
                code="EMPTY_RESPONSE",
                suggestion="Try again",
                details={"model": self.model},
            )

        logger.debug(f"{self.name} response: {content[:200]}...")
        return content

    async def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        response_model: type[ModelT],
        cancel_token: CancelToken | None = None,
    ) -> ModelT:
        """JSON-mode completion validated against response_model."""
        content = await self.complete(
            system_prompt,
            user_prompt,
            json_mode=True,
            cancel_token=cancel_token,
        )
        return self.parse_response(content, response_model)

    # -------------------------------------------------------------------------
    # Response Parsing
    # -------------------------------------------------------------------------

    def parse_response(self, response_text: str, response_model: type[ModelT]) -> ModelT:
        """
        Parse model output into response_model.

        Handles:
        - Markdown code fences around the JSON
        - JSON parsing errors
        - Pydantic validation errors

        Raises:
            MalformedResponseError: If parsing or validation fails
        """
        cleaned = strip_code_fences(response_text)

        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            raise MalformedResponseError(
                f"AI returned invalid JSON: {e}",
                details={"agent": self.name, "raw_response": response_text[:500]},
            )

        try:
            return response_model.model_validate(data)
        except ValidationError as e:
            errors = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
            raise MalformedResponseError(
                f"AI response is missing required fields: {'; '.join(errors)}",
                details={"agent": self.name, "validation_errors": errors},
            )
