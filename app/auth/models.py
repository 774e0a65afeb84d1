# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AuthUser(BaseModel):
    """
    Authenticated user extracted from a Supabase JWT.

    Only what the token itself carries; no database lookup.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    email: str | None = None
