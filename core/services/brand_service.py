# =============================================================================
# core/services/brand_service.py - Brand Persistence
# =============================================================================
# Writes generated brands to the `brands` table and reads them back.
# Separates HTTP and workflow concerns from database details.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import normalize_uuid
from core.models.brand import BrandRecord
from app.config import settings
from app.exceptions import BrandNotFoundError

logger = logging.getLogger(__name__)


class BrandPersistError(SupabaseClientError):
    """The brand row could not be written."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="BRAND_PERSIST_FAILED",
            suggestion="Check that the brands table exists and matches BrandRecord",
            details=details,
        )


class BrandService:
    """
    Service for brand storage operations.

    Provides a clean interface between the workflow / API routes and the
    database.
    """

    @staticmethod
    def create_brand(record: BrandRecord) -> dict[str, Any]:
        """
        Insert a brand row.

        Args:
            record: The assembled BrandRecord

        Returns:
            The inserted row (includes "id")

        Raises:
            BrandPersistError: If the insert fails
        """
        try:
            row = SupabaseClient.insert_row(settings.BRANDS_TABLE, record.to_row())
        except SupabaseClientError as e:
            logger.error(f"Failed to save brand for user {record.user_id}: {e}")
            raise BrandPersistError(
                f"Failed to save brand: {e.message}",
                details={"user_id": str(record.user_id), **e.details},
            ) from e

        if not row.get("id"):
            raise BrandPersistError(
                "Saved brand has no id",
                details={"user_id": str(record.user_id)},
            )

        logger.info(f"Created brand {row['id']} for user {record.user_id}")
        return row

    @staticmethod
    def get_brand(
        brand_id: str | UUID,
        user_id: str | UUID | None = None,
    ) -> dict[str, Any]:
        """
        Get a brand by ID.

        Args:
            brand_id: The brand UUID
            user_id: If given, the brand must belong to this user

        Returns:
            Brand row dict

        Raises:
            BrandNotFoundError: Missing, or owned by another user
        """
        brand_id_str = normalize_uuid(brand_id)
        row = SupabaseClient.fetch_row(settings.BRANDS_TABLE, brand_id_str)

        if row is None:
            raise BrandNotFoundError(brand_id_str)

        # Don't reveal that another user's brand exists
        if user_id is not None and str(row.get("user_id")) != normalize_uuid(user_id):
            raise BrandNotFoundError(brand_id_str)

        return row

    @staticmethod
    def list_brands(user_id: str | UUID, limit: int = 50) -> list[dict[str, Any]]:
        """List a user's brands, newest first."""
        return SupabaseClient.fetch_rows(
            settings.BRANDS_TABLE,
            filters={"user_id": normalize_uuid(user_id)},
            limit=limit,
        )
