# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides the generic row operations the services build on:
# - insert_row: insert one row and return it
# - fetch_row: fetch one row by id (None if missing)
# - fetch_rows: simple filtered listing
#
# The client is created lazily on first use. reset() drops it, so the next
# call builds a fresh one (used after credential or connection failures).
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   row = SupabaseClient.insert_row("brands", {...})
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from lib.utils import ApplicationError, normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code for "no rows" on .single()
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(ApplicationError):
    """
    Error during Supabase operations.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        row = SupabaseClient.insert_row("brands", {"user_id": "...", "title": "..."})
        brand = SupabaseClient.fetch_row("brands", row["id"])
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations; ownership checks
        are done explicitly by the services.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client; the next call creates a new one."""
        if cls._instance is not None:
            logger.info("Resetting Supabase client")
        cls._instance = None

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return normalize_uuid(uuid_value)

    # -------------------------------------------------------------------------
    # Row Operations
    # -------------------------------------------------------------------------

    @classmethod
    def insert_row(cls, table: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a row and return it as stored (with generated id/created_at).

        Args:
            table: Table name
            data: Column values (JSON-serializable)

        Returns:
            Inserted row dict

        Raises:
            SupabaseClientError: If the insert fails or returns nothing
        """
        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .insert(data)
                .execute()
            )

            if response.data:
                row = response.data[0]
                logger.debug(f"Inserted row {row.get('id')} into {table}")
                return row

            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA",
                suggestion=f"Check that the service role can insert into '{table}'",
                details={"table": table},
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code="INSERT_FAILED",
                suggestion=f"Check that the '{table}' table exists and the row matches its schema",
                details={"table": table},
            )

    @classmethod
    def fetch_row(cls, table: str, row_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a single row by id.

        Returns:
            Row dict, or None if not found

        Raises:
            SupabaseClientError: If the query fails
        """
        client = cls.get_client()
        row_id_str = cls._normalize_uuid(row_id)

        try:
            response = (
                client.table(table)
                .select("*")
                .eq("id", row_id_str)
                .single()
                .execute()
            )

            return response.data

        except Exception as e:
            if NO_ROWS_CODE in str(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch from {table}: {e}",
                code="FETCH_FAILED",
                suggestion="Check that the id is correct",
                details={"table": table, "id": row_id_str},
            )

    @classmethod
    def fetch_rows(
        cls,
        table: str,
        filters: dict[str, Any] | None = None,
        limit: int = 50,
        order_by: str = "created_at",
        desc: bool = True,
    ) -> list[dict[str, Any]]:
        """
        Fetch rows matching equality filters.

        Raises:
            SupabaseClientError: If the query fails
        """
        client = cls.get_client()

        try:
            query = client.table(table).select("*")
            for column, value in (filters or {}).items():
                query = query.eq(column, cls._normalize_uuid(value) if isinstance(value, UUID) else value)

            response = query.order(order_by, desc=desc).limit(limit).execute()
            rows = response.data or []

            logger.debug(f"Fetched {len(rows)} rows from {table}")
            return rows

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list {table}: {e}",
                code="FETCH_FAILED",
                details={"table": table, "filters": {k: str(v) for k, v in (filters or {}).items()}},
            )
