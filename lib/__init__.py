# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - lazy_resource.py: Lazily created, invalidatable shared objects
# - utils.py: Shared utilities (error handling, UUID normalization)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.lazy_resource import LazyResource
from lib.utils import ApplicationError, describe_error, normalize_uuid

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Resources
    "LazyResource",
    # Utils
    "ApplicationError",
    "describe_error",
    "normalize_uuid",
]
