# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .brand_service import BrandService, BrandPersistError
from .storage_service import StorageService

__all__ = [
    "BrandService",
    "BrandPersistError",
    "StorageService",
]
