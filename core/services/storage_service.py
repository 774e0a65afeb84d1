# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles generated-asset uploads to Supabase Storage. Logos live in the
# public LOGO_BUCKET under {user_id}/{filename}.
# =============================================================================

import logging
import time

from lib.supabase_client import SupabaseClient
from app.config import settings
from app.exceptions import StorageUploadError

logger = logging.getLogger(__name__)


class StorageService:
    """
    Service for Supabase Storage operations.

    Handles uploading generated logos and resolving their public URLs.
    """

    @staticmethod
    def build_logo_path(user_id: str, filename: str | None = None) -> str:
        """logos/{user_id}/logo-{millis}.png unless a filename is given."""
        name = filename or f"logo-{int(time.time() * 1000)}.png"
        return f"{user_id}/{name}"

    @staticmethod
    def upload_logo(
        user_id: str,
        content: bytes,
        filename: str | None = None,
        content_type: str = "image/png",
    ) -> str:
        """
        Upload a logo image and return its public URL.

        Args:
            user_id: Owner's user ID (first path segment)
            content: Image bytes
            filename: Optional filename (default: timestamped PNG)
            content_type: MIME type stored with the object

        Returns:
            Public URL of the uploaded file

        Raises:
            StorageUploadError: If upload fails or the content is empty
        """
        if not content:
            raise StorageUploadError("Logo image is empty")

        client = SupabaseClient.get_client()
        path = StorageService.build_logo_path(str(user_id), filename)

        try:
            client.storage.from_(settings.LOGO_BUCKET).upload(
                path=path,
                file=content,
                file_options={"content-type": content_type, "upsert": "true"}
            )
            logger.info(f"Uploaded logo to storage: {settings.LOGO_BUCKET}/{path}")

        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

        return StorageService.get_public_url(path)

    @staticmethod
    def get_public_url(storage_path: str) -> str:
        """
        Get a public URL for a file in the logo bucket.

        Raises:
            StorageUploadError: If the URL can't be resolved
        """
        client = SupabaseClient.get_client()

        try:
            return client.storage.from_(settings.LOGO_BUCKET).get_public_url(storage_path)
        except Exception as e:
            logger.error(f"Failed to get public URL: {e}")
            raise StorageUploadError(f"Uploaded, but no public URL: {e}")

    @staticmethod
    def delete_logo(storage_path: str) -> bool:
        """
        Delete a logo from storage.

        Returns:
            True if deleted successfully
        """
        client = SupabaseClient.get_client()

        try:
            client.storage.from_(settings.LOGO_BUCKET).remove([storage_path])
            logger.info(f"Deleted logo from storage: {storage_path}")
            return True

        except Exception as e:
            logger.error(f"Failed to delete logo: {e}")
            return False
