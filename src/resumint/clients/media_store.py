"""Supabase storage wrapper for profile photos."""

from __future__ import annotations

import logging
import os
from pathlib import PurePath

from supabase import Client, create_client

from resumint.errors import RemoteServiceError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


def user_prefix(user_id: str) -> str:
    return f"user-{user_id}/"


class MediaStore:
    """Uploads profile photos under a per-user prefix and returns public URLs."""

    def __init__(
        self,
        client: Client,
        bucket: str = "profile-pictures",
        max_upload_bytes: int = 5 * 1024 * 1024,
    ):
        self.client = client
        self.bucket = bucket
        self.max_upload_bytes = max_upload_bytes

    @classmethod
    def from_env(cls, bucket: str = "profile-pictures", **kwargs) -> MediaStore:
        url = os.environ.get("SUPABASE_URL")
        key = os.environ.get("SUPABASE_KEY")
        if not url or not key:
            raise ValueError(
                "Supabase credentials required. Set SUPABASE_URL and SUPABASE_KEY env vars."
            )
        return cls(create_client(url, key), bucket=bucket, **kwargs)

    def _storage(self):
        return self.client.storage.from_(self.bucket)

    def upload_profile_photo(
        self,
        user_id: str,
        data: bytes,
        filename: str,
        content_type: str,
    ) -> str:
        """Replace the user's profile photo and return its public URL.

        Existing files under the user's prefix are removed first so no
        orphaned avatars remain.
        """
        if content_type not in ALLOWED_CONTENT_TYPES:
            raise ValidationError(f"Unsupported image type: {content_type}")
        if not data:
            raise ValidationError("No file uploaded")
        if len(data) > self.max_upload_bytes:
            raise ValidationError(
                f"Image is too large ({len(data)} bytes, limit {self.max_upload_bytes})"
            )

        ext = PurePath(filename).suffix.lstrip(".").lower() or ALLOWED_CONTENT_TYPES[content_type]
        path = f"{user_prefix(user_id)}avatar.{ext}"

        self.delete_profile_photos(user_id)
        logger.info("Uploading profile photo: %s (%d bytes)", path, len(data))
        try:
            self._storage().upload(
                path=path,
                file=data,
                file_options={
                    "cache-control": "3600",
                    "content-type": content_type,
                    "upsert": "true",
                },
            )
            return self._storage().get_public_url(path)
        except Exception as exc:
            logger.error("Profile photo upload failed", exc_info=True)
            raise RemoteServiceError(f"Failed to upload image to storage: {exc}") from exc

    def delete_profile_photos(self, user_id: str) -> int:
        """Remove every file under the user's prefix. Returns the number removed."""
        prefix = user_prefix(user_id)
        try:
            files = self._storage().list(prefix.rstrip("/")) or []
            paths = [f"{prefix}{f['name']}" for f in files if f.get("name")]
            if paths:
                self._storage().remove(paths)
        except Exception as exc:
            logger.error("Profile photo cleanup failed", exc_info=True)
            raise RemoteServiceError(f"Failed to remove existing images: {exc}") from exc
        logger.debug("Removed %d file(s) under %s", len(paths), prefix)
        return len(paths)
