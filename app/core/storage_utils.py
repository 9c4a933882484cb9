# app/core/storage_utils.py
import uuid

from fastapi import HTTPException, status

from app.core.config import get_settings
from app.core.supabase_client import supabase_admin

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB per image

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


def validate_image(content_type: str | None, file_bytes: bytes) -> str:
    """
    Check content type + size of an uploaded image.

    Returns:
        File extension to use for the stored object (e.g. "png").

    Raises:
        HTTPException(400): unsupported / missing content type.
        HTTPException(413): file larger than MAX_IMAGE_BYTES.
    """
    if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unsupported image type. Allowed: JPEG, PNG, WEBP.",
        )

    if len(file_bytes) > MAX_IMAGE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Image too large (max 5MB).",
        )

    return ALLOWED_IMAGE_CONTENT_TYPES[content_type]


def generate_filename(ext: str) -> str:
    """Random object name, e.g. "9f1c...e2.png"."""
    return f"{uuid.uuid4()}.{ext}"


class AssetStorage:
    """
    Thin wrapper around a Supabase Storage bucket.

    Services receive an instance instead of calling Supabase directly,
    so the upload collaborator can be swapped (tests use an in-memory fake).
    The Supabase client is only created on first use.
    """

    def __init__(self, bucket: str | None = None):
        self.bucket = bucket or get_settings().STORAGE_BUCKET

    def _bucket(self):
        return supabase_admin().storage.from_(self.bucket)

    def upload(self, path: str, file_bytes: bytes, content_type: str) -> str:
        """
        Store bytes at `path` and return the object's public URL.

        Existing objects at the same path are replaced (upsert). Client
        errors propagate to the caller.
        """
        self._bucket().upload(
            path,
            file_bytes,
            {"upsert": "true", "content-type": content_type},
        )
        return self._bucket().get_public_url(path)

    def extract_path(self, url: str) -> str | None:
        """
        Bucket-relative path of one of our public URLs, else None.

            https://<proj>.supabase.co/storage/v1/object/public/<bucket>/products/p/a.png
            -> 'products/p/a.png'
        """
        marker = f"/storage/v1/object/public/{self.bucket}/"
        idx = url.find(marker)
        if idx == -1:
            return None
        return url[idx + len(marker) :].split("?", 1)[0]

    def delete_public_url(self, url: str) -> None:
        # foreign URLs (placeholders, external CDNs) are left alone
        path = self.extract_path(url)
        if path:
            self._bucket().remove([path])
