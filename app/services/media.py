"""Profile image validation and storage."""

import os
from pathlib import Path

from fastapi import UploadFile

from app.config import Settings, get_settings
from app.exceptions import InvalidInput

ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


class MediaService:
    """Stores profile images on local disk and hands back their public URL."""

    def __init__(self, settings: Settings) -> None:
        self.upload_dir = Path(settings.UPLOAD_DIR)
        self.max_bytes = settings.MAX_IMAGE_SIZE_MB * 1024 * 1024
        self.max_size_mb = settings.MAX_IMAGE_SIZE_MB
        self.url_prefix = settings.MEDIA_URL_PREFIX

    def validate_image_metadata(self, filename: str, content_type: str | None) -> str | None:
        """Validate upload file metadata (extension + MIME). Returns error message or None if valid."""
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_IMAGE_EXTENSIONS:
            return f"Unsupported file type '{ext}'. Allowed: {', '.join(sorted(ALLOWED_IMAGE_EXTENSIONS))}"

        if content_type and not content_type.startswith("image/"):
            return f"Invalid content type '{content_type}'. Must be an image."

        return None

    async def store_image(self, user_id: str, upload: UploadFile) -> str:
        """Stream an avatar to disk, replacing any previous one. Returns its public URL.

        The upload lands in a ``.part`` file first; the previous avatar is only
        replaced once the new one has passed the size and empty checks.
        Raises InvalidInput if the file is empty or exceeds the size limit.
        """
        ext = Path(upload.filename or "avatar.bin").suffix.lower()
        stored_filename = f"{user_id}-avatar{ext}"
        user_dir = self.upload_dir / user_id
        user_dir.mkdir(parents=True, exist_ok=True)

        file_path = user_dir / stored_filename
        part_path = user_dir / f"{stored_filename}.part"
        file_size = 0
        chunk_size = 1024 * 64

        try:
            with open(part_path, "wb") as f:
                while True:
                    chunk = await upload.read(chunk_size)
                    if not chunk:
                        break
                    file_size += len(chunk)
                    if file_size > self.max_bytes:
                        raise InvalidInput(f"Image too large. Maximum: {self.max_size_mb}MB")
                    f.write(chunk)
            if file_size == 0:
                raise InvalidInput("Uploaded file is empty")

            # one avatar per user, whatever the extension
            for old in user_dir.glob(f"{user_id}-avatar.*"):
                if old not in (part_path, file_path):
                    os.remove(old)
            part_path.replace(file_path)
        finally:
            if part_path.exists():
                os.remove(part_path)

        return f"{self.url_prefix}/{user_id}/{stored_filename}"


_media_service: MediaService | None = None


def get_media_service() -> MediaService:
    """Get singleton media service instance."""
    global _media_service
    if _media_service is None:
        _media_service = MediaService(get_settings())
    return _media_service
