"""Audio storage: persists uploaded audio on local disk."""

import os
import shutil
import uuid
from pathlib import Path
from typing import BinaryIO

from app.config import get_settings


class AudioStorageService:
    """Writes audio files under UPLOAD_DIR/<user_id>/ and resolves them back."""

    def save_audio(self, user_id: int, source: BinaryIO, audio_format: str) -> str:
        """Copy `source` to a new file. Returns the stored reference (relative path)."""
        settings = get_settings()
        stored_filename = f"{uuid.uuid4()}.{audio_format}"
        user_dir = Path(settings.UPLOAD_DIR) / str(user_id)
        user_dir.mkdir(parents=True, exist_ok=True)

        file_path = user_dir / stored_filename
        try:
            with open(file_path, "wb") as f:
                shutil.copyfileobj(source, f, length=1024 * 64)
        except OSError:
            if file_path.exists():
                os.remove(file_path)
            raise

        return f"{user_id}/{stored_filename}"

    def resolve(self, audio_url: str) -> Path:
        """Absolute path of a stored reference."""
        return Path(get_settings().UPLOAD_DIR) / audio_url

    def delete_audio(self, audio_url: str) -> None:
        """Remove a stored file if present."""
        if not audio_url:
            return
        file_path = self.resolve(audio_url)
        if file_path.exists():
            os.remove(file_path)


_audio_storage_service: AudioStorageService | None = None


def get_audio_storage_service() -> AudioStorageService:
    """Get singleton audio storage service instance."""
    global _audio_storage_service
    if _audio_storage_service is None:
        _audio_storage_service = AudioStorageService()
    return _audio_storage_service
