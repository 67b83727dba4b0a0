# app/services/storage.py
import logging
import os
from dataclasses import dataclass
from typing import Optional

from app.config import settings
from app.exceptions import StorageFailure
from app.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

UPLOADS_URL_PREFIX = "/uploads"
MAX_NAME_ATTEMPTS = 100


@dataclass(frozen=True)
class StoredFile:
    url: str
    file_name: str


class LocalStorage:
    """Writes documents under the upload directory, served back at /uploads."""

    def __init__(self, root: Optional[str] = None, base_url: Optional[str] = None):
        self.root = root or settings.UPLOAD_DIR
        self.base_url = (base_url or settings.PUBLIC_BASE_URL).rstrip("/")

    def _free_name(self, folder: str, stem: str, ext: str) -> str:
        candidate = f"{stem}{ext}"
        attempt = 0
        while os.path.exists(os.path.join(folder, candidate)):
            attempt += 1
            if attempt > MAX_NAME_ATTEMPTS:
                return f"{stem}_{utcnow().strftime('%Y%m%d%H%M%S%f')}{ext}"
            candidate = f"{stem}_{attempt}{ext}"
        return candidate

    def store(self, data: bytes, subfolder: str, stem: str, ext: str = ".pdf") -> StoredFile:
        folder = os.path.join(self.root, subfolder)
        try:
            os.makedirs(folder, exist_ok=True)
            file_name = self._free_name(folder, stem, ext)
            with open(os.path.join(folder, file_name), "xb") as buffer:
                buffer.write(data)
        except OSError as e:
            logger.error(f"Failed to write upload {subfolder}/{stem}{ext}: {str(e)}")
            raise StorageFailure() from e

        url = f"{self.base_url}{UPLOADS_URL_PREFIX}/{subfolder}/{file_name}"
        logger.info(f"Stored {file_name} in {folder}")
        return StoredFile(url=url, file_name=file_name)


def get_storage() -> LocalStorage:
    return LocalStorage()
