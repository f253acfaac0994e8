"""
Evidence Storage - persist files uploaded with a report.

Files land under UPLOAD_DIR with a random name; the original name is kept
only as metadata. Type and size are checked before anything is written.
"""

import hashlib
import logging
import os
import uuid
from dataclasses import dataclass
from typing import Optional

from fastapi import UploadFile

from safetrade.core.errors import UploadRejected
from safetrade.core.settings import settings

logger = logging.getLogger(__name__)


@dataclass
class StoredFile:
    original_name: str
    filename: str
    path: str
    size: int
    mimetype: str
    sha256: str


class EvidenceStorage:

    def __init__(self, upload_dir: Optional[str] = None):
        self._upload_dir = upload_dir

    @property
    def upload_dir(self) -> str:
        return self._upload_dir or settings.UPLOAD_DIR

    @property
    def max_bytes(self) -> int:
        return settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    def validate(self, mimetype: Optional[str], size: int) -> None:
        """
        Raises:
            UploadRejected: type not allowed, empty file or file too large
        """
        if mimetype not in settings.allowed_upload_types_list:
            raise UploadRejected(f"Tipo de archivo no permitido: {mimetype}")
        if size == 0:
            raise UploadRejected("El archivo está vacío")
        if size > self.max_bytes:
            raise UploadRejected(self._too_large_message())

    def _too_large_message(self) -> str:
        return f"El archivo excede el tamaño máximo de {settings.MAX_UPLOAD_SIZE_MB} MB"

    async def read_upload(self, upload: UploadFile) -> bytes:
        """
        Read an uploaded file, never buffering more than the size limit plus one byte.

        Raises:
            UploadRejected: declared or actual size above the limit
        """
        if upload.size is not None and upload.size > self.max_bytes:
            raise UploadRejected(self._too_large_message())
        content = await upload.read(self.max_bytes + 1)
        if len(content) > self.max_bytes:
            raise UploadRejected(self._too_large_message())
        return content

    def save(self, original_name: Optional[str], mimetype: Optional[str], content: bytes) -> StoredFile:
        self.validate(mimetype, len(content))

        extension = os.path.splitext(original_name or "")[1].lower()
        filename = f"{uuid.uuid4().hex}{extension}"
        os.makedirs(self.upload_dir, exist_ok=True)
        path = os.path.join(self.upload_dir, filename)

        with open(path, "wb") as f:
            f.write(content)

        logger.info(f"Evidence stored: {filename} ({len(content)} bytes)")
        return StoredFile(
            original_name=original_name or filename,
            filename=filename,
            path=path,
            size=len(content),
            mimetype=mimetype,
            sha256=hashlib.sha256(content).hexdigest(),
        )

    def delete(self, path: str) -> bool:
        try:
            os.remove(path)
            return True
        except FileNotFoundError:
            return False


# Singleton instance
_evidence_storage: Optional[EvidenceStorage] = None


def get_evidence_storage() -> EvidenceStorage:
    global _evidence_storage
    if _evidence_storage is None:
        _evidence_storage = EvidenceStorage()
    return _evidence_storage
