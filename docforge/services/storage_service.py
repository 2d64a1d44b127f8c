"""Storage service for binary artifacts kept on the local filesystem."""

import asyncio
from pathlib import Path
from typing import Any, Union

from docforge.core.config import StorageSettings
from docforge.core.exceptions import StorageError
from docforge.utils.logging import get_logger

LOGGER = get_logger(__name__)


class StorageService:
    """Writes uploaded files and rendered PDFs under a root directory.

    Files are grouped by bucket (a first-level directory). Returned paths are
    relative to the root so they can be persisted and served later.
    """

    def __init__(self, root: Union[str, Path], uploads_bucket: str = "uploads", proposals_bucket: str = "proposals"):
        self.root = Path(root)
        self.uploads_bucket = uploads_bucket
        self.proposals_bucket = proposals_bucket

    @classmethod
    def from_settings(cls, storage_settings: StorageSettings) -> "StorageService":
        return cls(
            root=storage_settings.directory,
            uploads_bucket=storage_settings.uploads_bucket,
            proposals_bucket=storage_settings.proposals_bucket,
        )

    def _target(self, bucket: str, path: str) -> Path:
        relative = Path(path)
        if relative.is_absolute() or ".." in relative.parts:
            raise StorageError(f"Refusing to store outside the bucket: {path}")
        return self.root / bucket / relative

    def _write(self, target: Path, content: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)

    async def save_bytes(self, bucket: str, path: str, content: bytes) -> str:
        """Store raw bytes.

        Args:
            bucket: Target bucket name
            path: Target path within the bucket

        Returns:
            Stored path relative to the storage root

        Raises:
            StorageError: If the file cannot be written
        """
        target = self._target(bucket, path)
        try:
            await asyncio.to_thread(self._write, target, bytes(content))
        except OSError as e:
            LOGGER.error(f"Error writing file to storage: {e}", extra={"bucket": bucket, "path": path})
            raise StorageError(f"Storage write error: {e}", original_error=e) from e

        stored = f"{bucket}/{Path(path).as_posix()}"
        LOGGER.info(f"Stored {len(content)} bytes at {stored}")
        return stored

    async def upload_file(self, file: Any, bucket: str, path: str) -> str:
        """Store an uploaded file (anything with an async or sync ``read``)."""
        content = file.read()
        if asyncio.iscoroutine(content):
            content = await content
        return await self.save_bytes(bucket, path, content)

    async def read_bytes(self, stored_path: str) -> bytes:
        target = self.root / stored_path
        try:
            return await asyncio.to_thread(target.read_bytes)
        except OSError as e:
            raise StorageError(f"Storage read error: {e}", original_error=e) from e
