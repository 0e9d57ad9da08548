"""Content-addressed storage for publication metadata.

The composer depends only on the ContentStore contract: store an object,
get back a stable locator. LocalContentStore is a directory-backed
implementation keyed by SHA256 of the stored bytes.
"""

import asyncio
import hashlib
import json
import logging
from pathlib import Path
from typing import Protocol

from .errors import MetadataUploadError

logger = logging.getLogger(__name__)


class ContentStore(Protocol):
    async def upload(self, payload: dict) -> str:
        """Persist a JSON-serializable object and return its locator."""
        ...

    async def upload_bytes(self, data: bytes, mime_type: str) -> str:
        """Persist raw bytes and return their locator."""
        ...


def serialize_payload(payload: dict) -> bytes:
    """Canonical JSON encoding: sorted keys, compact separators, UTF-8."""
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":")).encode("utf-8")


class LocalContentStore:
    """Directory-backed content-addressed store.

    Objects are written to <root>/<sha256>. Storing identical bytes twice
    yields the same locator and leaves the existing file untouched.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root)

    async def upload(self, payload: dict) -> str:
        try:
            data = serialize_payload(payload)
        except (TypeError, ValueError) as e:
            raise MetadataUploadError(f"Metadata is not JSON serializable: {e}") from e
        return await self.upload_bytes(data, "application/json")

    async def upload_bytes(self, data: bytes, mime_type: str) -> str:
        locator = hashlib.sha256(data).hexdigest()
        await asyncio.to_thread(self._write, locator, data)
        logger.debug("Stored %d bytes of %s as %s", len(data), mime_type, locator)
        return locator

    def read(self, locator: str) -> bytes:
        """Return stored bytes for a locator."""
        path = self.root / locator
        if not path.is_file():
            raise MetadataUploadError(f"Unknown locator: {locator}")
        return path.read_bytes()

    def _write(self, locator: str, data: bytes) -> None:
        path = self.root / locator
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            if path.exists():
                return
            tmp_path = path.with_suffix(".tmp")
            tmp_path.write_bytes(data)
            tmp_path.replace(path)
        except OSError as e:
            raise MetadataUploadError(f"Failed to write to content store: {e}") from e
