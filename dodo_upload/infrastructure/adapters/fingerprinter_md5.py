from __future__ import annotations

import hashlib

import aiofiles

from dodo_upload.application.interfaces import IFingerprinter
from dodo_upload.core.exceptions import FileAccessError


class Md5Fingerprinter(IFingerprinter):
    """Stream-hash a file with MD5 without loading it whole into memory."""

    def __init__(self, chunk_size: int = 1024 * 1024) -> None:
        self.chunk_size = max(1, int(chunk_size))

    async def digest(self, file_path: str) -> str:
        md5 = hashlib.md5()
        try:
            async with aiofiles.open(file_path, "rb") as f:
                while True:
                    chunk = await f.read(self.chunk_size)
                    if not chunk:
                        break
                    md5.update(chunk)
        except OSError as e:
            raise FileAccessError(f"Cannot read {file_path}: {e}", file_path=file_path) from e
        return md5.hexdigest()
