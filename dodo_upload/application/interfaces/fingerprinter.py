from __future__ import annotations
from typing import Protocol


class IFingerprinter(Protocol):
    """Computes the content digest used as dedup key and object name."""

    async def digest(self, file_path: str) -> str:
        """Return the lowercase hex MD5 of the file's bytes."""
        ...
