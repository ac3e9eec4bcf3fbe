from __future__ import annotations
from typing import Protocol


class IRecorder(Protocol):
    """Registers an uploaded object so its public URL becomes live."""

    async def record(
        self, digest: str, extension: str, file_path: str, token: str, uid: str
    ) -> str:
        """Submit the finalize call and return the public resource URL."""
        ...
