from __future__ import annotations
from typing import Protocol


class IUploader(Protocol):
    """Uploads a local file to object storage under its digest-derived key."""

    async def upload(
        self,
        file_path: str,
        digest: str,
        extension: str,
        *,
        token: str,
        uid: str,
    ) -> None:
        """Obtain an upload credential and stream the file to the storage host."""
        ...
