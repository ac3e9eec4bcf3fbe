from __future__ import annotations
from typing import Protocol

from dodo_upload.core.pyd_schemas import HistoryResult


class IHistoryChecker(Protocol):
    """Asks the service whether content with this digest was uploaded before."""

    async def check_history(self, digest: str, token: str, uid: str) -> HistoryResult:
        ...
