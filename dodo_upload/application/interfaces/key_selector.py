from __future__ import annotations
from typing import Protocol

from dodo_upload.core.pyd_schemas import KeyPair


class IKeySelector(Protocol):
    """Chooses the signing credential for one signed call."""

    def select(self) -> KeyPair:
        ...
