from __future__ import annotations

import random
from typing import Optional, Sequence

from dodo_upload.application.interfaces import IKeySelector
from dodo_upload.core.pyd_schemas import KeyPair
from dodo_upload.utils.signing_utils import select_key_pair


class RandomKeySelector(IKeySelector):
    """Draws a fresh key pair on every call; nothing is cached."""

    def __init__(
        self, key_pairs: Sequence[KeyPair], rng: Optional[random.Random] = None
    ) -> None:
        self.key_pairs = tuple(key_pairs)
        self.rng = rng

    def select(self) -> KeyPair:
        return select_key_pair(self.key_pairs, self.rng)
