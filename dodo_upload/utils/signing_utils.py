"""
Request signing helpers for the DoDo API.
"""

import base64
import hashlib
import hmac
import random
from typing import List, Optional, Sequence, Tuple

from dodo_upload.core.exceptions import ConfigurationError
from dodo_upload.core.pyd_schemas import KeyPair

Pair = Tuple[str, str]

SIGNATURE_FIELD = "sig"


def canonical_string(pairs: Sequence[Pair]) -> str:
    """
    Join ordered pairs into the string the server signs.

    Args:
        pairs: (name, value) pairs in wire order

    Returns:
        ``name=value`` items joined by ``&``, values not URL-encoded

    Example:
        >>> canonical_string([("b", "2"), ("a", "1")])
        'b=2&a=1'
    """
    return "&".join(f"{name}={value}" for name, value in pairs)


def sign(pairs: Sequence[Pair], secret: str) -> str:
    """Base64 HMAC-SHA1 of the canonical string. Order-sensitive."""
    digest = hmac.new(
        secret.encode("utf-8"),
        canonical_string(pairs).encode("utf-8"),
        hashlib.sha1,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def build_signed_form(pairs: Sequence[Pair], secret: str) -> List[Pair]:
    """Form body for a signed call: ``sig`` first, then the signed pairs."""
    return [(SIGNATURE_FIELD, sign(pairs, secret)), *pairs]


def select_key_pair(
    key_pairs: Sequence[KeyPair], rng: Optional[random.Random] = None
) -> KeyPair:
    """Pick one pre-shared pair uniformly at random.

    ``rng`` defaults to the module-level random source; pass a seeded
    ``random.Random`` for deterministic selection.
    """
    if not key_pairs:
        raise ConfigurationError("No key pairs configured", config_key="key_pairs")
    return (rng or random).choice(list(key_pairs))
