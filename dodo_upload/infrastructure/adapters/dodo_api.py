from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from dodo_upload.application.interfaces import IClock, IHttpClient, IKeySelector
from dodo_upload.application.interfaces.utils import epoch_millis
from dodo_upload.core.config import ProtocolConfig
from dodo_upload.core.exceptions import RemoteError
from dodo_upload.infrastructure.adapters.clock import SystemClock
from dodo_upload.infrastructure.adapters.key_selector_random import RandomKeySelector
from dodo_upload.utils.signing_utils import build_signed_form

Pair = Tuple[str, str]


class DodoApiAdapter:
    """Shared plumbing for adapters that make signed calls to the DoDo API.

    Subclasses list their fields in wire order; the key pair and timestamp
    are drawn per call.
    """

    def __init__(
        self,
        config: ProtocolConfig,
        http: IHttpClient,
        *,
        key_selector: Optional[IKeySelector] = None,
        clock: Optional[IClock] = None,
    ) -> None:
        self.config = config
        self.http = http
        self.key_selector = key_selector or RandomKeySelector(config.key_pairs)
        self.clock = clock or SystemClock()

    def _client_identity(self) -> List[Pair]:
        return [
            ("clientType", self.config.client_type),
            ("clientVersion", self.config.client_version),
        ]

    def _timestamp(self) -> str:
        return epoch_millis(self.clock.now())

    def _sign_form(self, pairs: Sequence[Pair], hmac_key: str) -> List[Pair]:
        return build_signed_form(pairs, hmac_key)

    @staticmethod
    def _check_status(payload: object, endpoint: str) -> dict:
        """Raise RemoteError unless payload is a JSON object with status 0 (or none)."""
        if not isinstance(payload, dict):
            raise RemoteError(f"Unexpected response from {endpoint}", endpoint=endpoint)
        status = payload.get("status", 0)
        if status not in (0, None):
            raise RemoteError(
                str(payload.get("message") or f"status {status}"),
                status=status,
                endpoint=endpoint,
            )
        return payload
