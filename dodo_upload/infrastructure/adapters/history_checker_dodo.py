from __future__ import annotations

import logging

from pydantic import ValidationError

from dodo_upload.application.interfaces import IHistoryChecker
from dodo_upload.core.exceptions import RemoteError
from dodo_upload.core.pyd_schemas import HistoryResult
from dodo_upload.infrastructure.adapters.dodo_api import DodoApiAdapter

logger = logging.getLogger(__name__)


class DodoHistoryChecker(DodoApiAdapter, IHistoryChecker):
    """Signed dedup lookup against ``/api/oss/file/history``."""

    async def check_history(self, digest: str, token: str, uid: str) -> HistoryResult:
        key = self.key_selector.select()
        pairs = [
            ("MD5Str", digest),
            ("apikey", key.apikey),
            *self._client_identity(),
            ("timestamp", self._timestamp()),
            ("token", token),
            ("uid", uid),
        ]
        url = self.config.history_url
        payload = self._check_status(
            await self.http.post_form(url, self._sign_form(pairs, key.hmac_key)), url
        )
        try:
            history = HistoryResult.model_validate(payload.get("data") or {})
        except ValidationError as e:
            raise RemoteError(f"Malformed history response: {e}", endpoint=url) from e
        logger.debug("History for %s: has_record=%s", digest, history.has_record)
        return history
