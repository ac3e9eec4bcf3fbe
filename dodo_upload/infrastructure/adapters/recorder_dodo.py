from __future__ import annotations

import logging
import os

import aiofiles.os

from dodo_upload.application.interfaces import IRecorder
from dodo_upload.core.exceptions import FileAccessError, NetworkError, RecordError
from dodo_upload.infrastructure.adapters.dodo_api import DodoApiAdapter

logger = logging.getLogger(__name__)


class DodoRecorder(DodoApiAdapter, IRecorder):
    """Finalize an upload via ``/api/oss/file/record``.

    The service expects the token twice: as a signed field and as a raw
    ``Token`` header. Only this endpoint needs the header.
    """

    async def record(
        self, digest: str, extension: str, file_path: str, token: str, uid: str
    ) -> str:
        try:
            size = (await aiofiles.os.stat(file_path)).st_size
        except OSError as e:
            raise FileAccessError(f"Cannot stat {file_path}: {e}", file_path=file_path) from e

        resource_url = self.config.resource_url(digest, extension)
        key = self.key_selector.select()
        pairs = [
            ("MD5Str", digest),
            ("apikey", key.apikey),
            *self._client_identity(),
            ("fileName", os.path.basename(file_path)),
            ("fileSize", str(size)),
            ("resourceType", self.config.resource_type),
            ("resourceUrl", resource_url),
            ("timestamp", self._timestamp()),
            ("token", token),
            ("uid", uid),
        ]
        url = self.config.record_url
        try:
            # acknowledgement body is not inspected
            await self.http.post_form(
                url,
                self._sign_form(pairs, key.hmac_key),
                headers={"Token": token},
                parse_json=False,
            )
        except NetworkError as e:
            raise RecordError(f"Failed to record upload: {e.message}", url=url) from e

        logger.debug("Recorded %s as %s", digest, resource_url)
        return resource_url
