from __future__ import annotations

import logging
import os

from pydantic import ValidationError

from dodo_upload.application.interfaces import IUploader
from dodo_upload.core.exceptions import NetworkError, RemoteError, UploadError
from dodo_upload.core.pyd_schemas import UploadCredential
from dodo_upload.infrastructure.adapters.dodo_api import DodoApiAdapter

logger = logging.getLogger(__name__)


class OssUploader(DodoApiAdapter, IUploader):
    """Direct POST-policy upload to the OSS bucket behind files.imdodo.com.

    Two calls: a signed request for a short-lived credential, then a
    multipart form carrying the credential fields, the object key and the
    file stream to ``credential.host``.
    """

    async def fetch_credential(self, token: str, uid: str) -> UploadCredential:
        key = self.key_selector.select()
        pairs = [
            ("apikey", key.apikey),
            ("bucket", self.config.bucket),
            *self._client_identity(),
            ("dir", self.config.upload_dir),
            ("host", self.config.files_host),
            ("limitSize", str(self.config.limit_size)),
            ("timestamp", self._timestamp()),
            ("token", token),
            ("uid", uid),
        ]
        url = self.config.upload_sign_url
        payload = self._check_status(
            await self.http.post_form(url, self._sign_form(pairs, key.hmac_key)), url
        )
        try:
            return UploadCredential.model_validate(payload.get("data"))
        except ValidationError as e:
            raise RemoteError(f"Malformed upload credential: {e}", endpoint=url) from e

    async def upload(
        self,
        file_path: str,
        digest: str,
        extension: str,
        *,
        token: str,
        uid: str,
    ) -> None:
        try:
            credential = await self.fetch_credential(token, uid)
        except NetworkError as e:
            raise UploadError(
                f"Failed to obtain upload credential: {e.message}",
                url=self.config.upload_sign_url,
            ) from e
        object_key = self.config.object_key(digest, extension)
        fields = [*credential.form_fields(), ("key", object_key)]

        logger.info("Uploading %s -> %s (%s)", file_path, object_key, credential.host)
        try:
            await self.http.post_multipart(
                credential.host,
                fields,
                file_field="file",
                file_path=file_path,
                filename=os.path.basename(file_path),
            )
        except NetworkError as e:
            raise UploadError(
                f"Failed to upload {os.path.basename(file_path)}: {e.message}",
                url=credential.host,
            ) from e
