from __future__ import annotations

import asyncio
import logging
import mimetypes
from typing import Any, Mapping, Optional, Sequence, Tuple
from urllib.parse import urlencode

import aiofiles
import aiohttp

from dodo_upload.application.interfaces import IHttpClient
from dodo_upload.core.exceptions import FileAccessError, NetworkError, RemoteError

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
DEFAULT_FILE_CONTENT_TYPE = "application/octet-stream"


def guess_content_type(filename: str) -> str:
    """MIME type from the file name, octet-stream when unknown."""
    return mimetypes.guess_type(filename)[0] or DEFAULT_FILE_CONTENT_TYPE


class AiohttpHttpClient(IHttpClient):
    """IHttpClient backed by aiohttp, one ClientSession per request.

    No session is held between calls; one instance can be shared across
    concurrent uploads and event loops.
    """

    def __init__(self, timeout: float = 300) -> None:
        self.timeout = timeout

    def _session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout))

    async def post_form(
        self,
        url: str,
        fields: Sequence[Tuple[str, str]],
        *,
        headers: Optional[Mapping[str, str]] = None,
        parse_json: bool = True,
    ) -> Any:
        req_headers = {"Content-Type": FORM_CONTENT_TYPE, **dict(headers or {})}
        body = urlencode(list(fields))
        try:
            async with self._session() as session:
                async with session.post(url, data=body, headers=req_headers) as response:
                    response.raise_for_status()
                    if not parse_json:
                        return None
                    # content_type=None: the API does not always label JSON correctly
                    return await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("POST %s failed: %s", url, str(e))
            raise NetworkError(f"POST {url} failed: {e}", url=url) from e
        except ValueError as e:
            raise RemoteError(f"Invalid JSON response from {url}", endpoint=url) from e

    async def post_multipart(
        self,
        url: str,
        fields: Sequence[Tuple[str, str]],
        *,
        file_field: str,
        file_path: str,
        filename: str,
    ) -> None:
        try:
            async with aiofiles.open(file_path, "rb") as f:
                content = await f.read()
        except OSError as e:
            raise FileAccessError(f"Cannot read {file_path}: {e}", file_path=file_path) from e

        form = aiohttp.FormData()
        for name, value in fields:
            form.add_field(name, value)
        # bytes payload: the request carries a Content-Length
        form.add_field(
            file_field,
            content,
            filename=filename,
            content_type=guess_content_type(filename),
        )
        try:
            async with self._session() as session:
                async with session.post(url, data=form) as response:
                    response.raise_for_status()
                    logger.debug("Multipart POST %s -> %s", url, response.status)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("Multipart POST %s failed: %s", url, str(e))
            raise NetworkError(f"POST {url} failed: {e}", url=url) from e
