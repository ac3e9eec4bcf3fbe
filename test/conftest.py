"""
Shared fixtures: protocol config, fixed clock, a recording fake transport
and AsyncMock-based pipeline adapters.
"""

import datetime as _dt
import logging
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, Optional
from unittest.mock import AsyncMock

import pytest

from dodo_upload.core.config import ProtocolConfig
from dodo_upload.core.pyd_schemas import HistoryResult, KeyPair

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

API_HOST = "https://apis.test"
FILES_HOST = "https://files.test"
STORAGE_HOST = "https://oss-bucket.test"

# 2024-01-01T00:00:00Z
FIXED_NOW = _dt.datetime(2024, 1, 1, tzinfo=_dt.timezone.utc)
FIXED_MILLIS = "1704067200000"


class FixedClock:
    def __init__(self, moment: _dt.datetime = FIXED_NOW):
        self.moment = moment

    def now(self) -> _dt.datetime:
        return self.moment


def history_payload(has_record: bool, url: Optional[str] = None, status: int = 0, message: str = "") -> dict:
    data: Dict[str, Any] = {"hasRecord": has_record}
    if url is not None:
        data["resourceUrl"] = url
    return {"status": status, "message": message, "data": data}


def credential_payload(host: str = STORAGE_HOST) -> dict:
    return {
        "status": 0,
        "data": {
            "OSSAccessKeyId": "LTAI-test",
            "policy": "eyJleHBpcmF0aW9uIjoi",
            "signature": "c2lnbmF0dXJl",
            "dir": "dodo/",
            "host": host,
            "expire": 1704067500,
        },
    }


class FakeHttp:
    """In-memory IHttpClient: answers by URL and records every call.

    ``responses`` maps URL -> JSON payload, or an exception instance to raise.
    Multipart uploads store the streamed bytes under ``uploaded[url]``.
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None):
        self.responses: Dict[str, Any] = dict(responses or {})
        self.uploaded: Dict[str, bytes] = {}
        self.log: list = []  # URLs in call order across both methods
        self.post_form = AsyncMock(side_effect=self._post_form)
        self.post_multipart = AsyncMock(side_effect=self._post_multipart)

    async def _post_form(self, url, fields, *, headers=None, parse_json=True):
        self.log.append(url)
        resp = self.responses.get(url, {"status": 0, "data": {}})
        if isinstance(resp, Exception):
            raise resp
        return resp if parse_json else None

    async def _post_multipart(self, url, fields, *, file_field, file_path, filename):
        self.log.append(url)
        resp = self.responses.get(url)
        if isinstance(resp, Exception):
            raise resp
        with open(file_path, "rb") as fh:
            self.uploaded[url] = fh.read()

    @property
    def call_count(self) -> int:
        return self.post_form.await_count + self.post_multipart.await_count

    def form_calls(self, url: str) -> list:
        return [c for c in self.post_form.await_args_list if c.args[0] == url]


@pytest.fixture
def protocol_config() -> ProtocolConfig:
    return ProtocolConfig(
        api_host=API_HOST,
        files_host=FILES_HOST,
        history_path="/api/oss/file/history",
        upload_sign_path="/api/oss/fetchUploadSign",
        record_path="/api/oss/file/record",
        bucket="oss-dodo-upload",
        storage_prefix="dodo",
        limit_size=104857600,
        client_type="3",
        client_version="0.14.2",
        resource_type="5",
        key_pairs=(KeyPair(apikey="AK-test", hmac_key="hmac-secret"),),
    )


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def fake_http() -> FakeHttp:
    return FakeHttp()


@pytest.fixture
def sample_file(tmp_path) -> Path:
    p = tmp_path / "hello.txt"
    p.write_bytes(b"hello")
    return p


@pytest.fixture
def fake_adapters():
    """AsyncMock-based adapters for the upload pipeline builder.

    - fingerprinter.digest returns a fixed digest
    - history_checker.check_history reports no record
    - uploader.upload succeeds
    - recorder.record returns a URL derived from its arguments
    """

    class Fingerprinter:
        async def digest(self, file_path: str) -> str:
            return "5d41402abc4b2a76b9719d911017c592"

    class HistoryChecker:
        async def check_history(self, digest, token, uid):
            return HistoryResult(has_record=False)

    class Uploader:
        async def upload(self, file_path, digest, extension, *, token, uid):
            return None

    class Recorder:
        async def record(self, digest, extension, file_path, token, uid):
            return f"{FILES_HOST}/dodo/{digest}{extension}"

    fingerprinter = Fingerprinter()
    history_checker = HistoryChecker()
    uploader = Uploader()
    recorder = Recorder()

    # Allow assertion on calls
    fingerprinter.digest = AsyncMock(side_effect=fingerprinter.digest)  # type: ignore
    history_checker.check_history = AsyncMock(side_effect=history_checker.check_history)  # type: ignore
    uploader.upload = AsyncMock(side_effect=uploader.upload)  # type: ignore
    recorder.record = AsyncMock(side_effect=recorder.record)  # type: ignore

    return SimpleNamespace(
        fingerprinter=fingerprinter,
        history_checker=history_checker,
        uploader=uploader,
        recorder=recorder,
    )
