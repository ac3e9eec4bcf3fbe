"""
End-to-end upload runs: real adapters and pipeline, fake transport.
"""

import asyncio
import hashlib

import pytest

from conftest import API_HOST, FILES_HOST, STORAGE_HOST, FakeHttp, credential_payload, history_payload
from dodo_upload.application.use_cases.upload_file import UploadFileUseCase
from dodo_upload.core.exceptions import (
    FileAccessError,
    InvalidInputError,
    NetworkError,
    RemoteError,
    UploadError,
)
from dodo_upload.infrastructure.adapters.bundles.upload import get_upload_adapter_bundle

pytestmark = pytest.mark.integration

HISTORY_URL = f"{API_HOST}/api/oss/file/history"
SIGN_URL = f"{API_HOST}/api/oss/fetchUploadSign"
RECORD_URL = f"{API_HOST}/api/oss/file/record"


def _use_case(protocol_config, http) -> UploadFileUseCase:
    return UploadFileUseCase(get_upload_adapter_bundle(config=protocol_config, http=http))


@pytest.mark.asyncio
async def test_dedup_hit_returns_existing_url_without_upload(protocol_config, sample_file):
    existing = "https://files.imdodo.com/dodo/5d41402abc4b2a76b9719d911017c592.txt"
    http = FakeHttp({HISTORY_URL: history_payload(True, existing)})

    result = await _use_case(protocol_config, http).run(str(sample_file), "tok", "42")

    assert result.url == existing
    assert result.filename == "hello.txt"
    assert http.log == [HISTORY_URL]
    http.post_multipart.assert_not_awaited()


@pytest.mark.asyncio
async def test_new_content_uploads_then_records(protocol_config, sample_file):
    http = FakeHttp(
        {
            HISTORY_URL: history_payload(False),
            SIGN_URL: credential_payload(),
        }
    )

    result = await _use_case(protocol_config, http).run(str(sample_file), "tok", "42")

    digest = "5d41402abc4b2a76b9719d911017c592"
    assert result.url == f"{FILES_HOST}/dodo/{digest}.txt"
    assert result.filename == "hello.txt"
    assert http.log == [HISTORY_URL, SIGN_URL, STORAGE_HOST, RECORD_URL]
    assert http.post_multipart.await_count == 1
    assert len(http.form_calls(RECORD_URL)) == 1
    assert http.uploaded[STORAGE_HOST] == b"hello"
    # digest is sent as MD5Str on the history call
    history_fields = dict(http.form_calls(HISTORY_URL)[0].args[1])
    assert history_fields["MD5Str"] == digest


@pytest.mark.asyncio
async def test_path_without_extension_fails_before_network(protocol_config, tmp_path):
    report = tmp_path / "report"
    report.write_bytes(b"data")
    http = FakeHttp()

    with pytest.raises(InvalidInputError) as exc_info:
        await _use_case(protocol_config, http).run(str(report), "tok", "42")

    assert exc_info.value.step == "validate_input"
    assert http.call_count == 0


@pytest.mark.asyncio
async def test_bare_name_report_fails_before_network(protocol_config):
    http = FakeHttp()
    with pytest.raises(InvalidInputError):
        await _use_case(protocol_config, http).run("report", "tok", "42")
    assert http.call_count == 0


@pytest.mark.asyncio
async def test_history_error_surfaces_server_message(protocol_config, sample_file):
    http = FakeHttp({HISTORY_URL: history_payload(False, status=7, message="bad token")})

    with pytest.raises(RemoteError) as exc_info:
        await _use_case(protocol_config, http).run(str(sample_file), "tok", "42")

    assert exc_info.value.message == "bad token"
    assert str(exc_info.value) == "bad token"
    assert exc_info.value.step == "check_history"
    http.post_multipart.assert_not_awaited()
    assert http.form_calls(SIGN_URL) == []


@pytest.mark.asyncio
async def test_missing_file_is_io_error_before_network(protocol_config, tmp_path):
    http = FakeHttp()
    with pytest.raises(OSError) as exc_info:
        await _use_case(protocol_config, http).run(str(tmp_path / "gone.png"), "tok", "42")
    assert isinstance(exc_info.value, FileAccessError)
    assert exc_info.value.step == "fingerprint"
    assert http.call_count == 0


@pytest.mark.asyncio
async def test_upload_failure_aborts_before_record(protocol_config, sample_file):
    http = FakeHttp(
        {
            HISTORY_URL: history_payload(False),
            SIGN_URL: credential_payload(),
            STORAGE_HOST: NetworkError("connection reset", url=STORAGE_HOST),
        }
    )
    with pytest.raises(UploadError) as exc_info:
        await _use_case(protocol_config, http).run(str(sample_file), "tok", "42")

    assert exc_info.value.step == "upload_object"
    assert http.form_calls(RECORD_URL) == []


@pytest.mark.asyncio
async def test_concurrent_runs_are_independent(protocol_config, tmp_path):
    a = tmp_path / "a.png"
    b = tmp_path / "b.jpg"
    a.write_bytes(b"first file")
    b.write_bytes(b"second file")
    http_a = FakeHttp({HISTORY_URL: history_payload(False), SIGN_URL: credential_payload()})
    http_b = FakeHttp({HISTORY_URL: history_payload(False), SIGN_URL: credential_payload()})

    res_a, res_b = await asyncio.gather(
        _use_case(protocol_config, http_a).run(str(a), "tok-a", "1"),
        _use_case(protocol_config, http_b).run(str(b), "tok-b", "2"),
    )

    digest_a = hashlib.md5(b"first file").hexdigest()
    digest_b = hashlib.md5(b"second file").hexdigest()
    assert res_a.url == f"{FILES_HOST}/dodo/{digest_a}.png"
    assert res_b.url == f"{FILES_HOST}/dodo/{digest_b}.jpg"
    assert http_a.uploaded[STORAGE_HOST] == b"first file"
    assert http_b.uploaded[STORAGE_HOST] == b"second file"
    assert dict(http_a.form_calls(RECORD_URL)[0].args[1])["token"] == "tok-a"
    assert dict(http_b.form_calls(RECORD_URL)[0].args[1])["token"] == "tok-b"


@pytest.mark.asyncio
async def test_same_use_case_serves_concurrent_runs(protocol_config, tmp_path):
    files = []
    for i in range(3):
        p = tmp_path / f"f{i}.bin"
        p.write_bytes(f"payload-{i}".encode())
        files.append(p)
    http = FakeHttp({HISTORY_URL: history_payload(False), SIGN_URL: credential_payload()})
    use_case = _use_case(protocol_config, http)

    results = await asyncio.gather(*(use_case.run(str(p), "tok", "42") for p in files))

    for p, res in zip(files, results):
        assert res.filename == p.name
        assert res.url.endswith(f"{hashlib.md5(p.read_bytes()).hexdigest()}.bin")
