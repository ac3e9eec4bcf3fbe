import pytest

from conftest import API_HOST, FIXED_MILLIS, FakeHttp, history_payload
from dodo_upload.core.exceptions import NetworkError, RemoteError
from dodo_upload.infrastructure.adapters.history_checker_dodo import DodoHistoryChecker
from dodo_upload.utils.signing_utils import sign

HISTORY_URL = f"{API_HOST}/api/oss/file/history"


def _checker(protocol_config, http, fixed_clock):
    return DodoHistoryChecker(protocol_config, http, clock=fixed_clock)


@pytest.mark.adapters
@pytest.mark.asyncio
async def test_signed_fields_in_wire_order(protocol_config, fixed_clock):
    http = FakeHttp({HISTORY_URL: history_payload(False)})
    result = await _checker(protocol_config, http, fixed_clock).check_history("abc", "tok", "42")

    assert result.has_record is False
    http.post_form.assert_awaited_once()
    call = http.post_form.await_args
    assert call.args[0] == HISTORY_URL
    fields = call.args[1]
    expected_pairs = [
        ("MD5Str", "abc"),
        ("apikey", "AK-test"),
        ("clientType", "3"),
        ("clientVersion", "0.14.2"),
        ("timestamp", FIXED_MILLIS),
        ("token", "tok"),
        ("uid", "42"),
    ]
    assert fields == [("sig", sign(expected_pairs, "hmac-secret")), *expected_pairs]
    # no Token header on the history call
    assert not call.kwargs.get("headers")


@pytest.mark.adapters
@pytest.mark.asyncio
async def test_hit_returns_server_url_verbatim(protocol_config, fixed_clock):
    url = "https://files.imdodo.com/dodo/abc.png"
    http = FakeHttp({HISTORY_URL: history_payload(True, url)})
    result = await _checker(protocol_config, http, fixed_clock).check_history("abc", "tok", "42")
    assert result.has_record is True
    assert result.resource_url == url


@pytest.mark.adapters
@pytest.mark.asyncio
async def test_non_zero_status_raises_remote_error(protocol_config, fixed_clock):
    http = FakeHttp({HISTORY_URL: history_payload(False, status=7, message="bad token")})
    with pytest.raises(RemoteError) as exc_info:
        await _checker(protocol_config, http, fixed_clock).check_history("abc", "tok", "42")
    assert exc_info.value.message == "bad token"
    assert exc_info.value.status == 7
    assert http.post_form.await_count == 1


@pytest.mark.adapters
@pytest.mark.asyncio
async def test_hit_without_url_is_remote_error(protocol_config, fixed_clock):
    http = FakeHttp({HISTORY_URL: {"status": 0, "data": {"hasRecord": True}}})
    with pytest.raises(RemoteError):
        await _checker(protocol_config, http, fixed_clock).check_history("abc", "tok", "42")


@pytest.mark.adapters
@pytest.mark.asyncio
async def test_transport_failure_propagates(protocol_config, fixed_clock):
    http = FakeHttp({HISTORY_URL: NetworkError("connection reset", url=HISTORY_URL)})
    with pytest.raises(NetworkError):
        await _checker(protocol_config, http, fixed_clock).check_history("abc", "tok", "42")
