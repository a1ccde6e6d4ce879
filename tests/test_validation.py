from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from agent_auth.auth.base import KeyCheckStatus
from agent_auth.config import AuthStateSettings
from agent_auth.auth.validation import check_api_key, has_valid_api_key, interpret_key_check


def ok_response(response):
    return {"ok": True, "response": response}


@pytest.mark.asyncio
async def test_valid_key_calls_requester():
    request_json = AsyncMock(return_value=ok_response({"data": {"handle": "agent-7"}}))

    result = await has_valid_api_key(
        api_key="co_live_abc123",
        request_json=request_json,
        base_url="https://api.example",
        timeout_ms=2500,
    )

    assert result is True
    request_json.assert_awaited_once_with(
        base_url="https://api.example",
        method="GET",
        path="/me",
        api_key="co_live_abc123",
        timeout_ms=2500,
    )


@pytest.mark.asyncio
async def test_custom_path():
    request_json = AsyncMock(return_value=ok_response({"data": True}))

    assert await has_valid_api_key(api_key="k", request_json=request_json, path="/v1/whoami")
    assert request_json.await_args.kwargs["path"] == "/v1/whoami"


@pytest.mark.asyncio
@pytest.mark.parametrize("api_key", ["", None])
async def test_missing_key_skips_request(api_key):
    request_json = AsyncMock()

    assert await has_valid_api_key(api_key=api_key, request_json=request_json) is False
    request_json.assert_not_called()
    result = await check_api_key(api_key, request_json)
    assert result.status is KeyCheckStatus.MISSING_API_KEY


@pytest.mark.asyncio
async def test_missing_requester():
    assert await has_valid_api_key(api_key="k", request_json=None) is False
    result = await check_api_key("k", "not callable")
    assert result.status is KeyCheckStatus.NO_REQUESTER


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [httpx.ConnectError("refused"), httpx.ReadTimeout("slow"), ValueError("bad json")],
)
async def test_requester_errors_are_swallowed(error):
    request_json = AsyncMock(side_effect=error)

    assert await has_valid_api_key(api_key="k", request_json=request_json) is False
    result = await check_api_key("k", request_json)
    assert result.status is KeyCheckStatus.REQUEST_FAILED
    assert result.error == str(error)


@pytest.mark.asyncio
async def test_sync_requester_is_supported():
    request_json = MagicMock(return_value=ok_response({"data": {"id": 1}}))
    assert await has_valid_api_key(api_key="k", request_json=request_json) is True


@pytest.mark.asyncio
async def test_attribute_style_result():
    request_json = AsyncMock(return_value=SimpleNamespace(ok=True, response={"data": [1]}))
    assert await has_valid_api_key(api_key="k", request_json=request_json) is True


@pytest.mark.parametrize(
    "out,status",
    [
        (None, KeyCheckStatus.NOT_OK),
        ({"ok": False, "response": {"data": {"id": 1}}}, KeyCheckStatus.NOT_OK),
        ({"ok": True}, KeyCheckStatus.MALFORMED_RESPONSE),
        ({"ok": True, "response": "text"}, KeyCheckStatus.MALFORMED_RESPONSE),
        ({"ok": True, "response": {"error": "unauthorized", "data": {"id": 1}}}, KeyCheckStatus.ERROR_RESPONSE),
        ({"ok": True, "response": {"data": None}}, KeyCheckStatus.NO_DATA),
        ({"ok": True, "response": {"data": {}}}, KeyCheckStatus.NO_DATA),
        ({"ok": True, "response": {"data": {"id": 1}}}, KeyCheckStatus.VALID),
    ],
)
def test_interpret_key_check(out, status):
    assert interpret_key_check(out).status is status


@pytest.mark.asyncio
async def test_error_field_is_reported():
    request_json = AsyncMock(return_value=ok_response({"error": "invalid api key"}))

    result = await check_api_key("k", request_json)
    assert not result
    assert result.error == "invalid api key"
    assert await has_valid_api_key(api_key="k", request_json=request_json) is False


@pytest.mark.asyncio
async def test_settings_supply_request_defaults():
    settings = AuthStateSettings(
        base_url="https://api.example",
        request_timeout_ms=1500,
        validation_path="/v2/me",
    )
    request_json = AsyncMock(return_value=ok_response({"data": {"id": 1}}))

    assert await has_valid_api_key(api_key="k", request_json=request_json, settings=settings) is True
    request_json.assert_awaited_once_with(
        base_url="https://api.example",
        method="GET",
        path="/v2/me",
        api_key="k",
        timeout_ms=1500,
    )


@pytest.mark.asyncio
async def test_explicit_arguments_override_settings():
    settings = AuthStateSettings(base_url="https://api.example", request_timeout_ms=1500, validation_path="/v2/me")
    request_json = AsyncMock(return_value=ok_response({"data": {"id": 1}}))

    await check_api_key("k", request_json, base_url="https://other", timeout_ms=10, path="/me", settings=settings)
    assert request_json.await_args.kwargs == {
        "base_url": "https://other",
        "method": "GET",
        "path": "/me",
        "api_key": "k",
        "timeout_ms": 10,
    }


class ExplodingResult:
    def __bool__(self):
        raise RuntimeError("cannot evaluate result")


class ExplodingPayload(dict):
    def get(self, key, default=None):
        raise RuntimeError("payload access failed")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "out",
    [ExplodingResult(), {"ok": True, "response": ExplodingPayload(data=1)}],
)
async def test_unreadable_result_is_invalid(out):
    request_json = AsyncMock(return_value=out)

    assert await has_valid_api_key(api_key="k", request_json=request_json) is False
    result = await check_api_key("k", request_json)
    assert result.status is KeyCheckStatus.MALFORMED_RESPONSE
