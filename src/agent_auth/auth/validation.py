"""
Remote API key validation.
Asks a caller-supplied JSON requester whether an API key is accepted.
"""

import inspect
from typing import Any, Callable, Mapping, Optional

import structlog

from .base import KeyCheckResult, KeyCheckStatus
from ..config import AuthStateSettings

logger = structlog.get_logger(__name__)

DEFAULT_VALIDATION_PATH = "/me"

RequestJSON = Callable[..., Any]


def _get(obj: Any, name: str) -> Any:
    """Read a field from a mapping or an attribute-style result."""
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def interpret_key_check(out: Any) -> KeyCheckResult:
    """
    Classify a requester result.

    Args:
        out: Result with ``ok`` and ``response`` fields

    Returns:
        KeyCheckResult describing why the key is or is not accepted
    """
    if not out or not _get(out, "ok"):
        return KeyCheckResult(KeyCheckStatus.NOT_OK)

    payload = _get(out, "response")
    if not payload or not isinstance(payload, Mapping):
        return KeyCheckResult(KeyCheckStatus.MALFORMED_RESPONSE)
    if payload.get("error"):
        return KeyCheckResult(KeyCheckStatus.ERROR_RESPONSE, error=str(payload["error"]))
    if not payload.get("data"):
        return KeyCheckResult(KeyCheckStatus.NO_DATA)
    return KeyCheckResult(KeyCheckStatus.VALID)


async def check_api_key(
    api_key: Optional[str],
    request_json: Optional[RequestJSON],
    base_url: Optional[str] = None,
    timeout_ms: Optional[int] = None,
    path: Optional[str] = None,
    settings: Optional[AuthStateSettings] = None,
) -> KeyCheckResult:
    """
    Check an API key against the remote service.

    Args:
        api_key: API key to check
        request_json: Requester accepting base_url, method, path, api_key
            and timeout_ms keyword arguments; may be sync or async
        base_url: Service base URL
        timeout_ms: Request timeout in milliseconds
        path: Endpoint that returns the caller's identity
        settings: Supplies base_url, timeout_ms and path when not given

    Returns:
        KeyCheckResult; requester and response errors are captured, never raised
    """
    if not api_key:
        return KeyCheckResult(KeyCheckStatus.MISSING_API_KEY)
    if not callable(request_json):
        return KeyCheckResult(KeyCheckStatus.NO_REQUESTER)

    if settings is not None:
        base_url = base_url if base_url is not None else settings.base_url
        timeout_ms = timeout_ms if timeout_ms is not None else settings.request_timeout_ms
        path = path or settings.validation_path
    path = path or DEFAULT_VALIDATION_PATH

    try:
        out = request_json(
            base_url=base_url,
            method="GET",
            path=path,
            api_key=api_key,
            timeout_ms=timeout_ms,
        )
        if inspect.isawaitable(out):
            out = await out
    except Exception as e:
        logger.debug("API key check request failed", path=path, error=str(e))
        return KeyCheckResult(KeyCheckStatus.REQUEST_FAILED, error=str(e))

    try:
        result = interpret_key_check(out)
    except Exception as e:
        logger.debug("API key check response unreadable", path=path, error=str(e))
        return KeyCheckResult(KeyCheckStatus.MALFORMED_RESPONSE, error=str(e))

    if not result.valid:
        logger.debug("API key rejected", path=path, status=result.status.value)
    return result


async def has_valid_api_key(
    api_key: Optional[str] = None,
    request_json: Optional[RequestJSON] = None,
    base_url: Optional[str] = None,
    timeout_ms: Optional[int] = None,
    path: Optional[str] = None,
    settings: Optional[AuthStateSettings] = None,
) -> bool:
    """Return True only if the remote service accepts the API key."""
    result = await check_api_key(
        api_key,
        request_json,
        base_url=base_url,
        timeout_ms=timeout_ms,
        path=path,
        settings=settings,
    )
    return result.valid
