"""
HTTP client utilities for the agent auth state store.
Provides an async JSON requester usable as the API key check collaborator.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
from httpx import AsyncClient, Timeout
import structlog

logger = structlog.get_logger(__name__)

RETRY_STATUS_CODES = {408, 429, 500, 502, 503, 504}


@dataclass
class JSONResult:
    """Outcome of a JSON request."""
    ok: bool
    status_code: int
    response: Any = None

    def __getitem__(self, key: str) -> Any:
        return getattr(self, key)

    def get(self, key: str, default: Any = None) -> Any:
        return getattr(self, key, default)


class HTTPClient:
    """Async JSON client with retry logic."""

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        max_retries: int = 0,
        retry_delay: float = 0.5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            base_url: Default base URL when a request passes none
            timeout: Default request timeout in seconds
            max_retries: Maximum number of retries
            retry_delay: Initial delay between retries in seconds
            transport: Optional httpx transport
        """
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay

        self.client = AsyncClient(
            timeout=Timeout(timeout, connect=5.0),
            follow_redirects=True,
            transport=transport,
        )
        self.client.headers.update({
            "User-Agent": "agent-auth-state/0.1.0",
            "Accept": "application/json",
        })

    @classmethod
    def from_settings(cls, settings: Any, **kwargs) -> "HTTPClient":
        """Create a client from AuthStateSettings."""
        return cls(
            base_url=settings.base_url,
            timeout=settings.request_timeout_ms / 1000.0,
            max_retries=settings.request_retry,
            **kwargs,
        )

    @staticmethod
    def _build_url(base_url: str, path: str) -> str:
        if not base_url:
            return path
        return f"{base_url.rstrip('/')}/{path.lstrip('/')}"

    async def request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """
        Make HTTP request with retry logic.

        Args:
            method: HTTP method
            url: URL to request
            **kwargs: Additional arguments for httpx

        Returns:
            HTTP response
        """
        for attempt in range(self.max_retries + 1):
            try:
                response = await self.client.request(method, url, **kwargs)
            except (httpx.TimeoutException, httpx.ConnectError) as e:
                if attempt >= self.max_retries:
                    logger.error("Network error after all retries", method=method, url=url, error=str(e))
                    raise
                delay = self.retry_delay * (2 ** attempt)
                logger.warning(
                    "Network error, retrying",
                    method=method,
                    url=url,
                    error=str(e),
                    attempt=attempt + 1,
                    delay=delay,
                )
                await asyncio.sleep(delay)
                continue

            if response.status_code in RETRY_STATUS_CODES and attempt < self.max_retries:
                delay = self.retry_delay * (2 ** attempt)
                logger.warning(
                    "Request failed, retrying",
                    method=method,
                    url=url,
                    status_code=response.status_code,
                    attempt=attempt + 1,
                    delay=delay,
                )
                await asyncio.sleep(delay)
                continue

            logger.debug("HTTP request completed", method=method, url=url, status_code=response.status_code)
            return response

        raise RuntimeError("HTTP request failed without exception")

    async def request_json(
        self,
        *,
        base_url: Optional[str] = None,
        method: str = "GET",
        path: str = "/",
        api_key: Optional[str] = None,
        timeout_ms: Optional[int] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> JSONResult:
        """
        Make a JSON request authenticated with an API key.

        Args:
            base_url: Service base URL; falls back to the client's
            method: HTTP method
            path: Request path
            api_key: Sent as a bearer token when set
            timeout_ms: Request timeout in milliseconds
            body: JSON request body

        Returns:
            JSONResult; response is None when the body is not JSON
        """
        headers = {}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        kwargs: Dict[str, Any] = {"headers": headers}
        if timeout_ms:
            kwargs["timeout"] = timeout_ms / 1000.0
        if body is not None:
            kwargs["json"] = body

        url = self._build_url(base_url or self.base_url, path)
        response = await self.request(method, url, **kwargs)

        try:
            payload = response.json()
        except ValueError:
            logger.warning("Response body is not JSON", url=url, status_code=response.status_code)
            payload = None

        return JSONResult(ok=response.is_success, status_code=response.status_code, response=payload)

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
