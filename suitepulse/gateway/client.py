"""SuitePulse — Remote Data Gateway.

Thin authenticated wrapper around the hosted backend: named function
invocation, table queries, and auth lookups. Handles retry with capped
exponential backoff and short-circuits on auth failures.
"""

import asyncio
import time
from typing import Any, Dict, List, Optional

import httpx

from suitepulse.config import settings
from suitepulse.core.context import RequestContext
from suitepulse.core.errors import (
    AuthError,
    BackendError,
    SuitePulseError,
    TransportError,
    status_to_error,
)
from suitepulse.core.logging import get_logger
from suitepulse.gateway.filters import build_params

logger = get_logger("gateway.client")

RETRYABLE_STATUS = {429, 500, 502, 503, 504}


def _error_details(response: httpx.Response) -> tuple[str, str]:
    """Pull (message, code) out of a backend error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase, ""
    if not isinstance(body, dict):
        return str(body), ""
    error = body.get("error", body)
    if isinstance(error, dict):
        return (
            str(error.get("message") or error.get("msg") or response.reason_phrase),
            str(error.get("code", "")),
        )
    return str(error), str(body.get("code", ""))


class GatewayClient:
    """Async HTTP client for the hosted database/auth/function backend."""

    def __init__(
        self,
        ctx: Optional[RequestContext] = None,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        max_retries: Optional[int] = None,
        retry_base_delay: Optional[float] = None,
    ):
        self.ctx = ctx
        self.base_url = (base_url or settings.backend_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.backend_anon_key
        self.max_retries = max(
            1,
            settings.gateway_max_retries if max_retries is None else max_retries,
        )
        self.retry_base_delay = (
            settings.gateway_retry_base_delay
            if retry_base_delay is None
            else retry_base_delay
        )
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=settings.gateway_timeout_seconds,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "GatewayClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _headers(self) -> Dict[str, str]:
        token = self.ctx.access_token if self.ctx else self.api_key
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {token}",
        }

    def _backoff(self, attempt: int) -> float:
        return min(
            self.retry_base_delay * (2 ** (attempt - 1)),
            settings.gateway_retry_max_delay,
        )

    # ── Core Request Method ──

    async def _request(
        self,
        method: str,
        url: str,
        params: Any = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make a request with retry + auth short-circuit."""
        client = await self._get_client()
        request_headers = {**self._headers(), **(headers or {})}
        last_error: Optional[SuitePulseError] = None

        for attempt in range(1, self.max_retries + 1):
            started = time.monotonic()
            try:
                resp = await client.request(
                    method, url, params=params, json=json, headers=request_headers
                )
            except httpx.RequestError as e:
                last_error = TransportError(f"{type(e).__name__}: {e}")
                if attempt < self.max_retries:
                    wait = self._backoff(attempt)
                    logger.warning(
                        f"Request error: {e}. Retrying in {wait}s",
                        extra={"endpoint": url, "attempt": attempt},
                    )
                    await asyncio.sleep(wait)
                    continue
                raise TransportError(
                    f"Connection failed after {self.max_retries} attempts: {e}"
                ) from e

            duration_ms = round((time.monotonic() - started) * 1000, 1)

            if resp.is_success:
                logger.debug(
                    f"{method} {url} ok",
                    extra={
                        "endpoint": url,
                        "status_code": resp.status_code,
                        "duration_ms": duration_ms,
                    },
                )
                if not resp.content:
                    return None
                try:
                    return resp.json()
                except ValueError as e:
                    raise BackendError(
                        f"Non-JSON response from {url}", "INVALID_JSON", resp.status_code
                    ) from e

            message, code = _error_details(resp)
            error = status_to_error(resp.status_code, message, code)

            if isinstance(error, AuthError):
                logger.warning(
                    f"Auth rejected ({resp.status_code}): {message}",
                    extra={"endpoint": url, "status_code": resp.status_code},
                )
                raise error

            if resp.status_code in RETRYABLE_STATUS and attempt < self.max_retries:
                last_error = error
                wait = self._backoff(attempt)
                logger.warning(
                    f"Backend error {resp.status_code}. Retrying in {wait}s "
                    f"(attempt {attempt}/{self.max_retries})",
                    extra={"endpoint": url, "status_code": resp.status_code},
                )
                await asyncio.sleep(wait)
                continue

            raise error

        raise last_error or BackendError("Max retries exhausted")

    # ── Primitives ──

    async def invoke(
        self,
        name: str,
        payload: Optional[Dict[str, Any]] = None,
        method: str = "POST",
    ) -> Any:
        """Invoke a named backend function and return its JSON body."""
        url = f"{self.base_url}/functions/v1/{name}"
        if method == "GET":
            return await self._request(method, url, params=payload)
        return await self._request(method, url, json=payload or {})

    async def query(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        select: str = "*",
        order: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Select rows from a table through the REST interface."""
        url = f"{self.base_url}/rest/v1/{table}"
        params = build_params(filters, select=select, order=order, limit=limit)
        rows = await self._request("GET", url, params=params)
        if rows is None:
            return []
        if not isinstance(rows, list):
            raise BackendError(
                f"Expected row list from {table}, got {type(rows).__name__}",
                "INVALID_ROWS",
            )
        return rows

    async def insert(self, table: str, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Insert a row and return the stored representation."""
        url = f"{self.base_url}/rest/v1/{table}"
        rows = await self._request(
            "POST", url, json=data, headers={"Prefer": "return=representation"}
        )
        return rows or []

    async def update(
        self, table: str, data: Dict[str, Any], filters: Dict[str, Any]
    ) -> List[Dict[str, Any]]:
        """Patch rows matching ``filters``."""
        if not filters:
            raise ValueError("update requires at least one filter")
        url = f"{self.base_url}/rest/v1/{table}"
        params = build_params(filters)[1:]
        rows = await self._request(
            "PATCH",
            url,
            params=params,
            json=data,
            headers={"Prefer": "return=representation"},
        )
        return rows or []

    # ── Auth ──

    async def get_user(self) -> Dict[str, Any]:
        """Resolve the bearer token to a backend user."""
        if self.ctx is None:
            raise AuthError("Authorization header required", "NO_TOKEN", 401)
        user = await self._request("GET", f"{self.base_url}/auth/v1/user")
        if not isinstance(user, dict) or not user.get("id"):
            raise AuthError("Invalid authentication token", "INVALID_TOKEN", 401)
        return user

    # ── Health ──

    async def health_check(self) -> bool:
        """Probe the backend's health function. Never raises."""
        try:
            result = await self.invoke("health-check", method="GET")
        except SuitePulseError as e:
            logger.warning(f"Backend health check failed: {e}")
            return False
        return isinstance(result, dict) and result.get("status") == "healthy"
