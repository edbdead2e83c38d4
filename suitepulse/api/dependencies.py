"""SuitePulse — Shared Route Dependencies."""

from typing import AsyncIterator, Optional

from fastapi import Depends, Header, HTTPException

from suitepulse.core.context import RequestContext, parse_bearer
from suitepulse.core.errors import AuthError, SuitePulseError
from suitepulse.gateway.client import GatewayClient
from suitepulse.services.users import resolve_context


async def get_gateway(
    authorization: Optional[str] = Header(None),
) -> AsyncIterator[GatewayClient]:
    """Dependency — yields a gateway bound to the caller's bearer token."""
    token = parse_bearer(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Authorization header required")
    gateway = GatewayClient(RequestContext(access_token=token))
    try:
        yield gateway
    finally:
        await gateway.close()


async def get_request_context(
    gateway: GatewayClient = Depends(get_gateway),
) -> RequestContext:
    """Dependency — resolves the bearer token to a user."""
    try:
        return await resolve_context(gateway, gateway.ctx)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except SuitePulseError as e:
        raise HTTPException(status_code=502, detail=f"Auth backend unavailable: {e}")

