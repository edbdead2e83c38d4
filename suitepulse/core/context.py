"""SuitePulse — Request Context.

The caller's identity travels explicitly with every gateway call instead of
living in a module-level session.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RequestContext:
    """Authenticated caller for one request."""

    access_token: str
    user_id: Optional[str] = None
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def with_user(self, user_id: str, role: str = "user") -> "RequestContext":
        """Return a copy bound to a resolved user."""
        return RequestContext(access_token=self.access_token, user_id=user_id, role=role)


def parse_bearer(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
