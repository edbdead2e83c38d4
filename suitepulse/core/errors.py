"""SuitePulse — Error Taxonomy.

Every failure crossing the gateway boundary is one of these. The reconciler
turns them into per-source degraded flags; API routes turn them into HTTP
status codes.
"""


class SuitePulseError(Exception):
    """Base for all gateway and reconciliation failures."""

    kind = "error"

    def __init__(self, message: str, code: str = "", status_code: int = 0):
        self.code = code or self.kind.upper()
        self.status_code = status_code
        super().__init__(message)


class TransportError(SuitePulseError):
    """Network failure or per-call timeout reaching the backend."""

    kind = "transport"


class AuthError(SuitePulseError):
    """Backend rejected the caller's credential (401/403). Never retried."""

    kind = "auth"


class BackendError(SuitePulseError):
    """Backend answered with a non-auth 4xx/5xx."""

    kind = "backend"


class ShapeError(SuitePulseError):
    """A 2xx payload is missing or mistypes an expected field."""

    kind = "shape"


class SourceTimeout(SuitePulseError):
    """A source did not settle within the aggregate deadline."""

    kind = "timeout"


def status_to_error(status_code: int, message: str, code: str = "") -> SuitePulseError:
    """Map a non-2xx status code to the matching error type."""
    if status_code in (401, 403):
        return AuthError(message, code, status_code)
    return BackendError(message, code, status_code)
