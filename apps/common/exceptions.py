"""
Lifecycle error taxonomy for the LumiCloud platform.

Every workflow service returns ``Result[..., LifecycleError]``; API views map
the error onto a JSON body and HTTP status via ``http_status``.
"""

from __future__ import annotations

from typing import Any, ClassVar

# ===============================================================================
# BASE ERROR
# ===============================================================================


class LifecycleError(Exception):
    """Base error for account lifecycle operations"""

    http_status: ClassVar[int] = 500
    code: ClassVar[str] = "lifecycle_error"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


# ===============================================================================
# CALLER ERRORS
# ===============================================================================


class AuthorizationError(LifecycleError):
    """Caller lacks the admin role or the cron secret"""

    http_status = 403
    code = "unauthorized"


class NotFoundError(LifecycleError):
    """Referenced customer, website or database does not exist"""

    http_status = 404
    code = "not_found"


class ValidationError(LifecycleError):
    """Input failed validation (months range, domain format, paths)"""

    http_status = 400
    code = "validation_error"


class QuotaExceededError(LifecycleError):
    """Package limit reached"""

    http_status = 403
    code = "quota_exceeded"

    def __init__(self, message: str, limit: int, current: int):
        super().__init__(message, limit=limit, current=current)
        self.limit = limit
        self.current = current


class NameCollisionError(LifecycleError):
    """Subdomain or custom domain already taken"""

    http_status = 409
    code = "name_collision"


# ===============================================================================
# REMOTE PANEL ERRORS
# ===============================================================================


class RemoteOperationError(LifecycleError):
    """The panel rejected a blocking step; message is the panel's own error text"""

    code = "remote_operation_failed"

    def __init__(self, message: str, return_code: int | None = None, forbidden: bool = False, hint: str = ""):
        details = {"return_code": return_code, "forbidden": forbidden}
        if hint:
            details["hint"] = hint
        super().__init__(message, **details)
        self.return_code = return_code
        self.forbidden = forbidden

    @property
    def http_status(self) -> int:  # type: ignore[override]
        return 403 if self.forbidden else 502


class RemoteTransportError(LifecycleError):
    """The panel could not be reached (connection, TLS, timeout or cancellation)"""

    http_status = 502
    code = "remote_unreachable"
