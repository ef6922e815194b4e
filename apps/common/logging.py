"""
Logging infrastructure for the LumiCloud platform.

- RequestIDFilter: injects the current request ID into every log record
- Request context helpers used by RequestIDMiddleware

Usage (settings LOGGING):
    "filters": {"add_request_id": {"()": "apps.common.logging.RequestIDFilter"}}
"""

from __future__ import annotations

import logging
import threading
from typing import Any

# Thread-local storage for request context
_request_context = threading.local()

REQUEST_CONTEXT_FIELDS = ("request_id", "user_id", "ip_address")


# =============================================================================
# REQUEST CONTEXT FUNCTIONS
# =============================================================================


def set_request_context(**kwargs: Any) -> None:
    """Store request-scoped values (request_id, ip_address, ...) for log records."""
    for key, value in kwargs.items():
        setattr(_request_context, key, value)


def get_request_id() -> str | None:
    return getattr(_request_context, "request_id", None)


def clear_request_context() -> None:
    for key in REQUEST_CONTEXT_FIELDS:
        if hasattr(_request_context, key):
            delattr(_request_context, key)


# =============================================================================
# LOG FILTERS
# =============================================================================


class RequestIDFilter(logging.Filter):
    """
    Add request ID and context to log records.

    Records emitted outside a request (django-q tasks, management commands)
    get ``-`` so format strings never fail.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = getattr(_request_context, "request_id", "-")
        if not hasattr(record, "ip_address"):
            record.ip_address = getattr(_request_context, "ip_address", None)
        return True
