"""
Common middleware for the LumiCloud platform
Request correlation and API request logging.
"""

import logging
import time
import uuid
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

from apps.common.logging import clear_request_context, set_request_context
from apps.common.request_ip import get_safe_client_ip

logger = logging.getLogger(__name__)

HTTP_CLIENT_ERROR_THRESHOLD = 400

# ===============================================================================
# REQUEST ID MIDDLEWARE
# ===============================================================================

class RequestIDMiddleware:
    """Add unique request ID for tracing and activity logs"""

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request_id = request.headers.get('X-Request-ID') or str(uuid.uuid4())
        request.META['REQUEST_ID'] = request_id
        set_request_context(request_id=request_id, ip_address=get_safe_client_ip(request))

        try:
            response = self.get_response(request)
        finally:
            clear_request_context()

        # Add to response headers for debugging
        response['X-Request-ID'] = request_id
        return response


# ===============================================================================
# API REQUEST LOGGING
# ===============================================================================

class APIRequestLoggingMiddleware:
    """Log method, path, status and duration of every /api/ request"""

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        if not request.path.startswith('/api/'):
            return self.get_response(request)

        start_time = time.time()
        response = self.get_response(request)
        duration_ms = round((time.time() - start_time) * 1000, 2)

        user = getattr(request, 'user', None)
        user_id = user.id if user is not None and user.is_authenticated else None
        message = f"{request.method} {request.path} → {response.status_code} ({duration_ms}ms)"
        extra = {'status_code': response.status_code, 'duration_ms': duration_ms, 'user_id': user_id}

        if response.status_code >= HTTP_CLIENT_ERROR_THRESHOLD:
            logger.warning(f"⚠️ [API] {message}", extra=extra)
        else:
            logger.info(f"🌐 [API] {message}", extra=extra)
        return response
