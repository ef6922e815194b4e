# ===============================================================================
# API RESPONSE HELPERS 📦
# ===============================================================================
#
# Every endpoint answers {"success": true, "data": ...} or
# {"success": false, "error": ..., "code": ..., "details": ...}.
#

from typing import Any

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response

from apps.audit.services import ActivityContext
from apps.common.exceptions import LifecycleError
from apps.common.request_ip import get_safe_client_ip


def success_response(data: Any = None, message: str = '', status_code: int = status.HTTP_200_OK) -> Response:
    payload: dict[str, Any] = {'success': True, 'data': data}
    if message:
        payload['message'] = message
    return Response(payload, status=status_code)


def error_response(error: LifecycleError) -> Response:
    return Response({'success': False, **error.to_dict()}, status=error.http_status)


def validation_error_response(errors: Any) -> Response:
    """DRF serializer errors in the common error envelope"""
    return Response(
        {'success': False, 'error': 'Invalid input', 'code': 'validation_error', 'details': errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


def activity_context(request: Request) -> ActivityContext:
    user = request.user if request.user and request.user.is_authenticated else None
    return ActivityContext(user=user, ip_address=get_safe_client_ip(request))
