# ===============================================================================
# API PERMISSIONS CLASSES 🔐
# ===============================================================================

import hmac
import logging
from typing import Any

from django.conf import settings
from rest_framework import permissions
from rest_framework.request import Request

logger = logging.getLogger(__name__)

BEARER_PREFIX = 'Bearer '


class IsAdminRole(permissions.BasePermission):
    """Authenticated staff with the admin role (or superuser)"""

    message = 'Admin access required'

    def has_permission(self, request: Request, view: Any) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, 'is_admin', False))


def presented_cron_secret(request: Request) -> str:
    """Secret from ``Authorization: Bearer <secret>`` or ``X-Cron-Secret``"""
    authorization = request.headers.get('Authorization', '')
    if authorization.startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX):].strip()
    return request.headers.get('X-Cron-Secret', '')


class HasCronSecret(permissions.BasePermission):
    """
    Scheduler requests carrying the shared CRON_SECRET.

    Always denies when no secret is configured.
    """

    message = 'Unauthorized'

    def has_permission(self, request: Request, view: Any) -> bool:
        expected = getattr(settings, 'CRON_SECRET', '')
        presented = presented_cron_secret(request)
        if not expected or not presented:
            return False

        if hmac.compare_digest(presented.encode(), expected.encode()):
            return True

        logger.warning(f"🚫 [API] Invalid cron secret presented to {request.path}")
        return False
