# ===============================================================================
# BILLING API VIEWS 💳
# ===============================================================================

import logging
from typing import ClassVar

from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.core import (
    CronThrottle,
    HasCronSecret,
    IsAdminRole,
    StandardAPIThrottle,
    activity_context,
    error_response,
    success_response,
    validation_error_response,
)
from apps.billing.expiration_service import ExpirationScanner
from apps.billing.services import BillingExtensionService

from .serializers import BillingExtensionSerializer

logger = logging.getLogger(__name__)


# ===============================================================================
# SUBSCRIPTION EXTENSION API 📅
# ===============================================================================

class CustomerBillingAPIView(APIView):
    """
    GET  /api/customers/<id>/billing/ → expiry, days remaining, expired flag
    POST /api/customers/<id>/billing/ → extend by {"months": 1..12} (admin)
    """

    permission_classes: ClassVar = [IsAuthenticated]
    throttle_classes: ClassVar = [StandardAPIThrottle]

    def get(self, request: Request, customer_id: int) -> Response:
        if not request.user.is_admin:
            own_customer = getattr(request.user, 'customer_profile', None)
            if own_customer is None or own_customer.pk != customer_id:
                return Response({'success': False, 'error': 'Customer not found'}, status=404)

        result = BillingExtensionService.billing_info(customer_id)
        if result.is_err():
            return error_response(result.unwrap_err())
        return success_response(result.unwrap())

    def post(self, request: Request, customer_id: int) -> Response:
        serializer = BillingExtensionSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = BillingExtensionService().extend(
            customer_id, serializer.validated_data['months'], request.user, activity_context(request)
        )
        if result.is_err():
            return error_response(result.unwrap_err())

        outcome = result.unwrap()
        payload = outcome.to_dict()
        return success_response(payload, message=payload['message'])


# ===============================================================================
# EXPIRATION SCAN API ⏰
# ===============================================================================

class ExpirationCheckAPIView(APIView):
    """
    POST /api/customers/check-expiration/ → run the scan (cron secret or admin)
    GET  /api/customers/check-expiration/ → expired / expiring soon report (admin)
    """

    throttle_classes: ClassVar = [StandardAPIThrottle]

    def get_permissions(self) -> list:
        if self.request.method == 'POST':
            return [(HasCronSecret | IsAdminRole)()]
        return [IsAdminRole()]

    def get(self, request: Request) -> Response:
        return success_response(ExpirationScanner.status_report())

    def post(self, request: Request) -> Response:
        report = ExpirationScanner().scan()
        return success_response(report.to_dict(), message=report.message)


@api_view(['GET'])
@authentication_classes([])
@permission_classes([HasCronSecret])
@throttle_classes([CronThrottle])
def cron_check_expired_api(request: Request) -> Response:
    """
    ⏰ Scheduler entry point: ``Authorization: Bearer <CRON_SECRET>``.

    GET /api/cron/check-expired/
    """
    logger.info("🔄 [API] Cron-triggered expiration scan")
    report = ExpirationScanner().scan()
    return success_response(report.to_dict(), message=report.message)
