# ===============================================================================
# CUSTOMER API VIEWS 🎯
# ===============================================================================

import logging
from typing import Any, ClassVar

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.core import (
    IsAdminRole,
    LinkPanelThrottle,
    StandardAPIThrottle,
    activity_context,
    error_response,
    success_response,
    validation_error_response,
)
from apps.customers.customer_service import CustomerService
from apps.customers.models import Customer
from apps.provisioning.suspension_service import SuspensionService

from .serializers import CustomerCreateSerializer, CustomerSerializer, CustomerUpdateSerializer, LinkPanelSerializer

logger = logging.getLogger(__name__)


# ===============================================================================
# CUSTOMER MANAGEMENT API 👥
# ===============================================================================

class CustomerListCreateAPIView(APIView):
    """
    👥 Admin customer list and onboarding.

    GET  /api/customers/ → all customers
    POST /api/customers/ → create panel account, first website, optional database
    """

    permission_classes: ClassVar = [IsAdminRole]
    throttle_classes: ClassVar = [StandardAPIThrottle]

    def get(self, request: Request) -> Response:
        customers = Customer.objects.prefetch_related('websites')
        return success_response(CustomerSerializer(customers, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = CustomerCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = CustomerService().create_customer(serializer.to_onboarding(), request.user, activity_context(request))
        if result.is_err():
            return error_response(result.unwrap_err())

        outcome = result.unwrap()
        return success_response(
            outcome.to_dict(),
            message=f"Customer {outcome.customer.name} created successfully",
            status_code=status.HTTP_201_CREATED,
        )


class CustomerDetailAPIView(APIView):
    """
    GET    /api/customers/<id>/ → customer detail
    PATCH  /api/customers/<id>/ → update profile and billing fields (PUT is an alias)
    DELETE /api/customers/<id>/ → delete panel account, then local records
    """

    permission_classes: ClassVar = [IsAdminRole]
    throttle_classes: ClassVar = [StandardAPIThrottle]

    def get(self, request: Request, customer_id: int) -> Response:
        customer = Customer.objects.filter(pk=customer_id).first()
        if customer is None:
            return Response({'success': False, 'error': 'Customer not found'}, status=status.HTTP_404_NOT_FOUND)
        return success_response(CustomerSerializer(customer).data)

    def patch(self, request: Request, customer_id: int) -> Response:
        serializer = CustomerUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = CustomerService().update_customer(
            customer_id, serializer.validated_data, request.user, activity_context(request)
        )
        if result.is_err():
            return error_response(result.unwrap_err())
        return success_response(CustomerSerializer(result.unwrap()).data, message="Customer updated successfully")

    def put(self, request: Request, customer_id: int) -> Response:
        return self.patch(request, customer_id)

    def delete(self, request: Request, customer_id: int) -> Response:
        result = CustomerService().delete_customer(customer_id, request.user, activity_context(request))
        if result.is_err():
            return error_response(result.unwrap_err())
        return success_response(message=f"Customer {result.unwrap()} deleted successfully")


# ===============================================================================
# SUSPENSION API ⏸️
# ===============================================================================

class CustomerSuspensionAPIView(APIView):
    """
    ⏸️ Suspend or reactivate a customer on the panel.

    POST   /api/customers/<id>/suspend/ → suspend account and websites
    DELETE /api/customers/<id>/suspend/ → unsuspend account and websites

    Domain-level failures do not fail the request; they are reported in
    ``data.website_results`` with ``data.partial = true``.
    """

    permission_classes: ClassVar = [IsAuthenticated]
    throttle_classes: ClassVar = [StandardAPIThrottle]

    def post(self, request: Request, customer_id: int) -> Response:
        return self._respond(SuspensionService().suspend(customer_id, request.user, activity_context(request)), 'suspended')

    def delete(self, request: Request, customer_id: int) -> Response:
        return self._respond(
            SuspensionService().unsuspend(customer_id, request.user, activity_context(request)), 'unsuspended'
        )

    @staticmethod
    def _respond(result: Any, verb: str) -> Response:
        if result.is_err():
            return error_response(result.unwrap_err())

        outcome = result.unwrap()
        message = f"Customer {verb} successfully"
        if outcome.partial:
            message = f"Customer {verb}; {len(outcome.failed_domains)} website(s) could not be updated on the panel"
        return success_response(outcome.to_dict(), message=message)


# ===============================================================================
# PANEL ACCOUNT LINKING 🔗
# ===============================================================================

@api_view(['POST'])
@permission_classes([IsAuthenticated])
@throttle_classes([LinkPanelThrottle])
def link_panel_api(request: Request) -> Response:
    """
    🔗 Verify the signed-in customer's own Hestia credentials and store them.

    POST /api/customers/link-panel/
    {"username": "custjohn1a2b", "password": "..."}
    """
    serializer = LinkPanelSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer.errors)

    result = CustomerService().link_panel_account(
        request.user.email,
        serializer.validated_data['password'],
        serializer.validated_data['username'],
        activity_context(request),
    )
    if result.is_err():
        return error_response(result.unwrap_err())

    customer = result.unwrap()
    return success_response(
        {'hestia_username': customer.hestia_username},
        message="Hestia account verified and linked.",
    )
