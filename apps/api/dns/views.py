# ===============================================================================
# DNS API VIEWS 🧭
# ===============================================================================

from typing import ClassVar

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.core import StandardAPIThrottle, activity_context, error_response, success_response, validation_error_response
from apps.provisioning.panel_service import DnsService

from .serializers import DnsRecordCreateSerializer


class DnsRecordAPIView(APIView):
    """
    🧭 DNS records of the signed-in customer's domains.

    GET    /api/dns/?domain=shop.example.com → records (first website when omitted)
    POST   /api/dns/ {"domain", "type", "name", "value", "priority", "ttl"}
    DELETE /api/dns/?domain=shop.example.com&id=3
    """

    permission_classes: ClassVar = [IsAuthenticated]
    throttle_classes: ClassVar = [StandardAPIThrottle]

    def get(self, request: Request) -> Response:
        result = DnsService().list_records(request.user.email, request.query_params.get('domain', ''))
        if result.is_err():
            return error_response(result.unwrap_err())
        return success_response(result.unwrap())

    def post(self, request: Request) -> Response:
        serializer = DnsRecordCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        data = serializer.validated_data
        result = DnsService().add_record(
            request.user.email,
            data['domain'],
            data['type'],
            data['value'],
            name=data['name'],
            priority=data['priority'],
            ttl=data['ttl'],
            context=activity_context(request),
        )
        if result.is_err():
            return error_response(result.unwrap_err())
        return success_response(
            result.unwrap(), message="DNS record added successfully", status_code=status.HTTP_201_CREATED
        )

    def delete(self, request: Request) -> Response:
        result = DnsService().delete_record(
            request.user.email,
            request.query_params.get('domain', ''),
            request.query_params.get('id'),
            activity_context(request),
        )
        if result.is_err():
            return error_response(result.unwrap_err())
        return success_response(message="DNS record deleted successfully")
