# ===============================================================================
# MAIL API VIEWS ✉️
# ===============================================================================

from typing import ClassVar

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.core import StandardAPIThrottle, activity_context, error_response, success_response, validation_error_response
from apps.provisioning.panel_service import MailService

from .serializers import MailAccountCreateSerializer


class MailAccountAPIView(APIView):
    """
    ✉️ Mail accounts of the signed-in customer.

    GET    /api/mail/?domain=shop.example.com → accounts (first website when omitted)
    POST   /api/mail/ {"account": "info", "password": "...", "domain": "..."}
    DELETE /api/mail/?account=info&domain=shop.example.com
    """

    permission_classes: ClassVar = [IsAuthenticated]
    throttle_classes: ClassVar = [StandardAPIThrottle]

    def get(self, request: Request) -> Response:
        result = MailService().list_accounts(request.user.email, request.query_params.get('domain', ''))
        if result.is_err():
            return error_response(result.unwrap_err())
        return success_response(result.unwrap())

    def post(self, request: Request) -> Response:
        serializer = MailAccountCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        data = serializer.validated_data
        result = MailService().create_account(
            request.user.email, data['account'], data['password'], data['domain'], activity_context(request)
        )
        if result.is_err():
            return error_response(result.unwrap_err())

        created = result.unwrap()
        return success_response(
            created,
            message=f"Email account {created['email']} created successfully",
            status_code=status.HTTP_201_CREATED,
        )

    def delete(self, request: Request) -> Response:
        result = MailService().delete_account(
            request.user.email,
            request.query_params.get('account', ''),
            request.query_params.get('domain', ''),
            activity_context(request),
        )
        if result.is_err():
            return error_response(result.unwrap_err())
        return success_response(message="Email account deleted successfully")
