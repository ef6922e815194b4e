# ===============================================================================
# BACKUP API VIEWS 💾
# ===============================================================================

from typing import ClassVar

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.core import StandardAPIThrottle, activity_context, error_response, success_response, validation_error_response
from apps.provisioning.panel_service import BackupService

from .serializers import BackupRestoreSerializer


class BackupAPIView(APIView):
    """
    💾 Backups of the signed-in customer's panel account.

    GET  /api/backups/ → available backups
    POST /api/backups/ → start a new backup
    PUT  /api/backups/ {"backup": "custjohn1a2b.2026-10-18_05-00-00.tar"} → restore it
    """

    permission_classes: ClassVar = [IsAuthenticated]
    throttle_classes: ClassVar = [StandardAPIThrottle]

    def get(self, request: Request) -> Response:
        result = BackupService().list_backups(request.user.email)
        if result.is_err():
            return error_response(result.unwrap_err())
        return success_response(result.unwrap())

    def post(self, request: Request) -> Response:
        result = BackupService().create_backup(request.user.email, activity_context(request))
        if result.is_err():
            return error_response(result.unwrap_err())
        return success_response(message="Backup created successfully", status_code=status.HTTP_201_CREATED)

    def put(self, request: Request) -> Response:
        serializer = BackupRestoreSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = BackupService().restore_backup(
            request.user.email, serializer.validated_data['backup'], activity_context(request)
        )
        if result.is_err():
            return error_response(result.unwrap_err())
        return success_response({'backup': result.unwrap()}, message="Backup restored successfully")
