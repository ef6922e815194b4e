# ===============================================================================
# DATABASE API VIEWS 🗄️
# ===============================================================================

from typing import ClassVar

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.core import StandardAPIThrottle, activity_context, error_response, success_response, validation_error_response
from apps.provisioning.database_service import DatabaseService

from .serializers import DatabaseCreateSerializer, DatabaseSerializer


class DatabaseListCreateAPIView(APIView):
    """
    GET  /api/databases/ → local records plus the panel's live listing
    POST /api/databases/ → {"name": "shop"} creates ``<hestia_username>_shop``
    """

    permission_classes: ClassVar = [IsAuthenticated]
    throttle_classes: ClassVar = [StandardAPIThrottle]

    def get(self, request: Request) -> Response:
        result = DatabaseService().list_databases(request.user.email)
        if result.is_err():
            return error_response(result.unwrap_err())

        listing = result.unwrap()
        return success_response(
            {'local': DatabaseSerializer(listing['local'], many=True).data, 'hestia': listing['hestia']}
        )

    def post(self, request: Request) -> Response:
        serializer = DatabaseCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = DatabaseService().create_database(
            request.user.email, serializer.validated_data['name'], activity_context(request)
        )
        if result.is_err():
            return error_response(result.unwrap_err())

        database, password = result.unwrap()
        return success_response(
            {**DatabaseSerializer(database).data, 'password': password},
            message=f"Database {database.name} created successfully",
            status_code=status.HTTP_201_CREATED,
        )


class DatabaseDetailAPIView(APIView):
    """DELETE /api/databases/<id>/"""

    permission_classes: ClassVar = [IsAuthenticated]
    throttle_classes: ClassVar = [StandardAPIThrottle]

    def delete(self, request: Request, database_id: int) -> Response:
        result = DatabaseService().delete_database(request.user.email, database_id, activity_context(request))
        if result.is_err():
            return error_response(result.unwrap_err())
        return success_response(message="Database deleted successfully")
