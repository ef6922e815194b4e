# ===============================================================================
# ACTIVITY LOG API VIEWS 📋
# ===============================================================================

from typing import ClassVar

from django.core.paginator import Paginator
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.core import IsAdminRole, StandardAPIThrottle, success_response
from apps.audit.services import ActivityLogService

from .serializers import ActivityLogSerializer

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 200


class ActivityLogListAPIView(APIView):
    """
    📋 Admin view of the activity log, newest first.

    GET /api/activity/?page=1&limit=20&status=PARTIAL&search=suspend
        &resource=customer&resource_id=42&action=customer.suspended
    """

    permission_classes: ClassVar = [IsAdminRole]
    throttle_classes: ClassVar = [StandardAPIThrottle]

    def get(self, request: Request) -> Response:
        params = request.query_params
        queryset = ActivityLogService.search(
            status=params.get('status', ''),
            search=params.get('search', ''),
            resource=params.get('resource', ''),
            resource_id=params.get('resource_id', ''),
            action=params.get('action', ''),
        )

        try:
            limit = min(max(int(params.get('limit', DEFAULT_PAGE_SIZE)), 1), MAX_PAGE_SIZE)
        except ValueError:
            limit = DEFAULT_PAGE_SIZE
        paginator = Paginator(queryset, limit)
        page = paginator.get_page(params.get('page', 1))

        return success_response(
            {
                'activities': ActivityLogSerializer(page.object_list, many=True).data,
                'pagination': {
                    'page': page.number,
                    'limit': limit,
                    'total': paginator.count,
                    'total_pages': paginator.num_pages,
                },
            }
        )
