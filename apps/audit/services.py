"""
Activity logging services for the LumiCloud platform
One entry per lifecycle operation, written after the local state change.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from django.db.models import Q, QuerySet

from .models import SYSTEM_ACTOR_IP, ActivityLog

if TYPE_CHECKING:
    from apps.users.models import User

logger = logging.getLogger(__name__)


class ActivityJSONEncoder(json.JSONEncoder):
    """
    JSON encoder for activity metadata.

    Handles UUIDs, datetimes, Decimals and model instances, which show up in
    metadata built from workflow outcomes.
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, uuid.UUID):
            return str(obj)
        elif isinstance(obj, (datetime, date)):
            return obj.isoformat()
        elif isinstance(obj, Decimal):
            return str(obj)  # Preserve precision as string
        elif hasattr(obj, 'pk'):  # Django model instance
            return f"{obj.__class__.__name__}(pk={obj.pk})"
        return super().default(obj)


def serialize_metadata(metadata: dict[str, Any]) -> dict[str, Any]:
    """Round-trip metadata through ActivityJSONEncoder so it is JSONField-safe"""
    if not metadata:
        return {}

    try:
        return json.loads(json.dumps(metadata, cls=ActivityJSONEncoder, ensure_ascii=False))
    except (TypeError, ValueError) as e:
        logger.error(f"🔥 [Activity] Failed to serialize metadata: {e}")
        return {
            'serialization_error': str(e),
            'original_keys': list(metadata.keys()),
        }


@dataclass
class ActivityContext:
    """Who triggered the operation. ``user=None`` means the system actor."""

    user: User | None = None
    ip_address: str = SYSTEM_ACTOR_IP

    @classmethod
    def system(cls) -> ActivityContext:
        return cls(user=None, ip_address=SYSTEM_ACTOR_IP)


@dataclass
class ActivityEntry:
    """Parameter object describing a single activity log entry"""

    action: str
    resource: str
    resource_id: Any
    description: str
    status: str = ActivityLog.STATUS_SUCCESS
    metadata: dict[str, Any] = field(default_factory=dict)


class ActivityLogService:
    """Append-only activity log writer"""

    @staticmethod
    def log(entry: ActivityEntry, context: ActivityContext | None = None) -> ActivityLog:
        if context is None:
            context = ActivityContext.system()

        activity = ActivityLog.objects.create(
            user=context.user,
            ip_address=context.ip_address,
            action=entry.action,
            resource=entry.resource,
            resource_id=str(entry.resource_id) if entry.resource_id is not None else '',
            description=entry.description,
            status=entry.status,
            metadata=serialize_metadata(entry.metadata),
        )

        logger.info(
            f"✅ [Activity] {entry.action} logged for {entry.resource}:{activity.resource_id} "
            f"by {context.user.email if context.user else 'System'}"
        )
        return activity

    @staticmethod
    def for_resource(resource: str, resource_id: Any) -> list[ActivityLog]:
        return list(ActivityLog.objects.filter(resource=resource, resource_id=str(resource_id)))

    @staticmethod
    def search(
        status: str = '',
        search: str = '',
        resource: str = '',
        resource_id: str = '',
        action: str = '',
    ) -> QuerySet[ActivityLog]:
        """Newest-first entries matching every non-empty filter"""
        queryset = ActivityLog.objects.select_related('user')
        if status:
            queryset = queryset.filter(status=status.upper())
        if resource:
            queryset = queryset.filter(resource=resource)
        if resource_id:
            queryset = queryset.filter(resource_id=str(resource_id))
        if action:
            queryset = queryset.filter(action=action)
        if search:
            queryset = queryset.filter(
                Q(action__icontains=search) | Q(resource__icontains=search) | Q(description__icontains=search)
            )
        return queryset
