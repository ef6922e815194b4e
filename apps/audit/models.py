"""
Activity log for account lifecycle operations.
Append-only: rows are written once and never updated or deleted.
"""

import uuid
from typing import Any, ClassVar

from django.conf import settings
from django.db import models

SYSTEM_ACTOR_IP = 'system'


class ActivityLogQuerySet(models.QuerySet):
    def delete(self) -> tuple[int, dict[str, int]]:
        raise PermissionError("Activity log entries are immutable")


class ActivityLog(models.Model):
    """Immutable record of an administrative or automated action."""

    STATUS_SUCCESS = 'SUCCESS'
    STATUS_PARTIAL = 'PARTIAL'
    STATUS_FAILED = 'FAILED'

    STATUS_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        (STATUS_SUCCESS, 'Success'),
        (STATUS_PARTIAL, 'Partial'),
        (STATUS_FAILED, 'Failed'),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)

    # Who (null user = system actor)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    ip_address = models.CharField(max_length=64, blank=True)

    # What
    action = models.CharField(max_length=64, db_index=True)
    resource = models.CharField(max_length=32)
    resource_id = models.CharField(max_length=64, blank=True, db_index=True)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_SUCCESS)
    metadata = models.JSONField(default=dict, blank=True)

    objects = ActivityLogQuerySet.as_manager()

    class Meta:
        db_table = 'activity_log'
        ordering: ClassVar[tuple[str, ...]] = ('-timestamp',)
        indexes: ClassVar[tuple[models.Index, ...]] = (
            models.Index(fields=['resource', 'resource_id', '-timestamp'], name='idx_activity_resource'),
            models.Index(fields=['action', '-timestamp'], name='idx_activity_action'),
        )

    def __str__(self) -> str:
        return f"{self.action} on {self.resource}:{self.resource_id} by {self.user or 'System'}"

    @property
    def is_system(self) -> bool:
        return self.user_id is None

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self._state.adding:
            raise PermissionError("Activity log entries are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args: Any, **kwargs: Any) -> tuple[int, dict[str, int]]:
        raise PermissionError("Activity log entries are immutable")
