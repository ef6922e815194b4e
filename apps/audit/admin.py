"""
Activity log admin - read only.
"""

from typing import ClassVar

from django.contrib import admin

from .models import ActivityLog


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display: ClassVar[list[str]] = ('timestamp', 'action', 'resource', 'resource_id', 'user', 'status', 'ip_address')
    list_filter: ClassVar[list[str]] = ('action', 'resource', 'status', 'timestamp')
    search_fields: ClassVar[list[str]] = ('description', 'resource_id', 'user__email')
    date_hierarchy = 'timestamp'

    def has_add_permission(self, request) -> bool:
        return False

    def has_change_permission(self, request, obj=None) -> bool:
        return False

    def has_delete_permission(self, request, obj=None) -> bool:
        return False
