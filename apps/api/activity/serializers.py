# ===============================================================================
# ACTIVITY LOG API SERIALIZERS 📋
# ===============================================================================

from typing import ClassVar

from rest_framework import serializers

from apps.audit.models import ActivityLog


class ActivityLogSerializer(serializers.ModelSerializer):
    user_email = serializers.SerializerMethodField()

    class Meta:
        model = ActivityLog
        fields: ClassVar = [
            'id', 'timestamp', 'user_email', 'ip_address', 'action', 'resource', 'resource_id',
            'description', 'status', 'metadata',
        ]
        read_only_fields: ClassVar = fields

    def get_user_email(self, obj: ActivityLog) -> str | None:
        # Null user is the system actor
        return obj.user.email if obj.user else None
