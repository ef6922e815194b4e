# ===============================================================================
# DATABASE API SERIALIZERS 🗄️
# ===============================================================================

from typing import ClassVar

from rest_framework import serializers

from apps.provisioning.models import Database


class DatabaseSerializer(serializers.ModelSerializer):
    """Stored password is never returned; it is shown once on creation"""

    class Meta:
        model = Database
        fields: ClassVar = ['id', 'name', 'username', 'host', 'port', 'charset', 'created_at']
        read_only_fields: ClassVar = fields


class DatabaseCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=32)
