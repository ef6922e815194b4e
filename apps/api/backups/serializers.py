# ===============================================================================
# BACKUP API SERIALIZERS 💾
# ===============================================================================

from rest_framework import serializers


class BackupRestoreSerializer(serializers.Serializer):
    backup = serializers.CharField(max_length=255)
