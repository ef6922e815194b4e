# ===============================================================================
# MAIL API SERIALIZERS ✉️
# ===============================================================================

from rest_framework import serializers


class MailAccountCreateSerializer(serializers.Serializer):
    account = serializers.CharField(max_length=64)
    password = serializers.CharField(min_length=8, max_length=128, write_only=True, trim_whitespace=False)
    domain = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
