# ===============================================================================
# DNS API SERIALIZERS 🧭
# ===============================================================================

from rest_framework import serializers

from apps.provisioning.panel_service import DNS_DEFAULT_TTL, DNS_RECORD_TYPES


class DnsRecordCreateSerializer(serializers.Serializer):
    domain = serializers.CharField(max_length=255)
    type = serializers.CharField(max_length=8)
    name = serializers.CharField(max_length=255, required=False, allow_blank=True, default='@')
    value = serializers.CharField(max_length=1024)
    priority = serializers.IntegerField(min_value=0, max_value=65535, required=False, allow_null=True, default=None)
    ttl = serializers.IntegerField(min_value=60, max_value=86400, required=False, default=DNS_DEFAULT_TTL)

    def validate_type(self, value: str) -> str:
        record_type = value.strip().upper()
        if record_type not in DNS_RECORD_TYPES:
            raise serializers.ValidationError(f"Supported types: {', '.join(DNS_RECORD_TYPES)}")
        return record_type
