# ===============================================================================
# WEBSITE API SERIALIZERS 🌐
# ===============================================================================

from typing import ClassVar

from rest_framework import serializers

from apps.provisioning.models import DEFAULT_PHP_VERSION, Website
from apps.provisioning.website_service import SUPPORTED_PHP_VERSIONS


class WebsiteSerializer(serializers.ModelSerializer):
    url = serializers.SerializerMethodField()

    class Meta:
        model = Website
        fields: ClassVar = [
            'id', 'subdomain', 'custom_domain', 'aliases', 'url', 'status', 'php_version', 'document_root',
            'ssl_enabled', 'ssl_force', 'ssl_verified', 'dns_verified', 'created_at',
        ]
        read_only_fields: ClassVar = fields

    def get_url(self, obj: Website) -> str:
        return f"https://{obj.domain}"


class WebsiteCreateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=64)
    php_version = serializers.ChoiceField(choices=SUPPORTED_PHP_VERSIONS, default=DEFAULT_PHP_VERSION)
    enable_ssl = serializers.BooleanField(default=True)


class CustomDomainSerializer(serializers.Serializer):
    """Format checks happen in the provisioning service"""

    website_id = serializers.IntegerField()
    custom_domain = serializers.CharField(max_length=255)


class DocumentRootSerializer(serializers.Serializer):
    directory = serializers.CharField(max_length=255)
    website_id = serializers.IntegerField(required=False, allow_null=True, default=None)


class PhpVersionSerializer(serializers.Serializer):
    php_version = serializers.ChoiceField(choices=SUPPORTED_PHP_VERSIONS)
