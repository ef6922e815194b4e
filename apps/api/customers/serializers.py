# ===============================================================================
# CUSTOMER API SERIALIZERS 📊
# ===============================================================================

from typing import Any, ClassVar

from rest_framework import serializers

from apps.customers.customer_service import CustomerOnboarding
from apps.customers.models import Customer
from apps.products.packages import PACKAGES
from apps.provisioning.models import DEFAULT_PHP_VERSION
from apps.provisioning.website_service import SUPPORTED_PHP_VERSIONS, validate_custom_domain


class CustomerSerializer(serializers.ModelSerializer):
    """Customer as shown in the admin dashboard; never exposes panel credentials"""

    website_count = serializers.IntegerField(source='websites.count', read_only=True)

    class Meta:
        model = Customer
        fields: ClassVar = [
            'id', 'name', 'email', 'phone', 'company', 'hestia_username', 'status',
            'package_id', 'billing_cycle', 'monthly_price', 'expires_at', 'next_billing_date',
            'website_count', 'created_at',
        ]
        read_only_fields: ClassVar = fields


class CustomerCreateSerializer(serializers.Serializer):
    """Onboarding input for a new hosting customer"""

    name = serializers.CharField(min_length=2, max_length=255)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')
    company = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    custom_domain = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    package_id = serializers.ChoiceField(choices=[package.id for package in PACKAGES], default='starter')
    php_version = serializers.ChoiceField(choices=SUPPORTED_PHP_VERSIONS, default=DEFAULT_PHP_VERSION)
    need_database = serializers.BooleanField(default=False)

    def validate_email(self, value: str) -> str:
        if Customer.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("A customer with this email already exists.")
        return value.lower()

    def validate_custom_domain(self, value: str) -> str:
        if not value:
            return ''
        result = validate_custom_domain(value)
        if result.is_err():
            raise serializers.ValidationError(result.unwrap_err().message)
        return result.unwrap()

    def to_onboarding(self) -> CustomerOnboarding:
        data: dict[str, Any] = self.validated_data
        return CustomerOnboarding(**data)


class LinkPanelSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=64, required=False, allow_blank=True, default='')
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class CustomerUpdateSerializer(serializers.Serializer):
    """PATCH/PUT body; every field is optional and only sent fields change"""

    name = serializers.CharField(min_length=2, max_length=255, required=False)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    company = serializers.CharField(max_length=255, required=False, allow_blank=True)
    package_id = serializers.ChoiceField(choices=[package.id for package in PACKAGES], required=False)
    billing_cycle = serializers.ChoiceField(choices=Customer.BILLING_CYCLE_CHOICES, required=False)
