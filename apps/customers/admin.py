"""
Django admin configuration for Customers app
"""

from typing import ClassVar

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from apps.provisioning.models import Website

from .models import Customer


class WebsiteInline(admin.TabularInline):
    model = Website
    extra = 0
    fields: ClassVar[list[str]] = ['subdomain', 'custom_domain', 'status', 'ssl_enabled', 'php_version']
    readonly_fields: ClassVar[list[str]] = ['subdomain', 'custom_domain', 'status', 'ssl_enabled', 'php_version']
    can_delete = False


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    """
    Read-mostly customer admin. Lifecycle changes (suspend, extend, delete)
    go through the API so the panel stays in step with the database.
    """

    list_display: ClassVar[list[str]] = (
        'name', 'email', 'hestia_username', 'status', 'package_id', 'expires_at', 'created_at'
    )
    list_filter: ClassVar[list[str]] = ('status', 'package_id', 'billing_cycle', 'created_at')
    search_fields: ClassVar[list[str]] = ('name', 'email', 'company', 'hestia_username')
    readonly_fields: ClassVar[list[str]] = ('hestia_username', 'status', 'created_by', 'created_at', 'updated_at')
    inlines: ClassVar[list] = [WebsiteInline]

    fieldsets: ClassVar[tuple] = (
        (_('Basic Information'), {'fields': ('name', 'email', 'phone', 'company', 'user')}),
        (_('Hosting'), {'fields': ('hestia_username', 'status', 'package_id')}),
        (_('Billing'), {'fields': ('billing_cycle', 'monthly_price', 'expires_at', 'next_billing_date')}),
        (_('Audit'), {'fields': ('created_by', 'created_at', 'updated_at'), 'classes': ('collapse',)}),
    )

    def has_delete_permission(self, request, obj=None) -> bool:
        return False
