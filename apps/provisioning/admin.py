"""
Django admin configuration for Provisioning app
"""

from typing import ClassVar

from django.contrib import admin

from .models import Database, Website


@admin.register(Website)
class WebsiteAdmin(admin.ModelAdmin):
    list_display: ClassVar[list[str]] = (
        'subdomain', 'custom_domain', 'customer', 'status', 'ssl_enabled', 'php_version', 'created_at'
    )
    list_filter: ClassVar[list[str]] = ('status', 'ssl_enabled', 'php_version')
    search_fields: ClassVar[list[str]] = ('subdomain', 'custom_domain', 'customer__name', 'customer__email')
    readonly_fields: ClassVar[list[str]] = ('customer', 'subdomain', 'aliases', 'created_at', 'updated_at')
    list_select_related: ClassVar[list[str]] = ['customer']


@admin.register(Database)
class DatabaseAdmin(admin.ModelAdmin):
    """Passwords stay encrypted and are never shown here"""

    list_display: ClassVar[list[str]] = ('name', 'username', 'customer', 'host', 'created_at')
    search_fields: ClassVar[list[str]] = ('name', 'username', 'customer__email')
    fields: ClassVar[list[str]] = ['customer', 'name', 'username', 'host', 'port', 'charset', 'created_at']
    readonly_fields: ClassVar[list[str]] = ['customer', 'name', 'username', 'created_at']
