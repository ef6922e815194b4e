"""
Django admin configuration for Users app
"""

from typing import ClassVar

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Email-login user admin with the staff role exposed"""

    list_display: ClassVar[list[str]] = ('email', 'get_full_name', 'staff_role', 'is_active', 'last_login', 'date_joined')
    list_filter: ClassVar[list[str]] = ('staff_role', 'is_active', 'is_staff', 'date_joined')
    search_fields: ClassVar[list[str]] = ('email', 'first_name', 'last_name')
    ordering: ClassVar[list[str]] = ('email',)

    fieldsets: ClassVar[tuple] = (
        (None, {'fields': ('email', 'password')}),
        ('Personal info', {'fields': ('first_name', 'last_name')}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('System Role', {
            'fields': ('staff_role',),
            'description': 'System role for internal staff. Leave empty for customer users.'
        }),
        ('Important dates', {'fields': ('last_login', 'date_joined')}),
    )

    add_fieldsets: ClassVar[tuple] = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'password1', 'password2', 'staff_role'),
        }),
    )
