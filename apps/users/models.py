"""
User models for the LumiCloud platform
Email-based login for staff (admins) and hosting customers.
"""

from __future__ import annotations

from typing import Any, ClassVar

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models
from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication"""

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any) -> User:
        """Create and return a regular user with email and password"""
        if not email:
            raise ValueError('The Email field must be set')
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any) -> User:
        """Create and return a superuser with email and password"""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(email, password, **extra_fields)


class User(AbstractUser):
    """
    Login account. Staff carry a staff_role; customers leave it empty and are
    linked to their Customer record through ``Customer.user``.
    """

    STAFF_ROLE_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ('admin', _('System Administrator')),
        ('support', _('Support Agent')),
        ('billing', _('Billing Staff')),
    )

    username = None  # Remove username field, using email instead
    email = models.EmailField(_('email address'), unique=True)

    staff_role = models.CharField(
        max_length=20,
        choices=STAFF_ROLE_CHOICES,
        blank=True,
        default='',
        help_text=_('Staff role for internal staff. Leave empty for customer users.')
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS: ClassVar[list[str]] = []

    class Meta:
        db_table = 'users'
        verbose_name = _('User')
        verbose_name_plural = _('Users')
        indexes: ClassVar[tuple[models.Index, ...]] = (
            models.Index(fields=['staff_role'], name='idx_users_staff_role'),
        )

    def __str__(self) -> str:
        return self.email

    @property
    def is_admin(self) -> bool:
        """Admin role: superusers and staff with the 'admin' role"""
        return bool(self.is_superuser or self.staff_role == 'admin')
