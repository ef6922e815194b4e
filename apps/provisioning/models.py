"""
Provisioning models for the LumiCloud platform
Websites and databases hosted on a customer's Hestia account.
"""

from __future__ import annotations

from typing import ClassVar

from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.common.encryption import decrypt_sensitive_data, encrypt_sensitive_data

DEFAULT_PHP_VERSION = '8.1'
DEFAULT_DOCUMENT_ROOT = 'public_html'


class Website(models.Model):
    """
    Web domain on the panel.

    Every website has a generated subdomain under the platform's primary
    domain; a customer-owned domain can be attached later as an alias.
    """

    STATUS_PENDING = 'PENDING'
    STATUS_DNS_PENDING = 'DNS_PENDING'
    STATUS_SSL_PENDING = 'SSL_PENDING'
    STATUS_ACTIVE = 'ACTIVE'
    STATUS_SUSPENDED = 'SUSPENDED'

    STATUS_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        (STATUS_PENDING, _('Pending')),
        (STATUS_DNS_PENDING, _('DNS Pending')),
        (STATUS_SSL_PENDING, _('SSL Pending')),
        (STATUS_ACTIVE, _('Active')),
        (STATUS_SUSPENDED, _('Suspended')),
    )

    customer = models.ForeignKey('customers.Customer', on_delete=models.CASCADE, related_name='websites')

    subdomain = models.CharField(max_length=255, unique=True, verbose_name=_('Subdomain'))
    custom_domain = models.CharField(max_length=255, unique=True, null=True, blank=True, verbose_name=_('Custom Domain'))
    aliases = models.JSONField(default=list, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    ip_address = models.CharField(max_length=64, blank=True)
    php_version = models.CharField(max_length=10, default=DEFAULT_PHP_VERSION)
    document_root = models.CharField(max_length=255, default=DEFAULT_DOCUMENT_ROOT)

    ssl_enabled = models.BooleanField(default=False)
    ssl_force = models.BooleanField(default=False)
    ssl_verified = models.BooleanField(default=False)
    dns_verified = models.BooleanField(default=False)

    disk_usage_mb = models.PositiveIntegerField(default=0)
    bandwidth_usage_mb = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'websites'
        verbose_name = _('Website')
        verbose_name_plural = _('Websites')
        ordering: ClassVar[tuple[str, ...]] = ('-created_at',)
        indexes: ClassVar[tuple[models.Index, ...]] = (
            models.Index(fields=['customer', 'status'], name='idx_websites_customer_status'),
        )

    def __str__(self) -> str:
        return self.domain

    @property
    def domain(self) -> str:
        """Domain the panel knows this website by in per-domain commands"""
        return self.custom_domain or self.subdomain

    @property
    def is_suspended(self) -> bool:
        return self.status == self.STATUS_SUSPENDED


class Database(models.Model):
    """MySQL database created on the customer's Hestia account"""

    customer = models.ForeignKey('customers.Customer', on_delete=models.CASCADE, related_name='databases')

    name = models.CharField(max_length=64, unique=True)
    username = models.CharField(max_length=64)
    _password = models.CharField(max_length=512, blank=True, db_column='password')
    host = models.CharField(max_length=255, default='localhost')
    port = models.PositiveIntegerField(default=3306)
    charset = models.CharField(max_length=32, default='utf8mb4')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'databases'
        verbose_name = _('Database')
        verbose_name_plural = _('Databases')
        ordering: ClassVar[tuple[str, ...]] = ('-created_at',)

    def __str__(self) -> str:
        return self.name

    def get_password(self) -> str:
        return decrypt_sensitive_data(self._password)

    def set_password(self, raw_password: str) -> None:
        self._password = encrypt_sensitive_data(raw_password)
