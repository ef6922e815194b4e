"""
Customer models for the LumiCloud platform
A customer owns one Hestia panel account plus the websites and databases on it.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import ClassVar

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.common.encryption import decrypt_sensitive_data, encrypt_sensitive_data


class CustomerQuerySet(models.QuerySet['Customer']):
    def active(self) -> CustomerQuerySet:
        return self.filter(status=Customer.STATUS_ACTIVE)

    def suspended(self) -> CustomerQuerySet:
        return self.filter(status=Customer.STATUS_SUSPENDED)

    def expired(self, now: datetime | None = None) -> CustomerQuerySet:
        """Customers whose paid period ended before ``now``"""
        return self.filter(expires_at__isnull=False, expires_at__lt=now or timezone.now())


class Customer(models.Model):
    """
    Hosting customer.

    ``status`` is the locally recorded state; SUSPENDED here does not by itself
    prove the panel account is suspended.
    """

    STATUS_ACTIVE = 'ACTIVE'
    STATUS_SUSPENDED = 'SUSPENDED'

    STATUS_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        (STATUS_ACTIVE, _('Active')),
        (STATUS_SUSPENDED, _('Suspended')),
    )

    BILLING_CYCLE_CHOICES: ClassVar[tuple[tuple[str, str], ...]] = (
        ('MONTHLY', _('Monthly')),
        ('QUARTERLY', _('Quarterly')),
        ('YEARLY', _('Yearly')),
    )

    # Identity
    name = models.CharField(max_length=255, verbose_name=_('Name'))
    email = models.EmailField(unique=True, verbose_name=_('Email'))
    phone = models.CharField(max_length=20, blank=True, verbose_name=_('Phone'))
    company = models.CharField(max_length=255, blank=True, verbose_name=_('Company'))

    # Login account for the customer panel
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='customer_profile',
    )

    # Hestia panel credentials
    hestia_username = models.CharField(max_length=64, unique=True, verbose_name=_('Hestia Username'))
    _hestia_password = models.CharField(max_length=512, blank=True, db_column='hestia_password')

    # Lifecycle & billing
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_ACTIVE,
        verbose_name=_('Status'),
    )
    package_id = models.CharField(max_length=32, default='starter', verbose_name=_('Package'))
    billing_cycle = models.CharField(max_length=20, choices=BILLING_CYCLE_CHOICES, default='MONTHLY')
    monthly_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    expires_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Expires At'))
    next_billing_date = models.DateTimeField(null=True, blank=True, verbose_name=_('Next Billing Date'))

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_customers',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomerQuerySet.as_manager()

    class Meta:
        db_table = 'customers'
        verbose_name = _('Customer')
        verbose_name_plural = _('Customers')
        ordering: ClassVar[tuple[str, ...]] = ('-created_at',)
        indexes: ClassVar[tuple[models.Index, ...]] = (
            models.Index(fields=['status', 'expires_at'], name='idx_customers_status_expiry'),
        )

    def __str__(self) -> str:
        return f"{self.name} ({self.email})"

    # ===============================================================================
    # CREDENTIALS
    # ===============================================================================

    def get_hestia_password(self) -> str:
        return decrypt_sensitive_data(self._hestia_password)

    def set_hestia_password(self, raw_password: str) -> None:
        self._hestia_password = encrypt_sensitive_data(raw_password)

    @property
    def has_panel_credentials(self) -> bool:
        return bool(self.hestia_username and self._hestia_password)

    # ===============================================================================
    # LIFECYCLE HELPERS
    # ===============================================================================

    @property
    def is_suspended(self) -> bool:
        return self.status == self.STATUS_SUSPENDED

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.expires_at is not None and self.expires_at < (now or timezone.now())
