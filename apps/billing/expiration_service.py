"""
Expiration scanning - LumiCloud platform

Finds active customers whose paid period has ended and suspends them, one at
a time. A customer whose panel suspension fails stays ACTIVE and is picked up
again on the next scan.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from django.utils import timezone

from apps.audit.services import ActivityContext, ActivityEntry, ActivityLogService
from apps.customers.models import Customer
from apps.provisioning.hestia_commands import SuspendUser
from apps.provisioning.hestia_gateway import HestiaConfig
from apps.provisioning.hestia_resilience import CancellationToken, ResilientHestiaGateway
from apps.provisioning.lifecycle import StepPolicy, run_step
from apps.provisioning.models import Website

from .services import days_between

logger = logging.getLogger(__name__)

ACTION_AUTO_SUSPENDED = "customer.auto_suspended"
EXPIRING_SOON_DAYS = 7


@dataclass
class ScanReport:
    """Totals and per-customer details of one expiration scan"""

    processed: int = 0
    suspended: list[str] = field(default_factory=list)
    failed: list[dict[str, str]] = field(default_factory=list)
    dry_run: bool = False
    cancelled: bool = False

    @property
    def message(self) -> str:
        if self.processed == 0:
            return "No expired customers found"
        return f"Processed {self.processed} expired customers"

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "processed": self.processed,
            "suspended": len(self.suspended),
            "failed": len(self.failed),
            "dry_run": self.dry_run,
            "cancelled": self.cancelled,
            "details": {"suspended": self.suspended, "failed": self.failed},
        }


class ExpirationScanner:
    """Suspend customers whose subscription has expired"""

    def __init__(self, gateway: Any | None = None, token: CancellationToken | None = None):
        self._gateway = gateway
        self.token = token or CancellationToken()

    def _get_gateway(self) -> Any:
        if self._gateway is None:
            self._gateway = ResilientHestiaGateway.for_config(HestiaConfig.admin_from_settings(), token=self.token)
        return self._gateway

    def scan(self, now: datetime | None = None, dry_run: bool = False) -> ScanReport:
        """
        Suspend every ACTIVE customer with ``expires_at < now``.

        Each customer is handled independently: a failed panel call is
        recorded in the report and the scan moves on. Running the scan twice
        in a row processes nothing the second time.
        """
        now = now or timezone.now()
        report = ScanReport(dry_run=dry_run)
        expired = list(Customer.objects.active().expired(now).order_by("expires_at"))

        if not expired:
            logger.info("⏭️ [Expiration] No expired customers found")
            return report

        logger.info(f"🔄 [Expiration] Found {len(expired)} expired customers{' (dry run)' if dry_run else ''}")

        for customer in expired:
            if self.token.is_cancelled:
                logger.warning(f"⚠️ [Expiration] Scan cancelled after {report.processed} customers")
                report.cancelled = True
                break

            report.processed += 1
            if dry_run:
                report.suspended.append(customer.email)
                continue

            step = run_step(self._get_gateway(), SuspendUser(customer.hestia_username), StepPolicy.BLOCKING)
            if step.is_err():
                error = step.unwrap_err()
                logger.error(f"❌ [Expiration] Failed to suspend {customer.email}: {error.message}")
                report.failed.append({"email": customer.email, "error": error.message})
                continue

            self._record_suspension(customer)
            report.suspended.append(customer.email)

        logger.info(
            f"✅ [Expiration] Scan complete: {report.processed} processed, "
            f"{len(report.suspended)} suspended, {len(report.failed)} failed"
        )
        return report

    @staticmethod
    def _record_suspension(customer: Customer) -> None:
        customer.status = Customer.STATUS_SUSPENDED
        customer.save(update_fields=["status", "updated_at"])
        website_count = Website.objects.filter(customer=customer).update(
            status=Website.STATUS_SUSPENDED, updated_at=timezone.now()
        )

        ActivityLogService.log(
            ActivityEntry(
                action=ACTION_AUTO_SUSPENDED,
                resource="customer",
                resource_id=customer.pk,
                description=(
                    f"Customer {customer.email} suspended due to expired subscription. "
                    f"Expired at: {customer.expires_at.isoformat()}"
                ),
                metadata={"expires_at": customer.expires_at, "website_count": website_count},
            ),
            ActivityContext.system(),
        )

    @staticmethod
    def status_report(now: datetime | None = None) -> dict[str, Any]:
        """Expired-but-active, expiring within a week, and suspended-after-expiry customers"""
        now = now or timezone.now()
        soon = now + timedelta(days=EXPIRING_SOON_DAYS)

        def summary(customer: Customer) -> dict[str, Any]:
            return {
                "id": customer.pk,
                "name": customer.name,
                "email": customer.email,
                "expires_at": customer.expires_at.isoformat() if customer.expires_at else None,
                "package_id": customer.package_id,
            }

        expired = [
            {**summary(c), "days_overdue": days_between(c.expires_at, now)}
            for c in Customer.objects.active().expired(now)
        ]
        expiring_soon = [
            {**summary(c), "days_remaining": days_between(now, c.expires_at)}
            for c in Customer.objects.active().filter(expires_at__gte=now, expires_at__lte=soon)
        ]
        suspended = [summary(c) for c in Customer.objects.suspended().expired(now)]

        return {
            "expired": expired,
            "expiring_soon": expiring_soon,
            "suspended": suspended,
            "summary": {
                "total_expired": len(expired),
                "total_expiring_soon": len(expiring_soon),
                "total_suspended": len(suspended),
            },
        }
