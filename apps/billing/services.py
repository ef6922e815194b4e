"""
Billing services for the LumiCloud platform
Subscription extension and billing status for hosting customers.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from dateutil.relativedelta import relativedelta
from django.utils import timezone

from apps.audit.services import ActivityContext, ActivityEntry, ActivityLogService
from apps.common.exceptions import LifecycleError, NotFoundError, ValidationError
from apps.common.types import Err, Ok, Result
from apps.customers.models import Customer
from apps.provisioning.hestia_commands import UnsuspendUser
from apps.provisioning.hestia_gateway import HestiaConfig
from apps.provisioning.hestia_resilience import CancellationToken, ResilientHestiaGateway
from apps.provisioning.lifecycle import StepOutcome, StepPolicy, run_step
from apps.provisioning.suspension_service import require_admin

if TYPE_CHECKING:
    from apps.users.models import User

logger = logging.getLogger(__name__)

MIN_EXTENSION_MONTHS = 1
MAX_EXTENSION_MONTHS = 12
SECONDS_PER_DAY = 86400

ACTION_BILLING_EXTENDED = "billing.extended"


@dataclass
class ExtensionOutcome:
    """
    Result of a subscription extension.

    ``remote_reactivation`` is None when the customer was not suspended;
    otherwise it is the best-effort unsuspend step outcome.
    """

    customer: Customer
    months: int
    previous_expires_at: datetime | None
    remote_reactivation: StepOutcome | None = None

    @property
    def reactivation_failed(self) -> bool:
        return self.remote_reactivation is not None and not self.remote_reactivation.success

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": f"Subscription extended by {self.months} month(s)",
            "customer": {
                "id": self.customer.pk,
                "name": self.customer.name,
                "email": self.customer.email,
                "expires_at": self.customer.expires_at.isoformat() if self.customer.expires_at else None,
                "status": self.customer.status,
            },
            "remote_reactivation": self.remote_reactivation.to_dict() if self.remote_reactivation else None,
        }


def calculate_new_expiry(current: datetime | None, months: int, now: datetime) -> datetime:
    """
    Extend from the current expiry if it is still in the future, otherwise from now.

    Month arithmetic clamps to the last day of shorter months (Jan 31 + 1 month = Feb 28/29).
    """
    base = current if current is not None and current > now else now
    return base + relativedelta(months=months)


def days_between(start: datetime, end: datetime) -> int:
    """Whole days from ``start`` to ``end``, rounded up like the customer dashboard shows them"""
    return math.ceil((end - start).total_seconds() / SECONDS_PER_DAY)


class BillingExtensionService:
    """Extend customer subscriptions and reactivate suspended accounts"""

    def __init__(self, gateway: Any | None = None, token: CancellationToken | None = None):
        self._gateway = gateway
        self.token = token or CancellationToken()

    def _get_gateway(self) -> Any:
        if self._gateway is None:
            self._gateway = ResilientHestiaGateway.for_config(HestiaConfig.admin_from_settings(), token=self.token)
        return self._gateway

    def extend(
        self,
        customer_id: Any,
        months: int,
        actor: User | None,
        context: ActivityContext | None = None,
        now: datetime | None = None,
    ) -> Result[ExtensionOutcome, LifecycleError]:
        """
        Extend a customer's paid period by ``months`` (1-12).

        The local extension always commits once validation passes. When the
        customer was suspended, the panel account is unsuspended on a best
        effort basis and the step outcome is returned for the caller to show.
        """
        auth = require_admin(actor)
        if auth.is_err():
            return Err(auth.unwrap_err())

        if isinstance(months, bool) or not isinstance(months, int):
            return Err(ValidationError("Months must be between 1 and 12", field="months"))
        if not MIN_EXTENSION_MONTHS <= months <= MAX_EXTENSION_MONTHS:
            return Err(ValidationError("Months must be between 1 and 12", field="months"))

        customer = Customer.objects.filter(pk=customer_id).first()
        if customer is None:
            return Err(NotFoundError("Customer not found"))

        now = now or timezone.now()
        previous_expires_at = customer.expires_at
        was_suspended = customer.is_suspended
        new_expires_at = calculate_new_expiry(previous_expires_at, months, now)

        customer.expires_at = new_expires_at
        customer.next_billing_date = new_expires_at
        customer.status = Customer.STATUS_ACTIVE
        customer.save(update_fields=["expires_at", "next_billing_date", "status", "updated_at"])

        outcome = ExtensionOutcome(customer=customer, months=months, previous_expires_at=previous_expires_at)

        if was_suspended:
            outcome.remote_reactivation = run_step(
                self._get_gateway(), UnsuspendUser(customer.hestia_username), StepPolicy.BEST_EFFORT
            ).unwrap()
            if outcome.reactivation_failed:
                logger.error(
                    f"🔥 [Billing] Extended {customer.email} but panel unsuspend failed: "
                    f"{outcome.remote_reactivation.error}"
                )

        ActivityLogService.log(
            ActivityEntry(
                action=ACTION_BILLING_EXTENDED,
                resource="customer",
                resource_id=customer.pk,
                description=(
                    f"Extended subscription for {customer.email} by {months} month(s). "
                    f"New expiration: {new_expires_at.isoformat()}"
                ),
                metadata={
                    "months": months,
                    "previous_expires_at": previous_expires_at,
                    "new_expires_at": new_expires_at,
                    "was_suspended": was_suspended,
                    "remote_reactivation_failed": outcome.reactivation_failed,
                },
            ),
            context or ActivityContext(user=actor),
        )

        logger.info(f"💳 [Billing] Extended {customer.email} by {months} month(s) until {new_expires_at:%Y-%m-%d}")
        return Ok(outcome)

    @staticmethod
    def billing_info(customer_id: Any, now: datetime | None = None) -> Result[dict[str, Any], LifecycleError]:
        customer = Customer.objects.filter(pk=customer_id).first()
        if customer is None:
            return Err(NotFoundError("Customer not found"))

        now = now or timezone.now()
        days_remaining = None
        if customer.expires_at is not None:
            days_remaining = days_between(now, customer.expires_at)

        return Ok(
            {
                "customer": {
                    "id": customer.pk,
                    "name": customer.name,
                    "email": customer.email,
                    "package_id": customer.package_id,
                    "billing_cycle": customer.billing_cycle,
                    "monthly_price": str(customer.monthly_price),
                    "expires_at": customer.expires_at.isoformat() if customer.expires_at else None,
                    "status": customer.status,
                },
                "days_remaining": days_remaining,
                "is_expired": customer.is_expired(now),
            }
        )
