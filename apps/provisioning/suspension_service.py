"""
Customer suspension orchestration - LumiCloud platform

Suspending a customer is one blocking account-level command followed by one
best-effort command per website. The account command decides whether anything
changes locally; per-domain failures are reported but never roll back the
account state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from apps.audit.models import ActivityLog
from apps.audit.services import ActivityContext, ActivityEntry, ActivityLogService
from apps.common.exceptions import AuthorizationError, LifecycleError, NotFoundError
from apps.common.types import Err, Ok, Result
from apps.customers.models import Customer

from .hestia_commands import SuspendUser, SuspendWebDomain, UnsuspendUser, UnsuspendWebDomain
from .hestia_gateway import HestiaConfig
from .hestia_resilience import CancellationToken, ResilientHestiaGateway
from .lifecycle import DomainResult, StepPolicy, run_step
from .models import Website

if TYPE_CHECKING:
    from apps.users.models import User

logger = logging.getLogger(__name__)

ACTION_SUSPENDED = "customer.suspended"
ACTION_UNSUSPENDED = "customer.unsuspended"


@dataclass
class SuspensionOutcome:
    """What a suspend/unsuspend call did, including per-domain results"""

    customer: Customer
    website_results: list[DomainResult] = field(default_factory=list)

    @property
    def partial(self) -> bool:
        return any(not result.success for result in self.website_results)

    @property
    def failed_domains(self) -> list[str]:
        return [result.domain for result in self.website_results if not result.success]

    def to_dict(self) -> dict[str, Any]:
        return {
            "customer_id": self.customer.pk,
            "status": self.customer.status,
            "partial": self.partial,
            "website_results": [result.to_dict() for result in self.website_results],
        }


def require_admin(actor: User | None) -> Result[None, LifecycleError]:
    if actor is None or not getattr(actor, "is_admin", False):
        return Err(AuthorizationError("Admin access required"))
    return Ok(None)


class SuspensionService:
    """Suspend and unsuspend customers on the panel and in the record store"""

    def __init__(self, gateway: Any | None = None, token: CancellationToken | None = None):
        self._gateway = gateway
        self.token = token or CancellationToken()

    def _get_gateway(self) -> Any:
        if self._gateway is None:
            self._gateway = ResilientHestiaGateway.for_config(HestiaConfig.admin_from_settings(), token=self.token)
        return self._gateway

    def suspend(
        self, customer_id: Any, actor: User | None, context: ActivityContext | None = None
    ) -> Result[SuspensionOutcome, LifecycleError]:
        """
        Suspend a customer's panel account and each of its websites.

        Args:
            customer_id: Customer primary key
            actor: Requesting user; must hold the admin role
            context: Activity context (ip address); defaults to the actor

        Returns:
            Ok(SuspensionOutcome) once the account-level suspension succeeded,
            Err otherwise with nothing changed locally
        """
        return self._transition(customer_id, actor, context, suspend=True)

    def unsuspend(
        self, customer_id: Any, actor: User | None, context: ActivityContext | None = None
    ) -> Result[SuspensionOutcome, LifecycleError]:
        """Mirror of ``suspend``: reactivate the account, then each website."""
        return self._transition(customer_id, actor, context, suspend=False)

    def _transition(
        self, customer_id: Any, actor: User | None, context: ActivityContext | None, *, suspend: bool
    ) -> Result[SuspensionOutcome, LifecycleError]:
        verb = "suspend" if suspend else "unsuspend"

        auth = require_admin(actor)
        if auth.is_err():
            logger.warning(f"🚫 [Suspension] {verb} of customer {customer_id} denied for {actor}")
            return Err(auth.unwrap_err())

        customer = Customer.objects.filter(pk=customer_id).first()
        if customer is None:
            return Err(NotFoundError("Customer not found"))

        gateway = self._get_gateway()
        username = customer.hestia_username

        # Account level: blocking
        account_command = SuspendUser(username) if suspend else UnsuspendUser(username)
        account_step = run_step(gateway, account_command, StepPolicy.BLOCKING)
        if account_step.is_err():
            error = account_step.unwrap_err()
            logger.error(f"❌ [Suspension] Failed to {verb} Hestia user {username}: {error.message}")
            return Err(error)

        # Domain level: best effort, one result per website
        outcome = SuspensionOutcome(customer=customer)
        for website in customer.websites.all():
            domain = website.domain
            domain_command = SuspendWebDomain(username, domain) if suspend else UnsuspendWebDomain(username, domain)
            step = run_step(gateway, domain_command, StepPolicy.BEST_EFFORT).unwrap()
            outcome.website_results.append(DomainResult(domain, step.success, step.error or None))

            if step.success:
                website.status = Website.STATUS_SUSPENDED if suspend else self._reactivated_status(website)
                website.save(update_fields=["status", "updated_at"])

        customer.status = Customer.STATUS_SUSPENDED if suspend else Customer.STATUS_ACTIVE
        customer.save(update_fields=["status", "updated_at"])

        website_count = len(outcome.website_results)
        ActivityLogService.log(
            ActivityEntry(
                action=ACTION_SUSPENDED if suspend else ACTION_UNSUSPENDED,
                resource="customer",
                resource_id=customer.pk,
                description=(
                    f"{'Suspended' if suspend else 'Unsuspended'} customer: {customer.name} "
                    f"({customer.email}) and {website_count} websites"
                ),
                status=ActivityLog.STATUS_PARTIAL if outcome.partial else ActivityLog.STATUS_SUCCESS,
                metadata={
                    "hestia_username": username,
                    "website_count": website_count,
                    "failed_domain_count": len(outcome.failed_domains),
                    "failed_domains": outcome.failed_domains,
                },
            ),
            context or ActivityContext(user=actor),
        )

        if outcome.partial:
            logger.warning(
                f"⚠️ [Suspension] {verb.capitalize()}ed {username} with failed domains: {outcome.failed_domains}"
            )
        else:
            logger.info(f"✅ [Suspension] {verb.capitalize()}ed {username} and {website_count} websites")

        return Ok(outcome)

    @staticmethod
    def _reactivated_status(website: Website) -> str:
        return Website.STATUS_ACTIVE if website.ssl_enabled else Website.STATUS_SSL_PENDING
