"""
Customer management service layer.
Onboarding (panel account + first website), deletion and panel account linking.
"""

from __future__ import annotations

import logging
import re
import secrets
import string
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from apps.audit.services import ActivityContext, ActivityEntry, ActivityLogService
from apps.common.encryption import generate_password
from apps.common.exceptions import (
    LifecycleError,
    NameCollisionError,
    NotFoundError,
    RemoteOperationError,
    ValidationError,
)
from apps.common.types import Err, Ok, Result
from apps.products.packages import get_package
from apps.provisioning.hestia_commands import (
    AddDatabase,
    AddLetsEncryptDomain,
    AddUser,
    AddWebDomain,
    AddWebDomainSslForce,
    DeleteUser,
    ListWebDomains,
)
from apps.provisioning.hestia_gateway import HestiaConfig
from apps.provisioning.hestia_resilience import CancellationToken, ResilientHestiaGateway
from apps.provisioning.lifecycle import StepLog, StepPolicy, run_step
from apps.provisioning.models import DEFAULT_PHP_VERSION, Database, Website
from apps.provisioning.suspension_service import require_admin
from apps.provisioning.website_service import DEFAULT_EDGE_IP, generate_subdomain

from .models import Customer

if TYPE_CHECKING:
    from apps.users.models import User

logger = logging.getLogger(__name__)

USERNAME_PREFIX = "cust"
USERNAME_MAX_LENGTH = 16
USERNAME_SUFFIX_LENGTH = 4
PANEL_PASSWORD_LENGTH = 16
UPDATABLE_FIELDS = frozenset({"name", "phone", "company", "package_id", "billing_cycle"})

LINK_FORBIDDEN_MESSAGE = (
    "Hestia API rejected authentication (401). Ask admin to whitelist application server IP or use admin access-key."
)
LINK_FORBIDDEN_PATTERN = re.compile(r"forbidden|401", re.IGNORECASE)


def generate_username(email: str, prefix: str = USERNAME_PREFIX) -> str:
    """``<prefix><sanitized local part><4 random chars>`` truncated to 16 characters"""
    base_length = USERNAME_MAX_LENGTH - len(prefix) - USERNAME_SUFFIX_LENGTH
    local_part = re.sub(r"[^a-z0-9]", "", email.split("@")[0].lower())[:max(base_length, 0)]
    suffix = "".join(secrets.choice(string.ascii_lowercase + string.digits) for _ in range(USERNAME_SUFFIX_LENGTH))
    return f"{prefix}{local_part}{suffix}"[:USERNAME_MAX_LENGTH]


@dataclass
class CustomerOnboarding:
    """Input for ``CustomerService.create_customer``"""

    name: str
    email: str
    phone: str = ""
    company: str = ""
    custom_domain: str = ""
    package_id: str = "starter"
    php_version: str = DEFAULT_PHP_VERSION
    need_database: bool = False


@dataclass
class OnboardingOutcome:
    customer: Customer
    website: Website
    panel_password: str
    database: Database | None = None
    database_password: str = ""
    steps: StepLog = field(default_factory=StepLog)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "customer_id": self.customer.pk,
            "hestia_username": self.customer.hestia_username,
            "hestia_password": self.panel_password,
            "website": {
                "id": self.website.pk,
                "subdomain": self.website.subdomain,
                "url": f"https://{self.website.subdomain}",
                "status": self.website.status,
                "ssl_enabled": self.website.ssl_enabled,
            },
            "database": None,
            "steps": self.steps.to_list(),
        }
        if self.database is not None:
            payload["database"] = {
                "name": self.database.name,
                "username": self.database.username,
                "password": self.database_password,
                "host": self.database.host,
                "port": self.database.port,
            }
        return payload


class CustomerService:
    """Service class for customer management operations."""

    def __init__(
        self,
        gateway: Any | None = None,
        token: CancellationToken | None = None,
        panel_gateway_factory: Callable[[HestiaConfig], Any] | None = None,
    ):
        self._gateway = gateway
        self.token = token or CancellationToken()
        self._panel_gateway_factory = panel_gateway_factory

    def _get_gateway(self) -> Any:
        if self._gateway is None:
            self._gateway = ResilientHestiaGateway.for_config(HestiaConfig.admin_from_settings(), token=self.token)
        return self._gateway

    def _get_panel_gateway(self, config: HestiaConfig) -> Any:
        if self._panel_gateway_factory is not None:
            return self._panel_gateway_factory(config)
        return ResilientHestiaGateway.for_config(config, token=self.token)

    # ===============================================================================
    # ONBOARDING
    # ===============================================================================

    def create_customer(
        self, data: CustomerOnboarding, actor: User | None, context: ActivityContext | None = None
    ) -> Result[OnboardingOutcome, LifecycleError]:
        """
        Provision a panel account with its first website, then record the customer.

        Remote steps:
            1. AddUser (blocking)
            2. AddWebDomain with www/custom aliases (blocking, DeleteUser on failure)
            3. Let's Encrypt + force SSL (best effort)
            4. Optional database (best effort)

        Local rows are written in one transaction after all remote steps ran.
        """
        auth = require_admin(actor)
        if auth.is_err():
            return Err(auth.unwrap_err())

        package = get_package(data.package_id)
        if package is None:
            return Err(ValidationError("Invalid package selected", field="package_id"))
        if Customer.objects.filter(email__iexact=data.email).exists():
            return Err(NameCollisionError("A customer with this email already exists"))

        gateway = self._get_gateway()
        steps = StepLog()
        username = generate_username(data.email)
        panel_password = generate_password(PANEL_PASSWORD_LENGTH)
        subdomain = generate_subdomain(data.name)
        first_name, _, last_name = data.name.strip().partition(" ")

        logger.info(f"👤 [Customer] Onboarding {data.name} as {username} ({package.name})")

        user_step = run_step(
            gateway,
            AddUser(username, panel_password, data.email, package.hestia_package_name, first_name, last_name),
            StepPolicy.BLOCKING,
            steps,
        )
        if user_step.is_err():
            return Err(user_step.unwrap_err())

        aliases = [f"www.{subdomain}"]
        if data.custom_domain:
            aliases += [data.custom_domain, f"www.{data.custom_domain}"]

        domain_step = run_step(gateway, AddWebDomain(username, subdomain, aliases=tuple(aliases)), StepPolicy.BLOCKING, steps)
        if domain_step.is_err():
            logger.error(f"❌ [Customer] Domain creation failed for {username}, removing panel user")
            run_step(gateway, DeleteUser(username), StepPolicy.BEST_EFFORT, steps)
            return Err(domain_step.unwrap_err())

        ssl_enabled = run_step(gateway, AddLetsEncryptDomain(username, subdomain), StepPolicy.BEST_EFFORT, steps).unwrap().success
        if ssl_enabled:
            run_step(gateway, AddWebDomainSslForce(username, subdomain), StepPolicy.BEST_EFFORT, steps)

        db_name = db_password = ""
        if data.need_database:
            candidate_password = generate_password(PANEL_PASSWORD_LENGTH)
            db_step = run_step(
                gateway,
                AddDatabase(username, f"{username}_db", f"{username}_user", candidate_password),
                StepPolicy.BEST_EFFORT,
                steps,
            ).unwrap()
            if db_step.success:
                db_name, db_password = f"{username}_db", candidate_password

        with transaction.atomic():
            customer = Customer(
                name=data.name,
                email=data.email,
                phone=data.phone,
                company=data.company,
                hestia_username=username,
                package_id=package.id,
                billing_cycle=package.billing_cycle,
                monthly_price=package.monthly_price,
                status=Customer.STATUS_ACTIVE,
                next_billing_date=timezone.now() + relativedelta(months=1),
                created_by=actor,
            )
            customer.set_hestia_password(panel_password)
            customer.save()

            website = Website.objects.create(
                customer=customer,
                subdomain=subdomain,
                custom_domain=data.custom_domain or None,
                aliases=aliases,
                ip_address=getattr(settings, "WEBSITE_EDGE_IP", DEFAULT_EDGE_IP),
                php_version=data.php_version,
                ssl_enabled=ssl_enabled,
                ssl_force=ssl_enabled,
                ssl_verified=ssl_enabled,
                dns_verified=True,
                status=Website.STATUS_ACTIVE if ssl_enabled else Website.STATUS_SSL_PENDING,
            )

            database = None
            if db_name:
                database = Database(customer=customer, name=db_name, username=f"{username}_user")
                database.set_password(db_password)
                database.save()

        ActivityLogService.log(
            ActivityEntry(
                action="customer.created",
                resource="customer",
                resource_id=customer.pk,
                description=f"Created customer: {data.name} ({subdomain}) - Package: {package.name}",
                metadata={
                    "subdomain": subdomain,
                    "hestia_username": username,
                    "package_id": package.id,
                    "ssl_enabled": ssl_enabled,
                    "database_created": database is not None,
                },
            ),
            context or ActivityContext(user=actor),
        )

        logger.info(f"✅ [Customer] Onboarded {customer.name} (ID: {customer.pk})")
        return Ok(
            OnboardingOutcome(
                customer=customer,
                website=website,
                panel_password=panel_password,
                database=database,
                database_password=db_password,
                steps=steps,
            )
        )

    # ===============================================================================
    # DELETION
    # ===============================================================================

    def delete_customer(
        self, customer_id: Any, actor: User | None, context: ActivityContext | None = None
    ) -> Result[str, LifecycleError]:
        """Remove the panel account (blocking), then the customer and everything it owns."""
        auth = require_admin(actor)
        if auth.is_err():
            return Err(auth.unwrap_err())

        customer = Customer.objects.filter(pk=customer_id).first()
        if customer is None:
            return Err(NotFoundError("Customer not found"))

        step = run_step(self._get_gateway(), DeleteUser(customer.hestia_username), StepPolicy.BLOCKING)
        if step.is_err():
            return Err(step.unwrap_err())

        name = customer.name
        customer.delete()

        ActivityLogService.log(
            ActivityEntry(
                action="customer.deleted",
                resource="customer",
                resource_id=customer_id,
                description=f"Deleted customer: {name}",
            ),
            context or ActivityContext(user=actor),
        )
        logger.info(f"🗑️ [Customer] Deleted customer: {name} (ID: {customer_id})")
        return Ok(name)

    # ===============================================================================
    # PROFILE UPDATE
    # ===============================================================================

    def update_customer(
        self, customer_id: Any, changes: dict[str, Any], actor: User | None, context: ActivityContext | None = None
    ) -> Result[Customer, LifecycleError]:
        """
        Edit profile and billing fields of the local record.

        Only ``UPDATABLE_FIELDS`` are applied. Changing the package also moves
        the monthly price to that package's price; the panel package is not
        touched. Status changes go through suspension and extension instead.
        """
        auth = require_admin(actor)
        if auth.is_err():
            return Err(auth.unwrap_err())

        customer = Customer.objects.filter(pk=customer_id).first()
        if customer is None:
            return Err(NotFoundError("Customer not found"))

        updates = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}
        if "package_id" in updates:
            package = get_package(updates["package_id"])
            if package is None:
                return Err(ValidationError("Invalid package", field="package_id"))
            if package.id != customer.package_id:
                updates["monthly_price"] = package.monthly_price

        updates = {key: value for key, value in updates.items() if getattr(customer, key) != value}
        if not updates:
            return Ok(customer)

        for key, value in updates.items():
            setattr(customer, key, value)
        customer.save(update_fields=[*updates, "updated_at"])

        ActivityLogService.log(
            ActivityEntry(
                action="customer.updated",
                resource="customer",
                resource_id=customer.pk,
                description=f"Updated customer: {customer.name}",
                metadata={"fields": sorted(updates)},
            ),
            context or ActivityContext(user=actor),
        )
        logger.info(f"✏️ [Customer] Updated {customer.name} (ID: {customer.pk}): {', '.join(sorted(updates))}")
        return Ok(customer)

    # ===============================================================================
    # PANEL ACCOUNT LINKING
    # ===============================================================================

    def link_panel_account(
        self,
        customer_email: str,
        password: str,
        username: str = "",
        context: ActivityContext | None = None,
    ) -> Result[Customer, LifecycleError]:
        """
        Verify a customer's own panel credentials and store them.

        The check is a read-only web domain listing made with the customer's
        identity. A forbidden answer means this host is not whitelisted on
        the panel; any other rejection is treated as bad credentials.
        """
        if not password:
            return Err(ValidationError("Password is required", field="password"))

        customer = Customer.objects.filter(email__iexact=customer_email).first()
        if customer is None:
            return Err(NotFoundError("Customer record not found"))

        hestia_username = username or customer.hestia_username
        if not hestia_username:
            return Err(ValidationError("Hestia username not available; please provide it", field="username"))

        gateway = self._get_panel_gateway(HestiaConfig.for_panel_user(hestia_username, password))
        step = run_step(gateway, ListWebDomains(hestia_username), StepPolicy.BLOCKING)
        if step.is_err():
            error = step.unwrap_err()
            if isinstance(error, RemoteOperationError):
                if error.forbidden or LINK_FORBIDDEN_PATTERN.search(error.message or ""):
                    logger.warning(f"🚫 [Customer] Panel rejected {hestia_username}: API access forbidden")
                    return Err(RemoteOperationError(LINK_FORBIDDEN_MESSAGE, return_code=error.return_code, forbidden=True))
                return Err(ValidationError(f"Hestia: {error.message or 'authentication failed'}"))
            return Err(error)

        customer.hestia_username = hestia_username
        customer.set_hestia_password(password)
        if customer.user is None:
            user_model = get_user_model()
            user = user_model.objects.filter(email__iexact=customer.email).first()
            if user is None:
                user = user_model.objects.create_user(email=customer.email, first_name=customer.name[:150])
            customer.user = user
        customer.save(update_fields=["hestia_username", "_hestia_password", "user", "updated_at"])

        ActivityLogService.log(
            ActivityEntry(
                action="customer.panel_linked",
                resource="customer",
                resource_id=customer.pk,
                description=f"Customer {customer.name} linked panel account {hestia_username}",
            ),
            context or ActivityContext(user=customer.user),
        )
        logger.info(f"🔗 [Customer] Linked panel account {hestia_username} for {customer.email}")
        return Ok(customer)
