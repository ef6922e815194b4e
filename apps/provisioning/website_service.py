"""
Website provisioning workflows - LumiCloud platform

Creating a website: quota check, subdomain allocation, blocking web-domain
creation on the panel, best-effort SSL, then the local record. Follow-up
operations attach a custom domain, (re)issue SSL and move the document root.
"""

from __future__ import annotations

import logging
import re
import secrets
import string
from dataclasses import dataclass, field
from typing import Any

from django.conf import settings
from django.db import IntegrityError

from apps.audit.services import ActivityContext, ActivityEntry, ActivityLogService
from apps.common.exceptions import (
    LifecycleError,
    NameCollisionError,
    NotFoundError,
    QuotaExceededError,
    ValidationError,
)
from apps.common.types import Err, Ok, Result
from apps.customers.models import Customer
from apps.products.packages import get_package, website_limit

from .hestia_commands import (
    AddLetsEncryptDomain,
    AddWebDomain,
    AddWebDomainAlias,
    AddWebDomainSslForce,
    ChangeWebDomainBackendTpl,
    ChangeWebDomainDocroot,
    DeleteWebDomain,
    ResetWebDomainDocroot,
    UpdateLetsEncryptSsl,
)
from .hestia_gateway import HestiaConfig
from .hestia_resilience import CancellationToken, ResilientHestiaGateway
from .lifecycle import StepLog, StepPolicy, run_step
from .models import DEFAULT_DOCUMENT_ROOT, DEFAULT_PHP_VERSION, Website

logger = logging.getLogger(__name__)

# ===============================================================================
# CONSTANTS
# ===============================================================================

SUBDOMAIN_BASE_LENGTH = 16
SUBDOMAIN_SUFFIX_LENGTH = 5
SUBDOMAIN_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
DEFAULT_PRIMARY_DOMAIN = "lumicloude.my.id"
DEFAULT_EDGE_IP = "198.41.192.67"

CUSTOM_DOMAIN_MIN_LENGTH = 3
CUSTOM_DOMAIN_PATTERN = re.compile(
    r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?(\.[a-z0-9]([a-z0-9-]*[a-z0-9])?)*\.[a-z]{2,}$",
    re.IGNORECASE,
)
CUSTOM_DOMAIN_DNS_TTL = 3600

ACTION_WEBSITE_CREATED = "website.created"
ACTION_CUSTOM_DOMAIN_ADDED = "website.custom_domain_added"
ACTION_SSL_ENABLED = "website.ssl_enabled"
ACTION_SSL_RENEWED = "website.ssl_renewed"
ACTION_DOCROOT_CHANGED = "website.document_root_changed"
ACTION_DOCROOT_RESET = "website.document_root_reset"
ACTION_PHP_CHANGED = "website.php_version_changed"
ACTION_WEBSITE_DELETED = "website.deleted"

SUPPORTED_PHP_VERSIONS = ("7.4", "8.0", "8.1", "8.2", "8.3")


def generate_subdomain(name: str, primary_domain: str | None = None) -> str:
    """``<sanitized name[:16]><5 random chars>.<primary domain>``"""
    base = re.sub(r"[^a-z0-9]", "", name.lower())[:SUBDOMAIN_BASE_LENGTH]
    suffix = "".join(secrets.choice(SUBDOMAIN_SUFFIX_ALPHABET) for _ in range(SUBDOMAIN_SUFFIX_LENGTH))
    primary = primary_domain or getattr(settings, "PRIMARY_DOMAIN", DEFAULT_PRIMARY_DOMAIN)
    return f"{base}{suffix}.{primary}"


def validate_custom_domain(domain: str) -> Result[str, ValidationError]:
    domain = (domain or "").strip().lower()
    if len(domain) < CUSTOM_DOMAIN_MIN_LENGTH:
        return Err(ValidationError("Domain must be at least 3 characters", field="custom_domain"))
    if not CUSTOM_DOMAIN_PATTERN.match(domain):
        return Err(ValidationError("Invalid domain format", field="custom_domain"))
    return Ok(domain)


def validate_document_root(directory: str) -> Result[str, ValidationError]:
    directory = (directory or "").strip()
    if not directory:
        return Err(ValidationError("Directory path is required", field="directory"))
    if ".." in directory or directory.startswith("/"):
        return Err(
            ValidationError("Invalid directory path. Use relative path only (e.g., blog)", field="directory")
        )
    return Ok(directory)


@dataclass
class WebsiteCreation:
    """Outcome of ``create_website``"""

    website: Website
    ssl_requested: bool
    steps: StepLog = field(default_factory=StepLog)

    @property
    def ssl_enabled(self) -> bool:
        return self.website.ssl_enabled

    def to_dict(self) -> dict[str, Any]:
        return {
            "website": {
                "id": self.website.pk,
                "subdomain": self.website.subdomain,
                "url": f"https://{self.website.subdomain}",
                "status": self.website.status,
                "ssl_enabled": self.website.ssl_enabled,
                "php_version": self.website.php_version,
            },
            "steps": self.steps.to_list(),
        }


class WebsiteProvisioningService:
    """Website lifecycle on the panel, run with the admin identity"""

    def __init__(self, gateway: Any | None = None, token: CancellationToken | None = None):
        self._gateway = gateway
        self.token = token or CancellationToken()

    def _get_gateway(self) -> Any:
        if self._gateway is None:
            self._gateway = ResilientHestiaGateway.for_config(HestiaConfig.admin_from_settings(), token=self.token)
        return self._gateway

    @staticmethod
    def _get_customer(customer_email: str) -> Result[Customer, LifecycleError]:
        customer = Customer.objects.filter(email__iexact=customer_email).first()
        if customer is None:
            return Err(NotFoundError("Customer account not found"))
        return Ok(customer)

    @staticmethod
    def _get_website(website_id: Any, customer: Customer | None = None) -> Result[Website, LifecycleError]:
        websites = Website.objects.select_related("customer")
        if customer is not None:
            websites = websites.filter(customer=customer)
        website = websites.filter(pk=website_id).first()
        if website is None:
            return Err(NotFoundError("Website not found"))
        return Ok(website)

    # ===============================================================================
    # CREATE WEBSITE
    # ===============================================================================

    def create_website(
        self,
        customer_email: str,
        name: str,
        php_version: str = DEFAULT_PHP_VERSION,
        enable_ssl: bool = True,
        context: ActivityContext | None = None,
    ) -> Result[WebsiteCreation, LifecycleError]:
        """
        Provision a new website under the platform's primary domain.

        Quota and subdomain uniqueness are checked before any remote call.
        The web domain creation is blocking; SSL issuance and forcing are
        best effort and only decide between ACTIVE and SSL_PENDING.
        """
        customer_result = self._get_customer(customer_email)
        if customer_result.is_err():
            return Err(customer_result.unwrap_err())
        customer = customer_result.unwrap()

        limit = website_limit(customer.package_id)
        current = customer.websites.count()
        if limit and current >= limit:
            package = get_package(customer.package_id)
            package_name = package.name if package else "Basic"
            return Err(
                QuotaExceededError(
                    f"Website limit reached. Your {package_name} package allows {limit} website(s). "
                    f"You currently have {current}. Please upgrade your package to add more websites.",
                    limit=limit,
                    current=current,
                )
            )

        subdomain = generate_subdomain(name)
        if Website.objects.filter(subdomain=subdomain).exists():
            return Err(NameCollisionError("A website with this name already exists. Please choose a different name."))

        gateway = self._get_gateway()
        username = customer.hestia_username
        steps = StepLog()

        logger.info(f"🌐 [Website] Creating {subdomain} for {username}")
        domain_step = run_step(gateway, AddWebDomain(username, subdomain), StepPolicy.BLOCKING, steps)
        if domain_step.is_err():
            error = domain_step.unwrap_err()
            logger.error(f"❌ [Website] Failed to create {subdomain}: {error.message}")
            return Err(error)

        ssl_enabled = False
        ssl_forced = False
        if enable_ssl:
            ssl_step = run_step(gateway, AddLetsEncryptDomain(username, subdomain), StepPolicy.BEST_EFFORT, steps)
            ssl_enabled = ssl_step.unwrap().success
            if ssl_enabled:
                force_step = run_step(gateway, AddWebDomainSslForce(username, subdomain), StepPolicy.BEST_EFFORT, steps)
                ssl_forced = force_step.unwrap().success

        try:
            website = Website.objects.create(
                customer=customer,
                subdomain=subdomain,
                custom_domain=None,
                aliases=[],
                ip_address=getattr(settings, "WEBSITE_EDGE_IP", DEFAULT_EDGE_IP),
                php_version=php_version,
                ssl_enabled=ssl_enabled,
                ssl_force=ssl_forced,
                ssl_verified=ssl_enabled,
                dns_verified=True,  # Wildcard DNS on the primary domain
                status=Website.STATUS_ACTIVE if ssl_enabled else Website.STATUS_SSL_PENDING,
            )
        except IntegrityError:
            # Lost a race for the subdomain after the panel accepted it
            logger.error(f"❌ [Website] Subdomain {subdomain} taken concurrently, removing panel domain")
            run_step(gateway, DeleteWebDomain(username, subdomain), StepPolicy.BEST_EFFORT, steps)
            return Err(NameCollisionError("A website with this name already exists. Please choose a different name."))

        ActivityLogService.log(
            ActivityEntry(
                action=ACTION_WEBSITE_CREATED,
                resource="website",
                resource_id=website.pk,
                description=f"Customer {customer.name} created website: {subdomain}",
                metadata={"subdomain": subdomain, "customer_id": customer.pk, "ssl_enabled": ssl_enabled},
            ),
            context,
        )

        logger.info(f"✅ [Website] Created {subdomain} (status: {website.status})")
        return Ok(WebsiteCreation(website=website, ssl_requested=enable_ssl, steps=steps))

    # ===============================================================================
    # CUSTOM DOMAIN
    # ===============================================================================

    def attach_custom_domain(
        self,
        customer_email: str,
        website_id: Any,
        custom_domain: str,
        context: ActivityContext | None = None,
    ) -> Result[dict[str, Any], LifecycleError]:
        """
        Attach a customer-owned domain to a website as a panel alias.

        Returns DNS instructions the customer must apply at their registrar.
        """
        domain_result = validate_custom_domain(custom_domain)
        if domain_result.is_err():
            return Err(domain_result.unwrap_err())
        domain = domain_result.unwrap()

        customer_result = self._get_customer(customer_email)
        if customer_result.is_err():
            return Err(customer_result.unwrap_err())
        customer = customer_result.unwrap()

        website_result = self._get_website(website_id, customer)
        if website_result.is_err():
            return Err(website_result.unwrap_err())
        website = website_result.unwrap()

        if Website.objects.filter(custom_domain=domain).exists():
            return Err(NameCollisionError("This custom domain is already in use"))

        alias_step = run_step(
            self._get_gateway(),
            AddWebDomainAlias(customer.hestia_username, website.subdomain, (domain,)),
            StepPolicy.BLOCKING,
        )
        if alias_step.is_err():
            return Err(alias_step.unwrap_err())

        website.custom_domain = domain
        website.aliases = [domain]
        try:
            website.save(update_fields=["custom_domain", "aliases", "updated_at"])
        except IntegrityError:
            return Err(NameCollisionError("This custom domain is already in use"))

        ActivityLogService.log(
            ActivityEntry(
                action=ACTION_CUSTOM_DOMAIN_ADDED,
                resource="website",
                resource_id=website.pk,
                description=f"Customer {customer.name} added custom domain {domain} to {website.subdomain}",
                metadata={"custom_domain": domain, "subdomain": website.subdomain},
            ),
            context,
        )

        logger.info(f"✅ [Website] Linked {domain} → {website.subdomain}")
        return Ok(
            {
                "custom_domain": domain,
                "subdomain": website.subdomain,
                "dns_instructions": {
                    "type": "CNAME",
                    "name": "@",
                    "value": website.subdomain,
                    "ttl": CUSTOM_DOMAIN_DNS_TTL,
                    "note": (
                        "If your DNS provider doesn't support CNAME on the root domain, use an A record "
                        "pointing to the server IP, or use a subdomain like www."
                    ),
                },
            }
        )

    # ===============================================================================
    # SSL
    # ===============================================================================

    def enable_ssl(
        self, website_id: Any, customer: Customer | None = None, context: ActivityContext | None = None
    ) -> Result[Website, LifecycleError]:
        """Issue a Let's Encrypt certificate (blocking), then force HTTPS (best effort)."""
        website_result = self._get_website(website_id, customer)
        if website_result.is_err():
            return Err(website_result.unwrap_err())
        website = website_result.unwrap()

        gateway = self._get_gateway()
        username = website.customer.hestia_username

        ssl_step = run_step(gateway, AddLetsEncryptDomain(username, website.subdomain), StepPolicy.BLOCKING)
        if ssl_step.is_err():
            return Err(ssl_step.unwrap_err())

        force_step = run_step(gateway, AddWebDomainSslForce(username, website.subdomain), StepPolicy.BEST_EFFORT)

        website.ssl_enabled = True
        website.ssl_verified = True
        website.ssl_force = force_step.unwrap().success
        if website.status != Website.STATUS_SUSPENDED:
            website.status = Website.STATUS_ACTIVE
        website.save(update_fields=["ssl_enabled", "ssl_verified", "ssl_force", "status", "updated_at"])

        ActivityLogService.log(
            ActivityEntry(
                action=ACTION_SSL_ENABLED,
                resource="website",
                resource_id=website.pk,
                description=f"Enabled SSL for {website.subdomain}",
                metadata={"ssl_force": website.ssl_force},
            ),
            context,
        )

        logger.info(f"✅ [Website] SSL enabled for {website.subdomain}")
        return Ok(website)

    def renew_ssl(
        self, website_id: Any, customer: Customer | None = None, context: ActivityContext | None = None
    ) -> Result[Website, LifecycleError]:
        website_result = self._get_website(website_id, customer)
        if website_result.is_err():
            return Err(website_result.unwrap_err())
        website = website_result.unwrap()

        renew_step = run_step(
            self._get_gateway(),
            UpdateLetsEncryptSsl(website.customer.hestia_username, website.subdomain),
            StepPolicy.BLOCKING,
        )
        if renew_step.is_err():
            return Err(renew_step.unwrap_err())

        website.ssl_verified = True
        website.save(update_fields=["ssl_verified", "updated_at"])

        ActivityLogService.log(
            ActivityEntry(
                action=ACTION_SSL_RENEWED,
                resource="website",
                resource_id=website.pk,
                description=f"Renewed SSL for {website.subdomain}",
            ),
            context,
        )
        return Ok(website)

    # ===============================================================================
    # DOCUMENT ROOT
    # ===============================================================================

    def _get_target_website(self, customer: Customer, website_id: Any | None) -> Result[Website, LifecycleError]:
        if website_id is not None:
            return self._get_website(website_id, customer)
        website = customer.websites.order_by("created_at").first()
        if website is None:
            return Err(NotFoundError("No website found"))
        return Ok(website)

    def change_document_root(
        self,
        customer_email: str,
        directory: str,
        website_id: Any | None = None,
        context: ActivityContext | None = None,
    ) -> Result[Website, LifecycleError]:
        """Point the website at a directory relative to its home; defaults to the oldest website."""
        directory_result = validate_document_root(directory)
        if directory_result.is_err():
            return Err(directory_result.unwrap_err())
        directory = directory_result.unwrap()

        customer_result = self._get_customer(customer_email)
        if customer_result.is_err():
            return Err(customer_result.unwrap_err())
        customer = customer_result.unwrap()

        website_result = self._get_target_website(customer, website_id)
        if website_result.is_err():
            return Err(website_result.unwrap_err())
        website = website_result.unwrap()

        step = run_step(
            self._get_gateway(),
            ChangeWebDomainDocroot(customer.hestia_username, website.subdomain, directory),
            StepPolicy.BLOCKING,
        )
        if step.is_err():
            return Err(step.unwrap_err())

        website.document_root = directory
        website.save(update_fields=["document_root", "updated_at"])

        ActivityLogService.log(
            ActivityEntry(
                action=ACTION_DOCROOT_CHANGED,
                resource="website",
                resource_id=website.pk,
                description=f"Document root of {website.subdomain} changed to {directory}",
                metadata={"directory": directory},
            ),
            context,
        )
        return Ok(website)

    def reset_document_root(
        self, customer_email: str, website_id: Any | None = None, context: ActivityContext | None = None
    ) -> Result[Website, LifecycleError]:
        customer_result = self._get_customer(customer_email)
        if customer_result.is_err():
            return Err(customer_result.unwrap_err())
        customer = customer_result.unwrap()

        website_result = self._get_target_website(customer, website_id)
        if website_result.is_err():
            return Err(website_result.unwrap_err())
        website = website_result.unwrap()

        step = run_step(
            self._get_gateway(),
            ResetWebDomainDocroot(customer.hestia_username, website.subdomain),
            StepPolicy.BLOCKING,
        )
        if step.is_err():
            return Err(step.unwrap_err())

        website.document_root = DEFAULT_DOCUMENT_ROOT
        website.save(update_fields=["document_root", "updated_at"])

        ActivityLogService.log(
            ActivityEntry(
                action=ACTION_DOCROOT_RESET,
                resource="website",
                resource_id=website.pk,
                description=f"Document root of {website.subdomain} reset to {DEFAULT_DOCUMENT_ROOT}",
            ),
            context,
        )
        return Ok(website)

    # ===============================================================================
    # PHP VERSION / DELETE
    # ===============================================================================

    def change_php_version(
        self, website_id: Any, php_version: str, customer: Customer | None = None, context: ActivityContext | None = None
    ) -> Result[Website, LifecycleError]:
        if php_version not in SUPPORTED_PHP_VERSIONS:
            return Err(ValidationError("Invalid PHP version", field="php_version", supported=SUPPORTED_PHP_VERSIONS))

        website_result = self._get_website(website_id, customer)
        if website_result.is_err():
            return Err(website_result.unwrap_err())
        website = website_result.unwrap()

        if website.php_version == php_version:
            return Ok(website)

        step = run_step(
            self._get_gateway(),
            ChangeWebDomainBackendTpl(website.customer.hestia_username, website.subdomain, php_version),
            StepPolicy.BLOCKING,
        )
        if step.is_err():
            return Err(step.unwrap_err())

        previous = website.php_version
        website.php_version = php_version
        website.save(update_fields=["php_version", "updated_at"])

        ActivityLogService.log(
            ActivityEntry(
                action=ACTION_PHP_CHANGED,
                resource="website",
                resource_id=website.pk,
                description=f"PHP version of {website.subdomain} changed from {previous} to {php_version}",
                metadata={"previous": previous, "php_version": php_version},
            ),
            context,
        )
        return Ok(website)

    def delete_website(
        self, website_id: Any, customer: Customer | None = None, context: ActivityContext | None = None
    ) -> Result[str, LifecycleError]:
        """Remove the web domain from the panel (blocking), then the local record."""
        website_result = self._get_website(website_id, customer)
        if website_result.is_err():
            return Err(website_result.unwrap_err())
        website = website_result.unwrap()

        step = run_step(
            self._get_gateway(),
            DeleteWebDomain(website.customer.hestia_username, website.subdomain),
            StepPolicy.BLOCKING,
        )
        if step.is_err():
            return Err(step.unwrap_err())

        subdomain = website.subdomain
        website_pk = website.pk
        website.delete()

        ActivityLogService.log(
            ActivityEntry(
                action=ACTION_WEBSITE_DELETED,
                resource="website",
                resource_id=website_pk,
                description=f"Deleted website: {subdomain}",
            ),
            context,
        )
        logger.info(f"🗑️ [Website] Deleted {subdomain}")
        return Ok(subdomain)
