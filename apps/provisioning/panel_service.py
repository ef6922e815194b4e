"""
Customer self-service on the panel - LumiCloud platform

DNS records, mail accounts and backups of the signed-in customer's own panel
account. Listings are informational and degrade to empty lists when the panel
cannot answer; every change is a blocking step followed by an activity entry.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from apps.audit.services import ActivityContext, ActivityEntry, ActivityLogService
from apps.common.exceptions import LifecycleError, NotFoundError, ValidationError
from apps.common.types import Err, Ok, Result
from apps.customers.models import Customer

from .hestia_commands import (
    AddDnsRecord,
    AddMailAccount,
    BackupUser,
    DeleteDnsRecord,
    DeleteMailAccount,
    HestiaCommand,
    ListDnsRecords,
    ListMailAccounts,
    ListUserBackups,
    RestoreUser,
)
from .hestia_gateway import HestiaConfig
from .hestia_resilience import CancellationToken, ResilientHestiaGateway
from .lifecycle import StepPolicy, run_step

logger = logging.getLogger(__name__)

DNS_RECORD_TYPES = ("A", "AAAA", "CNAME", "MX", "TXT", "NS", "SRV", "CAA")
DNS_DEFAULT_TTL = 3600
DNS_PRIORITY_TYPES = frozenset({"MX", "SRV"})

MAIL_ACCOUNT_PATTERN = re.compile(r"^[a-z0-9][a-z0-9._-]{0,63}$")
BACKUP_NAME_PATTERN = re.compile(r"^[A-Za-z0-9._-]+\.tar$")


def listing_rows(data: Any, key_name: str = "id") -> list[dict[str, Any]]:
    """
    Flatten a Hestia JSON listing into rows.

    Hestia keys listings by record id, account or file name; the key is kept
    in each row under ``key_name``.
    """
    if isinstance(data, dict):
        return [{key_name: key, **(value if isinstance(value, dict) else {"value": value})}
                for key, value in data.items()]
    if isinstance(data, list):
        return data
    return []


class CustomerPanelService:
    """Gateway and customer lookup shared by the self-service operations"""

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
            return Err(NotFoundError("Customer not found"))
        return Ok(customer)

    @staticmethod
    def _resolve_domain(customer: Customer, domain: str = "") -> Result[str, LifecycleError]:
        """The requested domain if the customer owns it, else their first website's domain"""
        websites = list(customer.websites.order_by("created_at", "pk"))
        if not websites:
            return Err(NotFoundError("No websites found"))

        if not domain:
            return Ok(websites[0].domain)

        domain = domain.strip().lower()
        owned = {website.subdomain for website in websites} | {w.custom_domain for w in websites if w.custom_domain}
        if domain not in owned:
            return Err(NotFoundError("Domain not found"))
        return Ok(domain)

    def _listing(self, command: HestiaCommand) -> Any:
        step = run_step(self._get_gateway(), command, StepPolicy.BEST_EFFORT).unwrap()
        return step.response.data if step.success and step.response else {}

    def _change(self, command: HestiaCommand) -> Result[None, LifecycleError]:
        step = run_step(self._get_gateway(), command, StepPolicy.BLOCKING)
        if step.is_err():
            error = step.unwrap_err()
            logger.error(f"❌ [Panel] {command.program} failed for {command.args()[0]}: {error.message}")
            return Err(error)
        return Ok(None)


# ===============================================================================
# DNS
# ===============================================================================


class DnsService(CustomerPanelService):
    """List, add and delete DNS records on a customer's domains"""

    def list_records(self, customer_email: str, domain: str = "") -> Result[dict[str, Any], LifecycleError]:
        customer_result = self._get_customer(customer_email)
        if customer_result.is_err():
            return Err(customer_result.unwrap_err())
        customer = customer_result.unwrap()

        domain_result = self._resolve_domain(customer, domain)
        if domain_result.is_err():
            return Err(domain_result.unwrap_err())
        target = domain_result.unwrap()

        records = self._listing(ListDnsRecords(customer.hestia_username, target))
        return Ok({"domain": target, "records": listing_rows(records)})

    def add_record(
        self,
        customer_email: str,
        domain: str,
        record_type: str,
        value: str,
        name: str = "@",
        priority: int | None = None,
        ttl: int = DNS_DEFAULT_TTL,
        context: ActivityContext | None = None,
    ) -> Result[dict[str, Any], LifecycleError]:
        """Add one record; ``name`` defaults to the zone apex."""
        record_type = (record_type or "").strip().upper()
        value = (value or "").strip()
        if not domain or not record_type or not value:
            return Err(ValidationError("Domain, type, and value are required"))
        if record_type not in DNS_RECORD_TYPES:
            return Err(ValidationError(f"Unsupported record type: {record_type}", field="type"))
        if priority is not None and record_type not in DNS_PRIORITY_TYPES:
            priority = None

        customer_result = self._get_customer(customer_email)
        if customer_result.is_err():
            return Err(customer_result.unwrap_err())
        customer = customer_result.unwrap()

        domain_result = self._resolve_domain(customer, domain)
        if domain_result.is_err():
            return Err(domain_result.unwrap_err())
        target = domain_result.unwrap()

        record = (name or "@").strip()
        change = self._change(
            AddDnsRecord(customer.hestia_username, target, record, record_type, value, priority=priority, ttl=ttl)
        )
        if change.is_err():
            return Err(change.unwrap_err())

        ActivityLogService.log(
            ActivityEntry(
                action="dns.record_added",
                resource="dns",
                resource_id=target,
                description=f"Added {record_type} record {record} on {target}",
                metadata={"type": record_type, "record": record, "value": value, "ttl": ttl},
            ),
            context,
        )
        logger.info(f"✅ [DNS] Added {record_type} {record} on {target} for {customer.hestia_username}")
        return Ok({"domain": target, "type": record_type, "name": record, "value": value, "ttl": ttl})

    def delete_record(
        self, customer_email: str, domain: str, record_id: Any, context: ActivityContext | None = None
    ) -> Result[int, LifecycleError]:
        try:
            record_id = int(record_id)
        except (TypeError, ValueError):
            return Err(ValidationError("Domain and record ID are required", field="id"))
        if not domain:
            return Err(ValidationError("Domain and record ID are required", field="domain"))

        customer_result = self._get_customer(customer_email)
        if customer_result.is_err():
            return Err(customer_result.unwrap_err())
        customer = customer_result.unwrap()

        domain_result = self._resolve_domain(customer, domain)
        if domain_result.is_err():
            return Err(domain_result.unwrap_err())
        target = domain_result.unwrap()

        change = self._change(DeleteDnsRecord(customer.hestia_username, target, record_id))
        if change.is_err():
            return Err(change.unwrap_err())

        ActivityLogService.log(
            ActivityEntry(
                action="dns.record_deleted",
                resource="dns",
                resource_id=target,
                description=f"Deleted DNS record {record_id} on {target}",
                metadata={"record_id": record_id},
            ),
            context,
        )
        logger.info(f"🗑️ [DNS] Deleted record {record_id} on {target}")
        return Ok(record_id)


# ===============================================================================
# MAIL
# ===============================================================================


class MailService(CustomerPanelService):
    """Mail accounts on a customer's domains"""

    def list_accounts(self, customer_email: str, domain: str = "") -> Result[dict[str, Any], LifecycleError]:
        customer_result = self._get_customer(customer_email)
        if customer_result.is_err():
            return Err(customer_result.unwrap_err())
        customer = customer_result.unwrap()

        domain_result = self._resolve_domain(customer, domain)
        if domain_result.is_err():
            return Err(domain_result.unwrap_err())
        target = domain_result.unwrap()

        accounts = self._listing(ListMailAccounts(customer.hestia_username, target))
        return Ok({"domain": target, "accounts": listing_rows(accounts, key_name="account")})

    def create_account(
        self,
        customer_email: str,
        account: str,
        password: str,
        domain: str = "",
        context: ActivityContext | None = None,
    ) -> Result[dict[str, str], LifecycleError]:
        """
        Create ``account@domain``; the domain defaults to the customer's first website.

        The password goes to the panel only and is never stored or logged here.
        """
        account = (account or "").strip().lower()
        if not account or not password:
            return Err(ValidationError("Account name and password are required"))
        if not MAIL_ACCOUNT_PATTERN.match(account):
            return Err(ValidationError("Account name may only contain letters, digits, dots, dashes and underscores",
                                       field="account"))

        customer_result = self._get_customer(customer_email)
        if customer_result.is_err():
            return Err(customer_result.unwrap_err())
        customer = customer_result.unwrap()

        domain_result = self._resolve_domain(customer, domain)
        if domain_result.is_err():
            error = domain_result.unwrap_err()
            if not domain:
                return Err(ValidationError("No domain available", field="domain"))
            return Err(error)
        target = domain_result.unwrap()

        change = self._change(AddMailAccount(customer.hestia_username, target, account, password))
        if change.is_err():
            return Err(change.unwrap_err())

        address = f"{account}@{target}"
        ActivityLogService.log(
            ActivityEntry(
                action="mail.account_created",
                resource="mail",
                resource_id=address,
                description=f"Created mail account {address}",
            ),
            context,
        )
        logger.info(f"✅ [Mail] Created {address} for {customer.hestia_username}")
        return Ok({"email": address, "account": account, "domain": target})

    def delete_account(
        self, customer_email: str, account: str, domain: str, context: ActivityContext | None = None
    ) -> Result[str, LifecycleError]:
        account = (account or "").strip().lower()
        if not account or not domain:
            return Err(ValidationError("Account and domain are required"))

        customer_result = self._get_customer(customer_email)
        if customer_result.is_err():
            return Err(customer_result.unwrap_err())
        customer = customer_result.unwrap()

        domain_result = self._resolve_domain(customer, domain)
        if domain_result.is_err():
            return Err(domain_result.unwrap_err())
        target = domain_result.unwrap()

        change = self._change(DeleteMailAccount(customer.hestia_username, target, account))
        if change.is_err():
            return Err(change.unwrap_err())

        address = f"{account}@{target}"
        ActivityLogService.log(
            ActivityEntry(
                action="mail.account_deleted",
                resource="mail",
                resource_id=address,
                description=f"Deleted mail account {address}",
            ),
            context,
        )
        logger.info(f"🗑️ [Mail] Deleted {address}")
        return Ok(address)


# ===============================================================================
# BACKUPS
# ===============================================================================


class BackupService(CustomerPanelService):
    """Full-account backups; restore replaces the account's current files and databases"""

    def list_backups(self, customer_email: str) -> Result[list[dict[str, Any]], LifecycleError]:
        customer_result = self._get_customer(customer_email)
        if customer_result.is_err():
            return Err(customer_result.unwrap_err())
        customer = customer_result.unwrap()

        backups = self._listing(ListUserBackups(customer.hestia_username))
        return Ok(listing_rows(backups, key_name="backup"))

    def create_backup(
        self, customer_email: str, context: ActivityContext | None = None
    ) -> Result[str, LifecycleError]:
        customer_result = self._get_customer(customer_email)
        if customer_result.is_err():
            return Err(customer_result.unwrap_err())
        customer = customer_result.unwrap()

        change = self._change(BackupUser(customer.hestia_username))
        if change.is_err():
            return Err(change.unwrap_err())

        ActivityLogService.log(
            ActivityEntry(
                action="backup.created",
                resource="backup",
                resource_id=customer.pk,
                description=f"Backup created for {customer.hestia_username}",
            ),
            context,
        )
        logger.info(f"💾 [Backup] Created backup for {customer.hestia_username}")
        return Ok(customer.hestia_username)

    def restore_backup(
        self, customer_email: str, backup: str, context: ActivityContext | None = None
    ) -> Result[str, LifecycleError]:
        backup = (backup or "").strip()
        if not backup:
            return Err(ValidationError("Backup name is required", field="backup"))
        if not BACKUP_NAME_PATTERN.match(backup):
            return Err(ValidationError("Invalid backup name", field="backup"))

        customer_result = self._get_customer(customer_email)
        if customer_result.is_err():
            return Err(customer_result.unwrap_err())
        customer = customer_result.unwrap()

        change = self._change(RestoreUser(customer.hestia_username, backup))
        if change.is_err():
            return Err(change.unwrap_err())

        ActivityLogService.log(
            ActivityEntry(
                action="backup.restored",
                resource="backup",
                resource_id=customer.pk,
                description=f"Backup restored for {customer.hestia_username}: {backup}",
                metadata={"backup": backup},
            ),
            context,
        )
        logger.info(f"♻️ [Backup] Restored {backup} for {customer.hestia_username}")
        return Ok(backup)
