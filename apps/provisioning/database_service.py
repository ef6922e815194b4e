"""
Customer database management - LumiCloud platform
"""

from __future__ import annotations

import logging
import re
from typing import Any

from apps.audit.services import ActivityContext, ActivityEntry, ActivityLogService
from apps.common.encryption import generate_password
from apps.common.exceptions import (
    LifecycleError,
    NameCollisionError,
    NotFoundError,
    QuotaExceededError,
    ValidationError,
)
from apps.common.types import Err, Ok, Result
from apps.customers.models import Customer
from apps.products.packages import database_limit, get_package

from .hestia_commands import AddDatabase, DeleteDatabase, ListDatabases
from .hestia_gateway import HestiaConfig
from .hestia_resilience import CancellationToken, ResilientHestiaGateway
from .lifecycle import StepPolicy, run_step
from .models import Database

logger = logging.getLogger(__name__)

DATABASE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_]{1,32}$")
DATABASE_PASSWORD_LENGTH = 16


class DatabaseService:
    """Create, list and delete MySQL databases on a customer's panel account"""

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

    def list_databases(self, customer_email: str) -> Result[dict[str, Any], LifecycleError]:
        """
        Local records plus the panel's live view.

        The panel listing is informational: when it fails the local list is
        still returned with an empty ``hestia`` section.
        """
        customer_result = self._get_customer(customer_email)
        if customer_result.is_err():
            return Err(customer_result.unwrap_err())
        customer = customer_result.unwrap()

        step = run_step(self._get_gateway(), ListDatabases(customer.hestia_username), StepPolicy.BEST_EFFORT).unwrap()
        remote = step.response.data if step.success and step.response else {}

        return Ok({"local": list(customer.databases.all()), "hestia": remote or {}})

    def create_database(
        self, customer_email: str, name: str, context: ActivityContext | None = None
    ) -> Result[tuple[Database, str], LifecycleError]:
        """
        Create ``<hestia_username>_<name>`` with a generated password.

        Returns the local record and the plaintext password, which is shown
        to the customer once and stored encrypted.
        """
        name = (name or "").strip()
        if not name:
            return Err(ValidationError("Database name is required", field="name"))
        if not DATABASE_NAME_PATTERN.match(name):
            return Err(ValidationError("Database name may only contain letters, digits and underscores", field="name"))

        customer_result = self._get_customer(customer_email)
        if customer_result.is_err():
            return Err(customer_result.unwrap_err())
        customer = customer_result.unwrap()

        limit = database_limit(customer.package_id)
        current = customer.databases.count()
        if limit and current >= limit:
            package = get_package(customer.package_id)
            package_name = package.name if package else "Basic"
            return Err(
                QuotaExceededError(
                    f"Database limit reached. Your {package_name} package allows {limit} database(s).",
                    limit=limit,
                    current=current,
                )
            )

        db_name = f"{customer.hestia_username}_{name}"
        if Database.objects.filter(name=db_name).exists():
            return Err(NameCollisionError("A database with this name already exists"))

        password = generate_password(DATABASE_PASSWORD_LENGTH)
        step = run_step(
            self._get_gateway(),
            AddDatabase(customer.hestia_username, db_name, db_name, password),
            StepPolicy.BLOCKING,
        )
        if step.is_err():
            error = step.unwrap_err()
            logger.error(f"❌ [Database] Failed to create {db_name}: {error.message}")
            return Err(error)

        database = Database(customer=customer, name=db_name, username=db_name)
        database.set_password(password)
        database.save()

        ActivityLogService.log(
            ActivityEntry(
                action="database.created",
                resource="database",
                resource_id=database.pk,
                description=f"Created database {db_name} for {customer.name}",
                metadata={"database": db_name},
            ),
            context,
        )
        logger.info(f"✅ [Database] Created {db_name}")
        return Ok((database, password))

    def delete_database(
        self, customer_email: str, database_id: Any, context: ActivityContext | None = None
    ) -> Result[str, LifecycleError]:
        customer_result = self._get_customer(customer_email)
        if customer_result.is_err():
            return Err(customer_result.unwrap_err())
        customer = customer_result.unwrap()

        database = customer.databases.filter(pk=database_id).first()
        if database is None:
            return Err(NotFoundError("Database not found"))

        step = run_step(
            self._get_gateway(), DeleteDatabase(customer.hestia_username, database.name), StepPolicy.BLOCKING
        )
        if step.is_err():
            return Err(step.unwrap_err())

        db_name = database.name
        database.delete()

        ActivityLogService.log(
            ActivityEntry(
                action="database.deleted",
                resource="database",
                resource_id=database_id,
                description=f"Deleted database {db_name}",
            ),
            context,
        )
        logger.info(f"🗑️ [Database] Deleted {db_name}")
        return Ok(db_name)
