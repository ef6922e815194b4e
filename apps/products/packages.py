"""
Hosting package catalog for the LumiCloud platform.

Packages are static: each one mirrors a package of the same name on the
Hestia panel. Resource limits use 0 for "unlimited".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

UNLIMITED = 0
MB_PER_GB = 1024

# Applied when a customer's package id is not in the catalog
DEFAULT_WEBSITE_LIMIT = 1
DEFAULT_DATABASE_LIMIT = 1


@dataclass(frozen=True)
class Package:
    """Static hosting package definition"""

    id: str
    name: str
    hestia_package_name: str
    billing_cycle: str
    monthly_price: Decimal
    disk_space_mb: int
    bandwidth_gb: float
    websites: int
    databases: int
    email_accounts: int
    subdomains: int
    ftp_accounts: int
    cron_jobs: int
    backups: int
    ssl_included: bool = True
    dedicated_ip: bool = False
    priority: str = "low"
    features: tuple[str, ...] = field(default_factory=tuple)

    def allows(self, resource: str, current_count: int) -> bool:
        """True when one more ``resource`` fits within the package limit"""
        limit = getattr(self, resource)
        return limit == UNLIMITED or current_count < limit


# ===============================================================================
# PACKAGE CATALOG
# ===============================================================================

PACKAGES: tuple[Package, ...] = (
    Package(
        id="starter",
        name="Starter",
        hestia_package_name="Starter",
        billing_cycle="MONTHLY",
        monthly_price=Decimal("25000"),
        disk_space_mb=500,
        bandwidth_gb=0.98,
        websites=1,
        databases=1,
        email_accounts=1,
        subdomains=5,
        ftp_accounts=1,
        cron_jobs=1,
        backups=1,
        features=(
            "500 MB Disk Space",
            "1 Website",
            "1 Database",
            "1 Email Account",
            "5 Subdomains",
            "Free SSL Certificate",
        ),
    ),
    Package(
        id="business",
        name="Business",
        hestia_package_name="Business",
        billing_cycle="MONTHLY",
        monthly_price=Decimal("75000"),
        disk_space_mb=2930,
        bandwidth_gb=19.53,
        websites=3,
        databases=3,
        email_accounts=1,
        subdomains=UNLIMITED,
        ftp_accounts=1,
        cron_jobs=5,
        backups=3,
        priority="medium",
        features=(
            "2.93 GB Disk Space",
            "3 Websites",
            "3 Databases",
            "Unlimited Subdomains",
            "Free SSL Certificate",
            "Weekly Backups",
        ),
    ),
    Package(
        id="enterprise",
        name="Enterprise",
        hestia_package_name="Enterprise",
        billing_cycle="MONTHLY",
        monthly_price=Decimal("150000"),
        disk_space_mb=6840,
        bandwidth_gb=UNLIMITED,
        websites=7,
        databases=7,
        email_accounts=1,
        subdomains=UNLIMITED,
        ftp_accounts=1,
        cron_jobs=UNLIMITED,
        backups=7,
        dedicated_ip=True,
        priority="high",
        features=(
            "6.84 GB Disk Space",
            "Unlimited Bandwidth",
            "7 Websites",
            "7 Databases",
            "Dedicated IP Address",
            "Daily Backups",
        ),
    ),
)

_PACKAGES_BY_ID = {package.id: package for package in PACKAGES}


def get_package(package_id: str | None) -> Package | None:
    """Look up a package by id; unknown or empty ids return None"""
    if not package_id:
        return None
    return _PACKAGES_BY_ID.get(package_id)


def website_limit(package_id: str | None) -> int:
    package = get_package(package_id)
    return package.websites if package else DEFAULT_WEBSITE_LIMIT


def database_limit(package_id: str | None) -> int:
    package = get_package(package_id)
    return package.databases if package else DEFAULT_DATABASE_LIMIT


def format_limit(limit: int) -> str:
    return "Unlimited" if limit == UNLIMITED else str(limit)


def format_disk_space(megabytes: int) -> str:
    if megabytes >= MB_PER_GB:
        return f"{megabytes / MB_PER_GB:.2f} GB"
    return f"{megabytes} MB"
