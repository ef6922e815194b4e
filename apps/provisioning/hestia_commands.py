"""
Hestia panel commands - LumiCloud platform

Every remote operation the platform performs is one of the frozen dataclasses
below. A command knows its ``v-*`` program name, its positional arguments
(sent as ``arg1..argN``) and whether the caller expects data back instead of a
bare return code.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import ClassVar

# Hestia flag values
YES = "yes"
NO = "no"
JSON_FORMAT = "json"

DEFAULT_DNS_TTL = 600
DEFAULT_MAIL_QUOTA = "unlimited"
DEFAULT_DB_TYPE = "mysql"
DEFAULT_DB_HOST = "localhost"
DEFAULT_DB_CHARSET = "utf8mb4"

MASKED = "***"


@dataclass(frozen=True)
class HestiaCommand:
    """Base class for the closed set of panel commands"""

    program: ClassVar[str] = ""
    returns_data: ClassVar[bool] = False
    # Field names whose values never reach the logs
    secret_fields: ClassVar[tuple[str, ...]] = ()

    def args(self) -> tuple[str, ...]:
        return tuple(str(getattr(self, f.name)) for f in fields(self))

    def masked_args(self) -> tuple[str, ...]:
        if not self.secret_fields:
            return self.args()
        return tuple(
            MASKED if f.name in self.secret_fields else str(getattr(self, f.name))
            for f in fields(self)
        )

    def __str__(self) -> str:
        return f"{self.program} {' '.join(self.masked_args())}".strip()


# ===============================================================================
# USER ACCOUNTS
# ===============================================================================


@dataclass(frozen=True)
class AddUser(HestiaCommand):
    program: ClassVar[str] = "v-add-user"
    secret_fields: ClassVar[tuple[str, ...]] = ("password",)

    user: str
    password: str
    email: str
    package: str = "default"
    first_name: str = ""
    last_name: str = ""


@dataclass(frozen=True)
class DeleteUser(HestiaCommand):
    program: ClassVar[str] = "v-delete-user"

    user: str


@dataclass(frozen=True)
class SuspendUser(HestiaCommand):
    program: ClassVar[str] = "v-suspend-user"

    user: str

    def args(self) -> tuple[str, ...]:
        return (self.user, NO)


@dataclass(frozen=True)
class UnsuspendUser(HestiaCommand):
    program: ClassVar[str] = "v-unsuspend-user"

    user: str

    def args(self) -> tuple[str, ...]:
        return (self.user, NO)


@dataclass(frozen=True)
class ChangeUserPassword(HestiaCommand):
    program: ClassVar[str] = "v-change-user-password"
    secret_fields: ClassVar[tuple[str, ...]] = ("password",)

    user: str
    password: str


@dataclass(frozen=True)
class ListUsers(HestiaCommand):
    program: ClassVar[str] = "v-list-users"
    returns_data: ClassVar[bool] = True

    def args(self) -> tuple[str, ...]:
        return (JSON_FORMAT,)


# ===============================================================================
# WEB DOMAINS
# ===============================================================================


@dataclass(frozen=True)
class AddWebDomain(HestiaCommand):
    program: ClassVar[str] = "v-add-web-domain"

    user: str
    domain: str
    ip: str = ""
    aliases: tuple[str, ...] = ()
    restart: bool = True

    def args(self) -> tuple[str, ...]:
        return (self.user, self.domain, self.ip, YES if self.restart else NO, ",".join(self.aliases))


@dataclass(frozen=True)
class DeleteWebDomain(HestiaCommand):
    program: ClassVar[str] = "v-delete-web-domain"

    user: str
    domain: str


@dataclass(frozen=True)
class SuspendWebDomain(HestiaCommand):
    program: ClassVar[str] = "v-suspend-web-domain"

    user: str
    domain: str


@dataclass(frozen=True)
class UnsuspendWebDomain(HestiaCommand):
    program: ClassVar[str] = "v-unsuspend-web-domain"

    user: str
    domain: str


@dataclass(frozen=True)
class ListWebDomains(HestiaCommand):
    program: ClassVar[str] = "v-list-web-domains"
    returns_data: ClassVar[bool] = True

    user: str

    def args(self) -> tuple[str, ...]:
        return (self.user, JSON_FORMAT)


@dataclass(frozen=True)
class AddWebDomainAlias(HestiaCommand):
    program: ClassVar[str] = "v-add-web-domain-alias"

    user: str
    domain: str
    aliases: tuple[str, ...]

    def args(self) -> tuple[str, ...]:
        return (self.user, self.domain, ",".join(self.aliases), YES)


@dataclass(frozen=True)
class DeleteWebDomainAlias(HestiaCommand):
    program: ClassVar[str] = "v-delete-web-domain-alias"

    user: str
    domain: str
    alias: str


@dataclass(frozen=True)
class ChangeWebDomainBackendTpl(HestiaCommand):
    """PHP version switch; Hestia backend templates are named like ``PHP-8_1``"""

    program: ClassVar[str] = "v-change-web-domain-backend-tpl"

    user: str
    domain: str
    php_version: str

    def args(self) -> tuple[str, ...]:
        return (self.user, self.domain, f"PHP-{self.php_version.replace('.', '_')}")


@dataclass(frozen=True)
class ChangeWebDomainDocroot(HestiaCommand):
    program: ClassVar[str] = "v-change-web-domain-docroot"

    user: str
    domain: str
    directory: str

    def args(self) -> tuple[str, ...]:
        # Target domain is the domain itself; directory is relative to it
        return (self.user, self.domain, self.domain, self.directory)


@dataclass(frozen=True)
class ResetWebDomainDocroot(HestiaCommand):
    program: ClassVar[str] = "v-change-web-domain-docroot"

    user: str
    domain: str

    def args(self) -> tuple[str, ...]:
        return (self.user, self.domain, "default")


# ===============================================================================
# SSL
# ===============================================================================


@dataclass(frozen=True)
class AddLetsEncryptDomain(HestiaCommand):
    program: ClassVar[str] = "v-add-letsencrypt-domain"

    user: str
    domain: str

    def args(self) -> tuple[str, ...]:
        return (self.user, self.domain, YES)


@dataclass(frozen=True)
class AddWebDomainSslForce(HestiaCommand):
    program: ClassVar[str] = "v-add-web-domain-ssl-force"

    user: str
    domain: str


@dataclass(frozen=True)
class UpdateLetsEncryptSsl(HestiaCommand):
    program: ClassVar[str] = "v-update-letsencrypt-ssl"

    user: str
    domain: str


# ===============================================================================
# DATABASES
# ===============================================================================


@dataclass(frozen=True)
class AddDatabase(HestiaCommand):
    program: ClassVar[str] = "v-add-database"
    secret_fields: ClassVar[tuple[str, ...]] = ("db_password",)

    user: str
    database: str
    db_user: str
    db_password: str
    db_type: str = DEFAULT_DB_TYPE
    host: str = DEFAULT_DB_HOST
    charset: str = DEFAULT_DB_CHARSET


@dataclass(frozen=True)
class DeleteDatabase(HestiaCommand):
    program: ClassVar[str] = "v-delete-database"

    user: str
    database: str


@dataclass(frozen=True)
class ListDatabases(HestiaCommand):
    program: ClassVar[str] = "v-list-databases"
    returns_data: ClassVar[bool] = True

    user: str

    def args(self) -> tuple[str, ...]:
        return (self.user, JSON_FORMAT)


# ===============================================================================
# DNS
# ===============================================================================


@dataclass(frozen=True)
class ListDnsRecords(HestiaCommand):
    program: ClassVar[str] = "v-list-dns-records"
    returns_data: ClassVar[bool] = True

    user: str
    domain: str

    def args(self) -> tuple[str, ...]:
        return (self.user, self.domain, JSON_FORMAT)


@dataclass(frozen=True)
class AddDnsRecord(HestiaCommand):
    program: ClassVar[str] = "v-add-dns-record"

    user: str
    domain: str
    record: str
    record_type: str
    value: str
    priority: int | None = None
    ttl: int = DEFAULT_DNS_TTL

    def args(self) -> tuple[str, ...]:
        priority = "" if self.priority is None else str(self.priority)
        # Empty id lets Hestia allocate one
        return (self.user, self.domain, self.record, self.record_type, self.value, priority, "", YES, str(self.ttl))


@dataclass(frozen=True)
class DeleteDnsRecord(HestiaCommand):
    program: ClassVar[str] = "v-delete-dns-record"

    user: str
    domain: str
    record_id: int


# ===============================================================================
# MAIL
# ===============================================================================


@dataclass(frozen=True)
class ListMailAccounts(HestiaCommand):
    program: ClassVar[str] = "v-list-mail-accounts"
    returns_data: ClassVar[bool] = True

    user: str
    domain: str

    def args(self) -> tuple[str, ...]:
        return (self.user, self.domain, JSON_FORMAT)


@dataclass(frozen=True)
class AddMailAccount(HestiaCommand):
    program: ClassVar[str] = "v-add-mail-account"
    secret_fields: ClassVar[tuple[str, ...]] = ("password",)

    user: str
    domain: str
    account: str
    password: str
    quota: str = DEFAULT_MAIL_QUOTA


@dataclass(frozen=True)
class DeleteMailAccount(HestiaCommand):
    program: ClassVar[str] = "v-delete-mail-account"

    user: str
    domain: str
    account: str


# ===============================================================================
# BACKUPS
# ===============================================================================


@dataclass(frozen=True)
class BackupUser(HestiaCommand):
    program: ClassVar[str] = "v-backup-user"

    user: str


@dataclass(frozen=True)
class RestoreUser(HestiaCommand):
    program: ClassVar[str] = "v-restore-user"

    user: str
    backup: str


@dataclass(frozen=True)
class ListUserBackups(HestiaCommand):
    program: ClassVar[str] = "v-list-user-backups"
    returns_data: ClassVar[bool] = True

    user: str

    def args(self) -> tuple[str, ...]:
        return (self.user, JSON_FORMAT)


# ===============================================================================
# SYSTEM
# ===============================================================================


@dataclass(frozen=True)
class ListSysInfo(HestiaCommand):
    program: ClassVar[str] = "v-list-sys-info"
    returns_data: ClassVar[bool] = True

    def args(self) -> tuple[str, ...]:
        return (JSON_FORMAT,)
