"""
Hestia API Gateway - LumiCloud platform
Command-style HTTPS client for the Hestia control panel.

Every call is a form-encoded POST to ``https://host:port/api/`` carrying the
credentials, ``cmd`` and positional ``arg1..argN``. Unless the command returns
data, ``returncode=yes`` is sent and the body is a bare integer (0 = success).
"""

from __future__ import annotations

import dataclasses
import json
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import requests
from django.conf import settings

from apps.common.types import Err, Ok, Result

from .hestia_commands import (
    AddDatabase,
    AddDnsRecord,
    AddLetsEncryptDomain,
    AddMailAccount,
    AddUser,
    AddWebDomain,
    AddWebDomainAlias,
    AddWebDomainSslForce,
    BackupUser,
    ChangeUserPassword,
    ChangeWebDomainBackendTpl,
    ChangeWebDomainDocroot,
    DeleteDatabase,
    DeleteDnsRecord,
    DeleteMailAccount,
    DeleteUser,
    DeleteWebDomain,
    DeleteWebDomainAlias,
    HestiaCommand,
    ListDatabases,
    ListDnsRecords,
    ListMailAccounts,
    ListSysInfo,
    ListUserBackups,
    ListUsers,
    ListWebDomains,
    ResetWebDomainDocroot,
    RestoreUser,
    SuspendUser,
    SuspendWebDomain,
    UnsuspendUser,
    UnsuspendWebDomain,
    UpdateLetsEncryptSsl,
)

if TYPE_CHECKING:
    from apps.customers.models import Customer

logger = logging.getLogger(__name__)

# ===============================================================================
# CONSTANTS
# ===============================================================================

HESTIA_DEFAULT_PORT = 8083
HESTIA_API_TIMEOUT = 30  # seconds
HESTIA_CONNECTION_POOL_SIZE = 10

# HTTP status code constants
HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403
HTTP_BAD_REQUEST = 400

# Response size limits (DoS protection)
MAX_RESPONSE_SIZE_MB = 10
MAX_RESPONSE_SIZE_BYTES = MAX_RESPONSE_SIZE_MB * 1024 * 1024
RAW_OUTPUT_LIMIT = 10000

RETURN_CODE_OK = 0
RETURN_CODE_FORBIDDEN = 10

# Hestia exit codes (func/main.sh)
HESTIA_RETURN_CODES: dict[int, str] = {
    1: "E_ARGS",
    2: "E_INVALID",
    3: "E_NOTEXIST",
    4: "E_EXISTS",
    5: "E_SUSPENDED",
    6: "E_UNSUSPENDED",
    7: "E_INUSE",
    8: "E_LIMIT",
    9: "E_PASSWORD",
    10: "E_FORBIDEN",
    11: "E_DISABLED",
    12: "E_PARSING",
    13: "E_DISK",
    14: "E_LA",
    15: "E_CONNECT",
    16: "E_FTP",
    17: "E_DB",
    18: "E_RRD",
    19: "E_UPDATE",
    20: "E_RESTART",
}

FORBIDDEN_GUIDANCE = (
    "Hestia API access forbidden. Whitelist this application server's IP "
    "address in the Hestia API settings."
)
TRANSPORT_GUIDANCE = "Unable to contact Hestia (connectivity or TLS issue)."


# ===============================================================================
# CONFIGURATION & RESPONSE TYPES
# ===============================================================================


@dataclass(frozen=True)
class HestiaConfig:
    """
    Connection parameters for one Hestia identity.

    Built explicitly by the caller: either the admin identity from settings or
    a customer's own panel credentials. The gateway never reads settings for
    credentials itself.
    """

    host: str
    user: str
    password: str = ""
    port: int = HESTIA_DEFAULT_PORT
    access_key_id: str = ""
    secret_key: str = ""
    verify_ssl: bool = False  # Panels commonly run self-signed certificates
    timeout: float = HESTIA_API_TIMEOUT

    @property
    def api_url(self) -> str:
        return f"https://{self.host}:{self.port}/api/"

    @property
    def has_credentials(self) -> bool:
        return bool(self.password or (self.access_key_id and self.secret_key))

    def auth_params(self) -> dict[str, str]:
        """Password auth wins over access keys; admin commands need the password"""
        params = {"user": self.user}
        if self.password:
            params["password"] = self.password
        else:
            params["access_key"] = self.access_key_id
            params["secret_key"] = self.secret_key
        return params

    def with_timeout(self, timeout: float) -> HestiaConfig:
        return dataclasses.replace(self, timeout=timeout)

    @classmethod
    def admin_from_settings(cls) -> HestiaConfig:
        """Admin identity used for account-level commands (suspend, add user, ...)"""
        return cls(
            host=settings.HESTIA_HOST,
            port=int(settings.HESTIA_PORT),
            user=settings.HESTIA_ADMIN_USER,
            password=settings.HESTIA_ADMIN_PASSWORD,
            access_key_id=getattr(settings, "HESTIA_ACCESS_KEY_ID", ""),
            secret_key=getattr(settings, "HESTIA_SECRET_KEY", ""),
            verify_ssl=getattr(settings, "HESTIA_VERIFY_SSL", False),
            timeout=getattr(settings, "HESTIA_REQUEST_TIMEOUT", HESTIA_API_TIMEOUT),
        )

    @classmethod
    def for_customer(cls, customer: Customer) -> HestiaConfig:
        """Customer's own panel identity on the shared Hestia host"""
        return cls.for_panel_user(customer.hestia_username, customer.get_hestia_password())

    @classmethod
    def for_panel_user(cls, username: str, password: str) -> HestiaConfig:
        return cls(
            host=settings.HESTIA_HOST,
            port=int(settings.HESTIA_PORT),
            user=username,
            password=password,
            verify_ssl=getattr(settings, "HESTIA_VERIFY_SSL", False),
            timeout=getattr(settings, "HESTIA_REQUEST_TIMEOUT", HESTIA_API_TIMEOUT),
        )


@dataclass(frozen=True)
class HestiaResponse:
    """Normalized Hestia API response"""

    success: bool
    data: Any
    raw_output: str
    error: str
    return_code: int | None
    http_status: int
    command: str
    execution_time: float

    @property
    def is_forbidden(self) -> bool:
        """The panel refused this caller - usually the app server IP is not whitelisted"""
        if self.return_code == RETURN_CODE_FORBIDDEN:
            return True
        return self.http_status in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN)

    @property
    def error_message(self) -> str:
        return FORBIDDEN_GUIDANCE if self.is_forbidden else self.error


# ===============================================================================
# ERRORS
# ===============================================================================


class HestiaAPIError(Exception):
    """Base exception for Hestia API errors"""

    def __init__(self, message: str, host: str = "", program: str = ""):
        super().__init__(message)
        self.host = host
        self.program = program


class HestiaConfigurationError(HestiaAPIError):
    """No usable credentials for the requested identity"""


class HestiaTransportError(HestiaAPIError):
    """Panel unreachable: connection refused, TLS failure or timeout"""


class HestiaCancelledError(HestiaTransportError):
    """Call abandoned before dispatch because the caller cancelled"""


class HestiaResponseTooLargeError(HestiaAPIError):
    """Panel answered with a body over MAX_RESPONSE_SIZE_BYTES"""


# ===============================================================================
# RESPONSE PARSER
# ===============================================================================


class HestiaResponseParser:
    """
    Handles Hestia's response formats: return codes, JSON and plain tables.

    ``returncode=yes`` calls answer with a bare integer. Listing commands
    answer with JSON when asked for the json format, and with a whitespace
    table (header, dashed separator, rows) otherwise.
    """

    @staticmethod
    def parse_response(response_text: str, command: HestiaCommand, http_status: int) -> dict[str, Any]:
        text = (response_text or "").strip()

        if http_status >= HTTP_BAD_REQUEST:
            return {
                "success": False,
                "data": None,
                "return_code": None,
                "error": text or f"HTTP {http_status}",
            }

        if not command.returns_data:
            return HestiaResponseParser._parse_return_code(text, command.program)

        return HestiaResponseParser._parse_data(text, command.program)

    @staticmethod
    def _parse_return_code(text: str, program: str) -> dict[str, Any]:
        try:
            return_code = int(text)
        except ValueError:
            # Older panels answer with the error text instead of a code
            return {"success": False, "data": text, "return_code": None, "error": text or "Empty response"}

        if return_code == RETURN_CODE_OK:
            return {"success": True, "data": None, "return_code": return_code, "error": ""}

        return {
            "success": False,
            "data": None,
            "return_code": return_code,
            "error": HestiaResponseParser.describe_return_code(return_code, program),
        }

    @staticmethod
    def _parse_data(text: str, program: str) -> dict[str, Any]:
        if not text:
            return {"success": True, "data": {}, "return_code": None, "error": ""}

        if text.startswith(("{", "[")):
            try:
                return {"success": True, "data": json.loads(text), "return_code": None, "error": ""}
            except json.JSONDecodeError as e:
                logger.warning(f"⚠️ [Hestia] Failed to parse JSON response for {program}: {e}")

        if text.lstrip("-").isdigit():
            return_code = int(text)
            if return_code != RETURN_CODE_OK:
                return {
                    "success": False,
                    "data": None,
                    "return_code": return_code,
                    "error": HestiaResponseParser.describe_return_code(return_code, program),
                }

        if text.lower().startswith("error"):
            return {"success": False, "data": None, "return_code": None, "error": text}

        return {"success": True, "data": HestiaResponseParser.parse_table(text), "return_code": None, "error": ""}

    @staticmethod
    def parse_table(text: str) -> list[dict[str, str]]:
        """Parse Hestia's plain listing format into one dict per row"""
        lines = [line for line in text.splitlines() if line.strip()]
        if not lines:
            return []

        header = lines[0].split()
        rows = []
        for line in lines[1:]:
            if set(line.strip()) <= {"-", " "}:
                continue
            values = line.split(None, len(header) - 1)
            rows.append(dict(zip(header, values, strict=False)))
        return rows

    @staticmethod
    def describe_return_code(return_code: int, program: str) -> str:
        name = HESTIA_RETURN_CODES.get(return_code, "E_UNKNOWN")
        return f"{program} failed with return code {return_code} ({name})"


# ===============================================================================
# GATEWAY
# ===============================================================================


class HestiaGateway:
    """
    Hestia gateway.

    ``invoke`` performs exactly one HTTP request. Transport failures come back
    as ``Err(HestiaTransportError)``; anything the panel answered (including a
    non-zero return code) comes back as ``Ok(HestiaResponse)`` with
    ``success`` set accordingly. Retries live in ``ResilientHestiaGateway``.
    """

    def __init__(self, config: HestiaConfig):
        self.config = config
        self._session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create configured requests session"""
        session = requests.Session()

        adapter = requests.adapters.HTTPAdapter(
            pool_connections=HESTIA_CONNECTION_POOL_SIZE,
            pool_maxsize=HESTIA_CONNECTION_POOL_SIZE,
            max_retries=0,  # Handle retries manually
        )
        session.mount("https://", adapter)

        site_url = getattr(settings, "SITE_URL", "https://lumicloude.my.id")
        session.headers.update(
            {
                "User-Agent": f"LumiCloud-Platform/1.0 (+{site_url})",
                "Accept": "application/json, text/plain",
                "Content-Type": "application/x-www-form-urlencoded",
            }
        )

        return session

    def _build_form(self, command: HestiaCommand) -> dict[str, str]:
        form = self.config.auth_params()
        form["cmd"] = command.program
        if not command.returns_data:
            form["returncode"] = "yes"
        for position, value in enumerate(command.args(), start=1):
            form[f"arg{position}"] = value
        return form

    def invoke(self, command: HestiaCommand, timeout: float | None = None) -> Result[HestiaResponse, HestiaAPIError]:
        """
        Send one command to the panel.

        Args:
            command: Command to execute
            timeout: Per-call deadline in seconds (defaults to the config timeout)

        Returns:
            Result containing HestiaResponse or a transport/configuration error
        """
        if not self.config.has_credentials:
            return Err(
                HestiaConfigurationError(
                    f"No Hestia credentials configured for {self.config.user}", self.config.host, command.program
                )
            )

        start_time = time.time()
        logger.info(f"🔗 [Hestia] Calling {command} on {self.config.host} as {self.config.user}")

        try:
            response = self._make_request(self._build_form(command), command, timeout or self.config.timeout)
        except HestiaAPIError as e:
            execution_time = time.time() - start_time
            logger.error(f"🔥 [Hestia] {command.program} failed after {execution_time:.2f}s: {e}")
            return Err(e)

        execution_time = time.time() - start_time
        parsed = HestiaResponseParser.parse_response(response.text, command, response.status_code)

        hestia_response = HestiaResponse(
            success=parsed["success"],
            data=parsed["data"],
            raw_output=response.text[:RAW_OUTPUT_LIMIT],
            error=parsed["error"],
            return_code=parsed["return_code"],
            http_status=response.status_code,
            command=command.program,
            execution_time=execution_time,
        )

        if hestia_response.success:
            logger.info(f"✅ [Hestia] {command.program} completed in {execution_time:.2f}s")
        else:
            logger.warning(
                f"⚠️ [Hestia] {command.program} rejected in {execution_time:.2f}s: {hestia_response.error_message}"
            )

        return Ok(hestia_response)

    def _make_request(self, form: dict[str, str], command: HestiaCommand, timeout: float) -> requests.Response:
        """
        POST the form to the panel, translating transport failures.

        Raises:
            HestiaTransportError: On connection, TLS or timeout failures
        """
        host = self.config.host
        try:
            response = self._session.post(
                self.config.api_url,
                data=form,
                timeout=timeout,
                verify=self.config.verify_ssl,
                stream=True,  # For response size checking
            )
            self._validate_response_size(response, command)
            return response

        except requests.exceptions.SSLError as e:
            raise HestiaTransportError(f"SSL error connecting to {host}: {e}", host, command.program) from e
        except requests.exceptions.ConnectTimeout as e:
            raise HestiaTransportError(f"Connection timeout to {host}", host, command.program) from e
        except requests.exceptions.ReadTimeout as e:
            raise HestiaTransportError(f"Read timeout from {host}", host, command.program) from e
        except requests.exceptions.ConnectionError as e:
            raise HestiaTransportError(f"Connection error to {host}: {e}", host, command.program) from e
        except requests.exceptions.RequestException as e:
            raise HestiaTransportError(f"Request to {host} failed: {e}", host, command.program) from e

    def _validate_response_size(self, response: requests.Response, command: HestiaCommand) -> None:
        """Read response content with a size limit."""
        content_length = response.headers.get("content-length")
        if content_length and int(content_length) > MAX_RESPONSE_SIZE_BYTES:
            raise HestiaResponseTooLargeError(
                f"Response too large: {content_length} bytes", self.config.host, command.program
            )

        content = b""
        for chunk in response.iter_content(chunk_size=8192):
            content += chunk
            if len(content) > MAX_RESPONSE_SIZE_BYTES:
                raise HestiaResponseTooLargeError(
                    f"Response exceeds size limit: {MAX_RESPONSE_SIZE_MB}MB", self.config.host, command.program
                )

        response._content = content

    # ===============================================================================
    # USER ACCOUNTS
    # ===============================================================================

    def add_user(self, user: str, password: str, email: str, package: str = "default",
                 first_name: str = "", last_name: str = "") -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(AddUser(user, password, email, package, first_name, last_name))

    def delete_user(self, user: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(DeleteUser(user))

    def suspend_user(self, user: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(SuspendUser(user))

    def unsuspend_user(self, user: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(UnsuspendUser(user))

    def change_user_password(self, user: str, password: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(ChangeUserPassword(user, password))

    def list_users(self) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(ListUsers())

    # ===============================================================================
    # WEB DOMAINS
    # ===============================================================================

    def add_web_domain(self, user: str, domain: str, ip: str = "",
                       aliases: tuple[str, ...] = ()) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(AddWebDomain(user, domain, ip, tuple(aliases)))

    def delete_web_domain(self, user: str, domain: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(DeleteWebDomain(user, domain))

    def suspend_web_domain(self, user: str, domain: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(SuspendWebDomain(user, domain))

    def unsuspend_web_domain(self, user: str, domain: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(UnsuspendWebDomain(user, domain))

    def list_web_domains(self, user: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(ListWebDomains(user))

    def add_web_domain_alias(self, user: str, domain: str,
                             aliases: tuple[str, ...]) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(AddWebDomainAlias(user, domain, tuple(aliases)))

    def delete_web_domain_alias(self, user: str, domain: str, alias: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(DeleteWebDomainAlias(user, domain, alias))

    def change_php_version(self, user: str, domain: str, php_version: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(ChangeWebDomainBackendTpl(user, domain, php_version))

    def change_document_root(self, user: str, domain: str, directory: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(ChangeWebDomainDocroot(user, domain, directory))

    def reset_document_root(self, user: str, domain: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(ResetWebDomainDocroot(user, domain))

    # ===============================================================================
    # SSL
    # ===============================================================================

    def enable_ssl(self, user: str, domain: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(AddLetsEncryptDomain(user, domain))

    def force_ssl(self, user: str, domain: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(AddWebDomainSslForce(user, domain))

    def renew_ssl(self, user: str, domain: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(UpdateLetsEncryptSsl(user, domain))

    # ===============================================================================
    # DATABASES, DNS, MAIL, BACKUPS
    # ===============================================================================

    def add_database(self, user: str, database: str, db_user: str,
                     db_password: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(AddDatabase(user, database, db_user, db_password))

    def delete_database(self, user: str, database: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(DeleteDatabase(user, database))

    def list_databases(self, user: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(ListDatabases(user))

    def list_dns_records(self, user: str, domain: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(ListDnsRecords(user, domain))

    def add_dns_record(self, user: str, domain: str, record: str, record_type: str, value: str,
                       priority: int | None = None) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(AddDnsRecord(user, domain, record, record_type, value, priority))

    def delete_dns_record(self, user: str, domain: str, record_id: int) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(DeleteDnsRecord(user, domain, record_id))

    def list_mail_accounts(self, user: str, domain: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(ListMailAccounts(user, domain))

    def add_mail_account(self, user: str, domain: str, account: str,
                         password: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(AddMailAccount(user, domain, account, password))

    def delete_mail_account(self, user: str, domain: str, account: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(DeleteMailAccount(user, domain, account))

    def backup_user(self, user: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(BackupUser(user))

    def restore_user(self, user: str, backup: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(RestoreUser(user, backup))

    def list_user_backups(self, user: str) -> Result[HestiaResponse, HestiaAPIError]:
        return self.invoke(ListUserBackups(user))

    # ===============================================================================
    # HEALTH
    # ===============================================================================

    def test_connection(self) -> Result[dict[str, Any], str]:
        """Test connection to the panel with a read-only system info call"""
        result = self.invoke(ListSysInfo())
        if result.is_err():
            return Err(str(result.unwrap_err()))

        response = result.unwrap()
        if not response.success:
            return Err(response.error_message)

        return Ok({"host": self.config.host, "response_time": response.execution_time, "info": response.data})

    def close(self) -> None:
        """Close the HTTP session"""
        if self._session:
            self._session.close()
