"""
Fixture factories for raw Hestia API response bodies.

``returncode=yes`` commands answer with a bare integer; listing commands
answer with JSON (``json`` format argument) or a plain whitespace table.
"""

from __future__ import annotations

import json
from typing import Any

OK = "0"
E_NOTEXIST = "3"
E_EXISTS = "4"
E_LIMIT = "8"
E_FORBIDDEN = "10"


def return_code(code: int) -> str:
    return str(code)


def web_domains(*domains: str, suspended: tuple[str, ...] = ()) -> str:
    """``v-list-web-domains <user> json``"""
    payload: dict[str, Any] = {}
    for domain in domains:
        payload[domain] = {
            "IP": "198.41.192.67",
            "ALIAS": f"www.{domain}",
            "SSL": "no",
            "SUSPENDED": "yes" if domain in suspended else "no",
            "BACKEND": "PHP-8_1",
            "DOCUMENT_ROOT": f"/home/user/web/{domain}/public_html/",
        }
    return json.dumps(payload)


def databases(*names: str) -> str:
    """``v-list-databases <user> json``"""
    return json.dumps(
        {
            name: {"DATABASE": name, "DBUSER": name, "HOST": "localhost", "TYPE": "mysql", "CHARSET": "UTF8MB4"}
            for name in names
        }
    )


def dns_records(records: dict[int, dict[str, Any]]) -> str:
    """``v-list-dns-records <user> <domain> json``, keyed by record id"""
    return json.dumps(
        {
            str(record_id): {
                "RECORD": record["record"],
                "TYPE": record["type"],
                "PRIORITY": record.get("priority", ""),
                "VALUE": record["value"],
                "TTL": record.get("ttl", "3600"),
                "SUSPENDED": "no",
            }
            for record_id, record in records.items()
        }
    )


def mail_accounts(*accounts: str) -> str:
    """``v-list-mail-accounts <user> <domain> json``"""
    return json.dumps({account: {"QUOTA": "unlimited", "U_DISK": "0", "SUSPENDED": "no"} for account in accounts})


def user_backups(*files: str) -> str:
    """``v-list-user-backups <user> json``"""
    return json.dumps({name: {"TYPE": "local", "SIZE": "12", "UPDATED": "2026-10-18"} for name in files})


def users_table() -> str:
    """Plain listing returned when the json argument is omitted"""
    return (
        "USER          PACKAGE   WEB  DNS  SUSPENDED\n"
        "----          -------   ---  ---  ---------\n"
        "admin         default   1    1    no\n"
        "custjohn1a2b  Starter   1    0    yes\n"
    )


def legacy_error(message: str = "Error: user custjohn doesn't exist") -> str:
    """Older panels answer returncode calls with error text"""
    return message
