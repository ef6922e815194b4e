"""
Client IP detection for activity logging.

Usage:
    from apps.common.request_ip import get_safe_client_ip

    ip_address = get_safe_client_ip(request)
"""

from django.conf import settings
from django.http import HttpRequest
from ipware import get_client_ip  # type: ignore[import-untyped]

UNKNOWN_IP = 'unknown'


def get_safe_client_ip(request: HttpRequest | None) -> str:
    """
    Get the client IP, honouring IPWARE_TRUSTED_PROXY_LIST when configured.
    Returns 'unknown' if no routable address can be determined.
    """
    if request is None:
        return UNKNOWN_IP

    trusted_proxies = getattr(settings, 'IPWARE_TRUSTED_PROXY_LIST', [])
    if trusted_proxies:
        client_ip, _ = get_client_ip(request, proxy_trusted_ips=trusted_proxies)
    else:
        client_ip, _ = get_client_ip(request)

    return client_ip or UNKNOWN_IP
