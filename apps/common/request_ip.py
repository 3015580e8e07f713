"""
Secure client IP detection for the Municipal CMS Platform

Used by rate limiting, contact-message bookkeeping and request logging.
Proxy headers are honored only when the direct peer is listed in
IPWARE_TRUSTED_PROXY_LIST (single addresses or CIDR ranges).

Usage:
    from apps.common.request_ip import get_safe_client_ip

    client_ip = get_safe_client_ip(request)
"""

import ipaddress

from django.conf import settings
from django.http import HttpRequest
from ipware import get_client_ip

DEFAULT_CLIENT_IP = "127.0.0.1"


def _is_trusted_proxy(ip: str, trusted_proxies: list[str]) -> bool:
    """Check if an IP address is in the trusted proxy list (supports CIDR)."""
    try:
        ip_addr = ipaddress.ip_address(ip)
    except ValueError:
        return False

    for proxy in trusted_proxies:
        try:
            if "/" in proxy:
                if ip_addr in ipaddress.ip_network(proxy, strict=False):
                    return True
            elif ip_addr == ipaddress.ip_address(proxy):
                return True
        except ValueError:
            continue
    return False


def get_safe_client_ip(request: HttpRequest) -> str:
    """
    Get the real client IP address, respecting proxy trust configuration.

    - No trusted proxies configured: REMOTE_ADDR only, forwarding headers ignored
    - Peer is a trusted proxy: django-ipware resolves the left-most client address
    - Anything unparseable falls back to REMOTE_ADDR
    """
    trusted_proxies: list[str] = getattr(settings, "IPWARE_TRUSTED_PROXY_LIST", [])
    remote_addr = request.META.get("REMOTE_ADDR") or DEFAULT_CLIENT_IP

    if not trusted_proxies or not _is_trusted_proxy(remote_addr, trusted_proxies):
        return remote_addr

    client_ip, _routable = get_client_ip(request, proxy_trusted_ips=trusted_proxies)
    return client_ip or remote_addr
