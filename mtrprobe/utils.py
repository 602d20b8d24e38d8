"""Address resolution and small helpers."""

from __future__ import annotations

import ipaddress
import socket
import threading
from datetime import timedelta


def lookup_ips(addr: str) -> list[str]:
    """Resolve a host name (or literal) to its IP addresses, in order."""
    infos = socket.getaddrinfo(addr, None)
    ips: list[str] = []
    for info in infos:
        host = info[4][0]
        try:
            ip = str(ipaddress.ip_address(host.split("%", 1)[0]))
        except ValueError:
            continue
        if ip not in ips:
            ips.append(ip)
    return ips


def goid() -> int:
    """Return an identifier of the running thread."""
    return threading.get_native_id()


def _normalize(text: str):
    ip = ipaddress.ip_address(text)
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        return ip.ipv4_mapped
    return ip


def is_equal_ip(ip1: str, ip2: str) -> bool:
    """True when both strings parse as the same IP address."""
    try:
        return _normalize(ip1) == _normalize(ip2)
    except ValueError:
        return False


def time_to_float(elapsed: timedelta) -> float:
    """Duration in milliseconds, truncated to whole microseconds."""
    micros = elapsed // timedelta(microseconds=1)
    return micros / 1000