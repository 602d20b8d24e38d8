"""ICMP echo probing with a chosen TTL."""

from __future__ import annotations

import ipaddress
import socket
import struct
import time
from datetime import timedelta

from .types import IcmpResp

PROTOCOL_ICMP = 1
PROTOCOL_IPV6_ICMP = 58

_V4_ECHO_REQUEST, _V4_ECHO_REPLY, _V4_TIME_EXCEEDED = 8, 0, 11
_V6_ECHO_REQUEST, _V6_ECHO_REPLY, _V6_TIME_EXCEEDED = 128, 129, 3


def checksum(data: bytes) -> int:
    """Internet checksum (RFC 1071)."""
    if len(data) % 2:
        data += b"\0"
    total = sum(struct.unpack(f"!{len(data) // 2}H", data))
    while total >> 16:
        total = (total & 0xFFFF) + (total >> 16)
    return ~total & 0xFFFF


def echo_payload(seq: int) -> bytes:
    """Echo data: the sequence as 4 little-endian bytes followed by 'x'."""
    return struct.pack("<I", seq & 0xFFFFFFFF) + b"x"


def build_echo_request(ident: int, seq: int, payload: bytes, ipv6: bool) -> bytes:
    """Serialize an echo request; IPv6 leaves the checksum to the kernel."""
    kind = _V6_ECHO_REQUEST if ipv6 else _V4_ECHO_REQUEST
    header = struct.pack("!BBHHH", kind, 0, 0, ident & 0xFFFF, seq & 0xFFFF)
    packet = header + payload
    if ipv6:
        return packet
    csum = checksum(packet)
    return packet[:2] + struct.pack("!H", csum) + packet[4:]


def match_reply(packet: bytes, ipv6: bool, needed_body: bytes, need_id: int, need_seq: int):
    """Return echo data (b'' for time exceeded) if packet answers our probe, else None."""
    if len(packet) < 8:
        return None
    kind = packet[0]
    exceeded = _V6_TIME_EXCEEDED if ipv6 else _V4_TIME_EXCEEDED
    reply = _V6_ECHO_REPLY if ipv6 else _V4_ECHO_REPLY
    echo_kinds = (_V6_ECHO_REQUEST, _V6_ECHO_REPLY) if ipv6 else (_V4_ECHO_REQUEST, _V4_ECHO_REPLY)
    if kind == exceeded:
        inner = packet[8 + (40 if ipv6 else 20):]
        if len(inner) >= 8 and inner[0] in echo_kinds:
            ident, seq = struct.unpack_from("!HH", inner, 4)
            if ident == need_id & 0xFFFF and seq == need_seq & 0xFFFF:
                return b""
        return None
    if kind == reply:
        ident = struct.unpack_from("!H", packet, 4)[0]
        data = packet[8:]
        if data != needed_body or ident != need_id & 0xFFFF:
            return None
        return data
    return None


def probe(dest_addr: str, ttl: int, ident: int, timeout: float, seq: int) -> IcmpResp:
    """Send one echo request with the given TTL and wait for the matching answer.

    Requires raw-socket privileges. Raises TimeoutError when nothing matches in time.
    """
    try:
        ip = ipaddress.ip_address(dest_addr)
    except ValueError:
        raise ValueError(f"ip: {dest_addr} is invalid") from None
    ipv6 = isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is None
    target = str(ip.ipv4_mapped) if isinstance(ip, ipaddress.IPv6Address) and not ipv6 else str(ip)

    start = time.monotonic()
    if ipv6:
        sock = socket.socket(socket.AF_INET6, socket.SOCK_RAW, socket.IPPROTO_ICMPV6)
    else:
        sock = socket.socket(socket.AF_INET, socket.SOCK_RAW, socket.IPPROTO_ICMP)
    with sock:
        if ipv6:
            sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_UNICAST_HOPS, ttl)
        else:
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_TTL, ttl)
        deadline = time.monotonic() + timeout
        payload = echo_payload(seq)
        sock.sendto(build_echo_request(ident, seq, payload, ipv6), (target, 0))
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TimeoutError(f"i/o timeout waiting for reply from {dest_addr}")
            sock.settimeout(remaining)
            data, peer = sock.recvfrom(1500)
            if not data:
                continue
            if not ipv6:
                data = data[(data[0] & 0x0F) * 4:]
            if match_reply(data, ipv6, payload, ident, seq) is None:
                continue
            elapsed = timedelta(seconds=time.monotonic() - start)
            return IcmpResp(success=True, addr=peer[0], elapsed=elapsed)