"""Repeated ICMP echo to a single host with summary statistics."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from . import spew
from .icmp import probe
from .utils import goid, is_equal_ip, lookup_ips, time_to_float

DEFAULT_TIMEOUT_MS = 1000
DEFAULT_PACKET_SIZE = 56
DEFAULT_COUNT = 10
DEFAULT_INTERVAL_MS = 10
DEFAULT_TTL = 128

_MICROSECOND = timedelta(microseconds=1)
_ZERO = timedelta(0)


@dataclass
class PingOptions:
    """Ping settings; a zero value selects the default."""

    count: int = 0
    timeout_ms: int = 0
    interval_ms: int = 0
    packet_size: int = 0

    def __post_init__(self) -> None:
        self.count = self.count or DEFAULT_COUNT
        self.timeout_ms = self.timeout_ms or DEFAULT_TIMEOUT_MS
        self.interval_ms = self.interval_ms or DEFAULT_INTERVAL_MS
        self.packet_size = self.packet_size or DEFAULT_PACKET_SIZE


@dataclass
class PingResp:
    """Summary of a ping run; drop_rate is a fraction, or 100.0 when all failed."""

    dest_addr: str = ""
    success: bool = False
    drop_rate: float = 0.0
    all_time: timedelta = field(default_factory=timedelta)
    best_time: timedelta = field(default_factory=timedelta)
    avg_time: timedelta = field(default_factory=timedelta)
    wrst_time: timedelta = field(default_factory=timedelta)


def summarize(elapsed_samples, count: int) -> PingResp:
    """Build the summary from the round-trip times of successful replies."""
    samples = list(elapsed_samples)
    if not samples:
        return PingResp(success=False, drop_rate=100.0)
    best = wrst = _ZERO
    for elapsed in samples:
        if wrst == _ZERO or elapsed > wrst:
            wrst = elapsed
        if best == _ZERO or elapsed < best:
            best = elapsed
    total = sum(samples, _ZERO)
    return PingResp(
        success=True,
        drop_rate=(count - len(samples)) / count,
        all_time=total,
        best_time=best,
        avg_time=(total // _MICROSECOND // len(samples)) * _MICROSECOND,
        wrst_time=wrst,
    )


def run_ping(ipaddr: str, options: PingOptions) -> PingResp:
    """Send options.count echo requests to ipaddr and summarize the replies."""
    ident = goid()
    timeout = options.timeout_ms / 1000
    samples: list[timedelta] = []
    seq = 0
    for _ in range(options.count):
        try:
            resp = probe(ipaddr, DEFAULT_TTL, ident, timeout, seq)
        except Exception as exc:  # a failed probe counts as a lost packet
            spew.errorf("failed to ping addr %s, err: %s", ipaddr, exc)
            continue
        if not resp.success or not is_equal_ip(ipaddr, resp.addr):
            spew.errorf("failed to ping addr %s, err: %s", ipaddr, None)
            continue
        samples.append(resp.elapsed)
        seq += 1
        time.sleep(options.interval_ms / 1000)
    result = summarize(samples, options.count)
    result.dest_addr = ipaddr
    return result


def _go_float(value: float) -> str:
    if value == int(value) and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def _fraction(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    if not frac:
        return str(whole)
    digits = str(frac).rjust(len(str(unit)) - 1, "0").rstrip("0")
    return f"{whole}.{digits}"


def _duration_string(elapsed: timedelta) -> str:
    ns = (elapsed // _MICROSECOND) * 1000
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    ns = abs(ns)
    if ns < 1_000:
        return f"{sign}{ns}ns"
    if ns < 1_000_000:
        return f"{sign}{_fraction(ns, 1_000)}µs"
    if ns < 1_000_000_000:
        return f"{sign}{_fraction(ns, 1_000_000)}ms"
    hours, rest = divmod(ns, 3_600_000_000_000)
    minutes, rest = divmod(rest, 60_000_000_000)
    text = sign
    if hours:
        text += f"{hours}h"
    if hours or minutes:
        text += f"{minutes}m"
    return f"{text}{_fraction(rest, 1_000_000_000)}s"


def ping(addr: str, count: int = DEFAULT_COUNT, timeout: int = DEFAULT_TIMEOUT_MS,
         interval: int = DEFAULT_INTERVAL_MS) -> str:
    """Ping the first address addr resolves to and return the report text.

    Returns an empty string when addr resolves to no address.
    """
    options = PingOptions(count=count, timeout_ms=timeout, interval_ms=interval)
    ips = lookup_ips(addr)
    if not ips:
        return ""

    lines = [f"Start {datetime.now():%Y-%m-%d %H:%M:%S}, PING {addr} ({ips[0]})\n"]
    begin = time.time_ns() // 1_000_000
    resp = run_ping(ips[0], options)
    end = time.time_ns() // 1_000_000

    lines.append(
        f"{count} packets transmitted, {_go_float(resp.drop_rate)} packet loss, time {end - begin}ms\n"
    )
    lines.append(
        "rtt min/avg/max = "
        f"{_go_float(time_to_float(resp.wrst_time))}/"
        f"{_go_float(time_to_float(resp.avg_time))}/"
        f"{_go_float(time_to_float(resp.best_time))} ms\n"
    )
    lines.append(
        "rtt min/avg/max = "
        f"{_duration_string(resp.wrst_time)}/"
        f"{_duration_string(resp.avg_time)}/"
        f"{_duration_string(resp.best_time)} ms\n"
    )
    return "".join(lines)