"""Trace the route to a host, probing every hop several times."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from . import spew
from .geoip import get_ip_info
from .icmp import probe
from .types import IcmpHop, IcmpResp
from .utils import goid, is_equal_ip, time_to_float

DEFAULT_MAX_HOPS = 30
DEFAULT_TIMEOUT_MS = 800
DEFAULT_PACKET_SIZE = 56
DEFAULT_SNT_SIZE = 5

_MICROSECOND = timedelta(microseconds=1)
_ZERO = timedelta(0)


@dataclass
class MtrOptions:
    """Trace settings; a zero value selects the default."""

    max_hops: int = 0
    timeout_ms: int = 0
    packet_size: int = 0
    snt_size: int = 0

    def __post_init__(self) -> None:
        self.max_hops = self.max_hops or DEFAULT_MAX_HOPS
        self.timeout_ms = self.timeout_ms or DEFAULT_TIMEOUT_MS
        self.packet_size = self.packet_size or DEFAULT_PACKET_SIZE
        self.snt_size = self.snt_size or DEFAULT_SNT_SIZE


@dataclass
class MtrReturn:
    """Running statistics for one TTL while probes come in."""

    success: bool = False
    ttl: int = 0
    host: str = "???"
    succ_sum: int = 0
    last_time: timedelta = field(default_factory=timedelta)
    all_time: timedelta = field(default_factory=timedelta)
    best_time: timedelta = field(default_factory=timedelta)
    avg_time: timedelta = field(default_factory=timedelta)
    wrst_time: timedelta = field(default_factory=timedelta)

    def record(self, resp: IcmpResp) -> None:
        """Fold one successful probe into the statistics."""
        self.succ_sum += 1
        self.host = resp.addr
        self.last_time = resp.elapsed
        if self.wrst_time == _ZERO or resp.elapsed > self.wrst_time:
            self.wrst_time = resp.elapsed
        if self.best_time == _ZERO or resp.elapsed < self.best_time:
            self.best_time = resp.elapsed
        self.all_time += resp.elapsed
        self.avg_time = (self.all_time // _MICROSECOND // self.succ_sum) * _MICROSECOND
        self.success = True


@dataclass
class MtrResult:
    """The hops found on the way to a destination."""

    dest_address: str = ""
    hops: list[IcmpHop] = field(default_factory=list)


def aggregate(responses, dest_addr: str, options: MtrOptions) -> MtrResult:
    """Turn rounds of per-TTL probe responses into hop statistics.

    Each round is indexed by TTL; a missing response is None. Hops stop at
    the first one that answers from the destination address.
    """
    returns: list[MtrReturn | None] = [None] * (options.max_hops + 1)
    for row in responses:
        for ttl in range(1, options.max_hops):
            entry = returns[ttl]
            if entry is None:
                entry = returns[ttl] = MtrReturn(ttl=ttl)
            data = row[ttl] if ttl < len(row) else None
            if data is not None:
                entry.record(data)

    hops: list[IcmpHop] = []
    for entry in returns[1:]:
        if entry is None:
            break
        failed = options.snt_size - entry.succ_sum
        hops.append(
            IcmpHop(
                success=entry.success,
                address=entry.host,
                host=entry.host,
                ttl=entry.ttl,
                snt=options.snt_size,
                last_time=entry.last_time,
                avg_time=entry.avg_time,
                best_time=entry.best_time,
                wrst_time=entry.wrst_time,
                loss=failed / options.snt_size * 100,
            )
        )
        if is_equal_ip(entry.host, dest_addr):
            break
    return MtrResult(dest_address=dest_addr, hops=hops)


def _geo_for(ip: str) -> str:
    country, city = get_ip_info(ip)
    return f"{country}:{city}"


def _row(ttl, address, loss, snt, last, avg, best, wrst, geo) -> str:
    return (
        f"{ttl:<3}  {address:<15}  {loss:10.1f}%  {snt:>10}  {last:10.2f}  "
        f"{avg:10.2f}  {best:10.2f}  {wrst:10.2f}  {geo:<100} \n"
    )


def format_report(result: MtrResult, dest_addr: str, started: datetime | None = None) -> str:
    """Render a trace result as a text table."""
    started = started or datetime.now()
    out = [f"Start: {started:%Y-%m-%d %H:%M:%S}, DestAddr: {dest_addr}\n\n"]
    if not result.hops:
        out.append("mtr failed. Expected at least one hop\n")
        return "".join(out)

    out.append(
        f"{'':<3}  {'HOST':<15}  {'Loss':>10}%  {'Snt':>10}  {'Last':>10}  "
        f"{'Avg':>10}  {'Best':>10}  {'Wrst':>10}  {'GEO':<100} \n"
    )

    pending: list[str] = []
    last_hop = 0
    final = len(result.hops) - 1
    for index, hop in enumerate(result.hops):
        if hop.success:
            out.extend(pending)
            pending.clear()
            out.append(
                _row(
                    hop.ttl,
                    hop.address,
                    hop.loss,
                    hop.snt,
                    time_to_float(hop.last_time),
                    time_to_float(hop.avg_time),
                    time_to_float(hop.best_time),
                    time_to_float(hop.wrst_time),
                    _geo_for(hop.address),
                )
            )
            last_hop = hop.ttl
        elif index != final:
            pending.append(_row(hop.ttl, "???", 100.0, 0, 0.0, 0.0, 0.0, 0.0, "null"))
        else:
            last_hop += 1
            out.append(f"{last_hop:<3} {'???':<48}\n")
    return "".join(out)


def _safe_ident() -> int:
    threshold = 1000
    ident = goid()
    return ident + threshold if ident < threshold else ident


def _probe_hop(dest_addr: str, ttl: int, timeout: float, seq: int) -> IcmpResp | None:
    try:
        resp = probe(dest_addr, ttl, _safe_ident(), timeout, seq)
    except Exception as exc:  # every failure just means no answer for this hop
        spew.infof("failed to ping icmp, err: %s", exc)
        return None
    return resp if resp.success else None


def batch_detect(dest_addr: str, options: MtrOptions) -> list[list[IcmpResp | None]]:
    """Probe every TTL concurrently, once per round, for snt_size rounds."""
    timeout = options.timeout_ms / 1000
    rounds: list[list[IcmpResp | None]] = [
        [None] * (options.max_hops + 1) for _ in range(options.snt_size)
    ]
    ttls = range(1, options.max_hops)
    with ThreadPoolExecutor(max_workers=max(1, len(ttls))) as pool:
        for row in rounds:
            futures = {ttl: pool.submit(_probe_hop, dest_addr, ttl, timeout, 0) for ttl in ttls}
            for ttl, future in futures.items():
                row[ttl] = future.result()
    return rounds


def run_mtr(dest_addr: str, options: MtrOptions) -> MtrResult:
    """Probe the route to dest_addr and aggregate the results."""
    return aggregate(batch_detect(dest_addr, options), dest_addr, options)


def mtr(ip_addr: str, max_hops: int = DEFAULT_MAX_HOPS, snt_size: int = DEFAULT_SNT_SIZE,
        timeout_ms: int = DEFAULT_TIMEOUT_MS) -> str:
    """Trace the route to ip_addr and return the report text."""
    options = MtrOptions(max_hops=max_hops, snt_size=snt_size, timeout_ms=timeout_ms)
    started = datetime.now()
    result = run_mtr(ip_addr, options)
    return format_report(result, ip_addr, started)