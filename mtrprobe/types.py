"""Plain records shared by the probing modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta


@dataclass
class IcmpResp:
    """Outcome of a single ICMP probe."""

    success: bool = False
    addr: str = ""
    elapsed: timedelta = field(default_factory=timedelta)


@dataclass
class IcmpHop:
    """Aggregated statistics for one hop of a trace."""

    success: bool = False
    address: str = ""
    host: str = ""
    n: int = 0
    ttl: int = 0
    snt: int = 0
    last_time: timedelta = field(default_factory=timedelta)
    avg_time: timedelta = field(default_factory=timedelta)
    best_time: timedelta = field(default_factory=timedelta)
    wrst_time: timedelta = field(default_factory=timedelta)
    loss: float = 0.0