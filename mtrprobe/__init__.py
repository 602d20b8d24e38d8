"""ICMP hop tracing (mtr) and ping with per-hop latency statistics."""

__version__ = "0.1.0"
__all__ = ["types", "spew", "utils", "geoip", "icmp", "mtr", "ping", "cli"]