"""Geolocation lookups from a QQWry-format database."""

from __future__ import annotations

import ipaddress
import struct
import threading
from pathlib import Path


class QQWry:
    """Reader for QQWry (.dat) IPv4 location databases."""

    def __init__(self, path) -> None:
        self._data = Path(path).read_bytes()
        self._first, self._last = struct.unpack_from("<II", self._data, 0)
        self.ip = ""
        self.country = ""
        self.city = ""

    def _off3(self, pos: int) -> int:
        return int.from_bytes(self._data[pos:pos + 3], "little")

    def _cstr(self, pos: int) -> tuple[str, int]:
        end = self._data.find(b"\0", pos)
        if end < 0:
            end = len(self._data)
        return self._data[pos:end].decode("gbk", errors="replace"), end + 1

    def _area(self, pos: int) -> str:
        mode = self._data[pos]
        if mode in (1, 2):
            off = self._off3(pos + 1)
            return "" if off == 0 else self._cstr(off)[0]
        return self._cstr(pos)[0]

    def _record_offset(self, ip: int) -> int:
        count = (self._last - self._first) // 7 + 1
        lo, hi = 0, count - 1
        best = 0
        while lo <= hi:
            mid = (lo + hi) // 2
            pos = self._first + mid * 7
            start = struct.unpack_from("<I", self._data, pos)[0]
            if start <= ip:
                best = mid
                lo = mid + 1
            else:
                hi = mid - 1
        return self._off3(self._first + best * 7 + 4)

    def find(self, ip: str) -> tuple[str, str]:
        """Look up an IPv4 address; return (country, city)."""
        addr = ipaddress.ip_address(ip)
        self.ip = ip
        if not isinstance(addr, ipaddress.IPv4Address):
            self.country = self.city = ""
            return "", ""
        pos = self._record_offset(int(addr)) + 4
        mode = self._data[pos]
        if mode == 1:
            pos = self._off3(pos + 1)
            if self._data[pos] == 2:
                country = self._cstr(self._off3(pos + 1))[0]
                area_pos = pos + 4
            else:
                country, area_pos = self._cstr(pos)
        elif mode == 2:
            country = self._cstr(self._off3(pos + 1))[0]
            area_pos = pos + 4
        else:
            country, area_pos = self._cstr(pos)
        self.country = country
        self.city = self._area(area_pos)
        return self.country, self.city


_lock = threading.Lock()
_parsers: dict[Path, QQWry | None] = {}


def _database_path() -> Path:
    return Path.home() / "gomtr" / "qqwry.dat"


def get_ip_info(ip: str) -> tuple[str, str]:
    """Return (country, city) for ip, or empty strings without a database."""
    path = _database_path()
    with _lock:
        if path not in _parsers:
            _parsers[path] = QQWry(path) if path.exists() else None
        parser = _parsers[path]
        if parser is None:
            return "", ""
        return parser.find(ip)