"""Command-line entry point: trace the route to each given host."""

from __future__ import annotations

import argparse
import sys

from . import spew
from .mtr import mtr
from .utils import lookup_ips

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


def _parse_bool(text: str) -> bool:
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value {text!r}")


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the command."""
    parser = argparse.ArgumentParser(
        prog="mtrprobe",
        usage="mtrprobe [-hvc] [-mtr] [-ping] hostname list",
        add_help=False,
    )
    parser.add_argument("-h", dest="help", action="store_true", help="print help()")
    parser.add_argument("-v", dest="verbose", action="store_true", help="verbose logging")
    parser.add_argument("-mtr", dest="mtr", nargs="?", const=True, default=True,
                        type=_parse_bool, help="handle mtr")
    parser.add_argument("-ping", dest="ping", nargs="?", const=False, default=False,
                        type=_parse_bool, help="handle ping")
    parser.add_argument("-c", dest="count", type=int, default=3, help="run count")
    parser.add_argument("targets", nargs="*", help="host names or addresses")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.help:
        parser.print_help(sys.stdout)
        return 0
    if not args.targets:
        print("miss target params", file=sys.stderr)
        return 2

    for addr in args.targets:
        try:
            ips = lookup_ips(addr)
        except (OSError, UnicodeError) as exc:
            spew.errorf("faild to dnsresolv addr %s, err: %s", addr, exc)
            continue
        if not ips:
            spew.errorf("can't get available ipaddrs with addr %s", addr)
            continue
        spew.debug(mtr(ips[0], 30, 3, 800))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())