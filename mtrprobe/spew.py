"""Coloured console output helpers."""

from __future__ import annotations

import os
import pprint
import sys

_RESET = "\x1b[0m"
_RED = "31"
_GREEN = "32"
_YELLOW = "33"
_BLUE = "34"
_MAGENTA = "35"
_BOLD = "1"
_FG_BLACK = "30"
_BG_RED = "41"


def _use_color(stream) -> bool:
    if os.environ.get("NO_COLOR") is not None:
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _emit(text: str, *codes: str) -> None:
    stream = sys.stdout
    if not text.endswith("\n"):
        text += "\n"
    if _use_color(stream):
        body, nl = text[:-1], "\n"
        text = f"\x1b[{';'.join(codes)}m{body}{_RESET}{nl}"
    stream.write(text)
    stream.flush()


def _line(args) -> str:
    return " ".join(str(a) for a in args) + "\n"


def _format(fmt: str, args) -> str:
    return fmt % args if args else fmt


def begin_highlight() -> None:
    """Switch the terminal to bold magenta until end_highlight is called."""
    if _use_color(sys.stdout):
        sys.stdout.write(f"\x1b[{_MAGENTA};{_BOLD}m")
        sys.stdout.flush()


def end_highlight() -> None:
    """Reset terminal attributes."""
    if _use_color(sys.stdout):
        sys.stdout.write(_RESET)
        sys.stdout.flush()


def panic(*args) -> None:
    _emit(_line(args), _FG_BLACK, _BG_RED)


def error(*args) -> None:
    _emit(_line(args), _RED)


def errorf(fmt: str, *args) -> None:
    _emit(_format(fmt, args), _RED)


def warn(*args) -> None:
    _emit(_line(args), _YELLOW)


def warnf(fmt: str, *args) -> None:
    _emit(_format(fmt, args), _YELLOW)


def info(*args) -> None:
    _emit(_line(args), _BLUE)


def infof(fmt: str, *args) -> None:
    _emit(_format(fmt, args), _BLUE)


def debug(*args) -> None:
    _emit(_line(args), _GREEN)


def debugf(fmt: str, *args) -> None:
    _emit(_format(fmt, args), _GREEN)


def _caller(frame) -> tuple[str, int, str]:
    if frame is None:
        return "", 0, ""
    parts = frame.f_code.co_filename.replace("\\", "/").split("/")
    return "/".join(parts[-2:]), frame.f_lineno, frame.f_code.co_name


def dump(*args) -> None:
    """Pretty-print values along with the caller's location."""
    body = "\n".join(pprint.pformat(a) for a in args)
    frame = sys._getframe(1)
    file, line, func = _caller(frame)
    _emit(f"file: {file} line: {line}, funcname: {func} message: {body}", _MAGENTA)