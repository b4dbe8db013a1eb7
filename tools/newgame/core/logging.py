"""Console output for the new-game CLI.

Every line is flushed immediately so a parent process relaying the output
(the launcher service) sees it as it happens. Colour is applied only when
the target stream is a terminal and ``NO_COLOR`` is unset, which keeps
relayed output free of escape codes.
"""

from __future__ import annotations

import os
import sys
from typing import TextIO


# ANSI Escape Codes for Colors
class Color:
    BLUE = "\033[94m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    END = "\033[0m"


def use_color(stream: TextIO) -> bool:
    if "NO_COLOR" in os.environ:
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _paint(text: str, color: str, stream: TextIO) -> str:
    if not use_color(stream):
        return text
    return f"{color}{text}{Color.END}"


def _write(symbol: str, color: str, msg: str, stream: TextIO | None = None) -> None:
    target = stream or sys.stdout
    print(_paint(f"{symbol} {msg}", color, target), file=target, flush=True)


def info(msg: str):
    _write("ℹ", Color.CYAN, msg)


def success(msg: str):
    _write("✅", Color.GREEN, msg)


def warning(msg: str):
    _write("⚠️", Color.YELLOW, msg)


def error(msg: str):
    _write("❌", Color.RED, msg, sys.stderr)


def step(msg: str):
    _write("➜", Color.BLUE + Color.BOLD, msg)


def highlight(msg: str) -> str:
    return _paint(msg, Color.BOLD, sys.stdout)
