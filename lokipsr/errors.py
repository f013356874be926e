"""Checked preconditions that raise exceptions carrying the caller's location."""

from __future__ import annotations

import inspect
from typing import Any


def _caller_location() -> tuple[str, str, int]:
    """Return (function, file, line) of the first frame outside this module."""
    frame = inspect.currentframe()
    try:
        while frame is not None and frame.f_code.co_filename == __file__:
            frame = frame.f_back
        if frame is None:
            return "<unknown>", "<unknown>", 0
        return frame.f_code.co_name, frame.f_code.co_filename, frame.f_lineno
    finally:
        del frame


class DetailedException(RuntimeError):
    """Runtime error whose message names the function, file and line that raised it."""

    def __init__(self, user_msg: str) -> None:
        function, filename, line = _caller_location()
        self.user_msg = user_msg
        self.function = function
        self.filename = filename
        self.line = line
        super().__init__(f"Error: {user_msg}\nIn {function} ({filename}:{line})")


def check(condition: bool, msg: str) -> None:
    """Raise DetailedException with ``msg`` unless ``condition`` holds."""
    if not condition:
        raise DetailedException(msg)


def check_equal(a: Any, b: Any, msg: str = "") -> None:
    """Raise DetailedException unless ``a == b``."""
    if a != b:
        composed = f"Check failed: {a} != {b}" if not msg else f"{msg} ({a} != {b})"
        raise DetailedException(composed)


def check_not_null(obj: Any, msg: str = "Pointer must not be null") -> None:
    """Raise DetailedException if ``obj`` is None."""
    if obj is None:
        raise DetailedException(msg)


def check_range(index: int, size: int, msg: str = "") -> None:
    """Raise DetailedException unless ``0 <= index < size``."""
    if index < 0 or index >= size:
        composed = (
            f"Index {index} out of range [0, {size})"
            if not msg
            else f"{msg} (index {index} >= size {size})"
        )
        raise DetailedException(composed)