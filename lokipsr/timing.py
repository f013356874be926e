"""Scope timer that logs how long a block of code took."""

from __future__ import annotations

import logging
import time
from types import TracebackType

logger = logging.getLogger(__name__)

_enabled = True


def set_timing_enabled(enabled: bool) -> None:
    """Enable or disable timing output globally."""
    global _enabled
    _enabled = bool(enabled)


def timing_enabled() -> bool:
    """Return whether timing output is enabled."""
    return _enabled


class ScopeTimer:
    """Context manager logging the start and elapsed milliseconds of a block."""

    def __init__(self, label: str) -> None:
        self.label = label
        self.elapsed_ms: float | None = None
        self._start = 0.0

    def __enter__(self) -> ScopeTimer:
        self._start = time.perf_counter()
        if _enabled:
            logger.info("%s started", self.label)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000.0
        if _enabled:
            logger.info("%s took %d ms", self.label, int(self.elapsed_ms))