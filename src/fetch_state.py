"""Fetch lifecycle for a single screen.

A screen moves idle -> loading -> success | error for every request. The
RequestTracker numbers each request so that a result arriving after a
newer request was started is dropped instead of overwriting fresher data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

IDLE = "idle"
LOADING = "loading"
SUCCESS = "success"
ERROR = "error"


@dataclass(frozen=True)
class FetchState:
    """Immutable snapshot of a screen's fetch lifecycle.

    Attributes:
        status: One of "idle", "loading", "success", "error".
        data: Payload on success, else None.
        message: User-facing message on error, else "".
    """

    status: str = IDLE
    data: Any = None
    message: str = ""

    @classmethod
    def idle(cls) -> FetchState:
        return cls(status=IDLE)

    @classmethod
    def loading(cls) -> FetchState:
        return cls(status=LOADING)

    @classmethod
    def success(cls, data: Any) -> FetchState:
        return cls(status=SUCCESS, data=data)

    @classmethod
    def error(cls, message: str) -> FetchState:
        return cls(status=ERROR, message=message)

    @property
    def is_loading(self) -> bool:
        return self.status == LOADING

    @property
    def is_success(self) -> bool:
        return self.status == SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status == ERROR


class RequestTracker:
    """Owns one screen's FetchState and sequences its requests."""

    def __init__(self, name: str = "screen") -> None:
        self.name = name
        self.state = FetchState.idle()
        self._latest = 0

    @property
    def latest(self) -> int:
        """Sequence number of the most recently started request."""
        return self._latest

    def begin(self) -> int:
        """Start a request: reset to loading and return its sequence number."""
        self._latest += 1
        self.state = FetchState.loading()
        return self._latest

    def _is_current(self, seq: int) -> bool:
        if seq != self._latest:
            logger.debug(
                "%s: discarding result of request %d (latest is %d)",
                self.name, seq, self._latest,
            )
            return False
        return True

    def succeed(self, seq: int, data: Any) -> bool:
        """Settle request `seq` with data. Returns False if it was superseded."""
        if not self._is_current(seq):
            return False
        self.state = FetchState.success(data)
        return True

    def fail(self, seq: int, message: str) -> bool:
        """Settle request `seq` with an error. Returns False if it was superseded."""
        if not self._is_current(seq):
            return False
        self.state = FetchState.error(message)
        return True
