"""Status notifiers — where human-readable shared-view messages go."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from shareview.core.types import StatusLevel

# How long a status message stays visible (seconds)
_STATUS_SHOW_SECONDS = 2.5

_status_logger = logging.getLogger("shareview.status")


class Notifier(ABC):
    @abstractmethod
    def show(self, message: str, level: StatusLevel = StatusLevel.INFO) -> None: ...


class LogNotifier(Notifier):
    """Writes every status message to the ``shareview.status`` logger."""

    _LEVELS = {
        StatusLevel.INFO: logging.INFO,
        StatusLevel.SUCCESS: logging.INFO,
        StatusLevel.ERROR: logging.WARNING,
    }

    def show(self, message: str, level: StatusLevel = StatusLevel.INFO) -> None:
        _status_logger.log(self._LEVELS[level], "[%s] %s", level.value, message)


@dataclass
class StatusMessage:
    text: str
    level: StatusLevel
    shown_at: float


class StatusBoard(Notifier):
    """
    Toast-style status: one message at a time, visible for a fixed duration.
    A newer message replaces the current one and restarts the timer.
    """

    def __init__(
        self,
        *,
        show_seconds: float = _STATUS_SHOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._show_seconds = show_seconds
        self._clock = clock
        self._current: StatusMessage | None = None
        self.messages: list[StatusMessage] = []

    def show(self, message: str, level: StatusLevel = StatusLevel.INFO) -> None:
        self._current = StatusMessage(text=message, level=level, shown_at=self._clock())
        self.messages.append(self._current)

    @property
    def current(self) -> StatusMessage | None:
        """The visible message, or None once it has timed out."""
        if self._current is None:
            return None
        if self._clock() - self._current.shown_at >= self._show_seconds:
            return None
        return self._current

    @property
    def visible(self) -> bool:
        return self.current is not None

    @property
    def last(self) -> StatusMessage | None:
        return self.messages[-1] if self.messages else None
