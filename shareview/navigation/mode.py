"""Observable holder for the current view mode."""

from __future__ import annotations

import logging
from typing import Callable

from shareview.core.types import Mode

logger = logging.getLogger(__name__)

ModeListener = Callable[[Mode], None]


class ModeSignal:
    """
    Current mode plus change listeners.

    Listeners are called once on subscription with the current value and then
    on every change. A failing listener is logged and does not stop the others.
    """

    def __init__(self, initial: Mode = Mode.EDIT) -> None:
        self._mode = initial
        self._listeners: list[ModeListener] = []

    @property
    def value(self) -> Mode:
        return self._mode

    def set(self, mode: Mode) -> bool:
        """Store ``mode``; returns True (and notifies) only when it changed."""
        if mode == self._mode:
            return False
        self._mode = mode
        for listener in list(self._listeners):
            self._call(listener)
        return True

    def subscribe(self, listener: ModeListener) -> Callable[[], None]:
        self._listeners.append(listener)
        self._call(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _call(self, listener: ModeListener) -> None:
        try:
            listener(self._mode)
        except Exception:
            logger.exception("Mode listener %r failed", listener)
