"""Abstract history bridge — the platform navigation primitives the controller needs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional

from shareview.core.types import HistoryEntryTag

NavigateCallback = Callable[[Optional[HistoryEntryTag]], Awaitable[None]]
ResurrectionCallback = Callable[[bool], Awaitable[None]]


class HistoryBridge(ABC):
    """
    Thin contract over a platform history stack.

    The stack is append-only from our side and may be changed by the user at
    any time, so bridges only report what happened; they never expose the
    stack's contents. Subscribing replaces the previous subscriber, so at most
    one callback of each kind is active.
    """

    @abstractmethod
    async def replace_current_entry(self, tag: HistoryEntryTag | None, url: str) -> None:
        """Retag (or untag, with None) the current entry. Must not change the stack depth."""

    @abstractmethod
    async def push_entry(self, tag: HistoryEntryTag, url: str) -> None:
        """Add one entry on top of the current one."""

    @abstractmethod
    async def go_back(self) -> None:
        """
        Request one back step. The resulting entry is reported later through
        the navigate callback, not by this call.
        """

    @abstractmethod
    async def current_url(self) -> str: ...

    @abstractmethod
    def subscribe_navigate(self, callback: NavigateCallback) -> None:
        """Called with the tag of the entry that became current (None if untagged)."""

    @abstractmethod
    def unsubscribe_navigate(self) -> None: ...

    @abstractmethod
    def subscribe_resurrection(self, callback: ResurrectionCallback) -> None:
        """
        Called when the page becomes visible again, with True when it was
        reached by back/forward traversal rather than a fresh load.
        """

    @abstractmethod
    def unsubscribe_resurrection(self) -> None: ...
