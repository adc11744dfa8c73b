"""In-memory history stack implementing HistoryBridge (headless use and tests)."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any

from shareview.core.errors import HistoryUnavailable
from shareview.core.types import HistoryEntryTag
from shareview.history.bridge import HistoryBridge, NavigateCallback, ResurrectionCallback


@dataclass
class HistoryEntry:
    url: str
    tag: HistoryEntryTag | None = None


class InMemoryHistory(HistoryBridge):
    """
    Session-history model with browser semantics:

    * push discards forward entries,
    * back/forward steps are queued and only reported when drain() runs,
      mirroring how popstate is delivered after history.back() returns,
    * stepping back from the first entry leaves the page (``left_page``).

    Usage:
        history = InMemoryHistory("https://app.test/?share=XJ9")
        controller = NavigationController(history, snapshots)
        await controller.register_shared_view("XJ9")
        history.back()
        await history.drain()
    """

    def __init__(
        self,
        url: str = "about:blank",
        *,
        supports_replace: bool = True,
        supports_push: bool = True,
    ) -> None:
        self.supports_replace = supports_replace
        self.supports_push = supports_push
        self._entries: list[HistoryEntry] = [HistoryEntry(url=url)]
        self._index = 0
        self._pending: deque[tuple[str, Any]] = deque()
        self._on_navigate: NavigateCallback | None = None
        self._on_resurrection: ResurrectionCallback | None = None
        self.back_requests = 0  # programmatic go_back() calls
        self.left_page = False
        self.suspended = False

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def depth(self) -> int:
        return len(self._entries)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> HistoryEntry:
        return self._entries[self._index]

    @property
    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    @property
    def pending_events(self) -> int:
        return len(self._pending)

    # ------------------------------------------------------------------
    # HistoryBridge
    # ------------------------------------------------------------------

    async def replace_current_entry(self, tag: HistoryEntryTag | None, url: str) -> None:
        if not self.supports_replace:
            raise HistoryUnavailable("history.replaceState is not available")
        self._entries[self._index] = HistoryEntry(url=url, tag=tag)

    async def push_entry(self, tag: HistoryEntryTag, url: str) -> None:
        if not self.supports_push:
            raise HistoryUnavailable("history.pushState is not available")
        del self._entries[self._index + 1:]
        self._entries.append(HistoryEntry(url=url, tag=tag))
        self._index += 1

    async def go_back(self) -> None:
        self.back_requests += 1
        self.back()

    async def current_url(self) -> str:
        return self.current.url

    def subscribe_navigate(self, callback: NavigateCallback) -> None:
        self._on_navigate = callback

    def unsubscribe_navigate(self) -> None:
        self._on_navigate = None

    def subscribe_resurrection(self, callback: ResurrectionCallback) -> None:
        self._on_resurrection = callback

    def unsubscribe_resurrection(self) -> None:
        self._on_resurrection = None

    @property
    def has_navigate_subscriber(self) -> bool:
        return self._on_navigate is not None

    @property
    def has_resurrection_subscriber(self) -> bool:
        return self._on_resurrection is not None

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def back(self) -> None:
        if self._index == 0:
            self.left_page = True
            return
        self._index -= 1
        self._pending.append(("navigate", self.current.tag))

    def forward(self) -> None:
        if self._index >= len(self._entries) - 1:
            return
        self._index += 1
        self.left_page = False
        self._pending.append(("navigate", self.current.tag))

    def suspend(self) -> None:
        """The page is frozen into the back/forward cache."""
        self.suspended = True

    def resume(self, *, back_forward: bool = True) -> None:
        """The page is shown again (from the cache when back_forward is True)."""
        self.suspended = False
        self.left_page = False
        self._pending.append(("resurrect", back_forward))

    async def drain(self) -> int:
        """Deliver queued events in order, including ones queued by the callbacks."""
        delivered = 0
        while self._pending:
            kind, value = self._pending.popleft()
            if kind == "navigate":
                if self._on_navigate is not None:
                    await self._on_navigate(value)
            elif self._on_resurrection is not None:
                await self._on_resurrection(value)
            delivered += 1
        return delivered
