"""HistoryBridge over a live Playwright page (History API, popstate, pageshow)."""

from __future__ import annotations

import asyncio
import logging

from playwright.async_api import Page

from shareview.core.errors import HistoryUnavailable
from shareview.core.types import HistoryEntryTag
from shareview.history.bridge import HistoryBridge, NavigateCallback, ResurrectionCallback

logger = logging.getLogger(__name__)

_NAVIGATE_BINDING = "__shareviewNavigate"
_RESURRECT_BINDING = "__shareviewResurrect"

# Installed once per document; forwards popstate/pageshow to the Python bindings.
_LISTENER_JS = """() => {
    if (window.__shareviewListening) return;
    window.__shareviewListening = true;

    function wasBackForward(event) {
        if (event && event.persisted) return true;
        const perf = window.performance;
        const navEntries = perf && perf.getEntriesByType
            ? perf.getEntriesByType('navigation') : [];
        if (navEntries.length && navEntries[0].type === 'back_forward') return true;
        const legacy = perf && perf.navigation;
        return !!legacy && legacy.type === legacy.TYPE_BACK_FORWARD;
    }

    window.addEventListener('popstate', (event) => {
        const state = event.state;
        window.__shareviewNavigate(state && state.tag ? state.tag : null);
    });
    window.addEventListener('pageshow', (event) => {
        window.__shareviewResurrect(wasBackForward(event));
    });
}"""

_REPLACE_JS = """([state, url]) => {
    if (!window.history || typeof window.history.replaceState !== 'function') return false;
    window.history.replaceState(state, '', url);
    return true;
}"""

_PUSH_JS = """([state, url]) => {
    if (!window.history || typeof window.history.pushState !== 'function') return false;
    window.history.pushState(state, '', url);
    return true;
}"""

_BACK_JS = "() => { window.history.back(); }"
_HREF_JS = "() => window.location.href"


class PlaywrightHistoryBridge(HistoryBridge):
    """
    Drives ``window.history`` of a Playwright page.

    Each entry we create carries ``{"tag": "ViewAnchor" | "EditTransition"}``
    as its history state, so popstate can be classified without guessing the
    direction of travel.

    Usage:
        bridge = PlaywrightHistoryBridge(page)
        await bridge.install()
        await page.goto(shared_link)
    """

    def __init__(self, page: Page) -> None:
        self._page = page
        self._installed = False
        self._on_navigate: NavigateCallback | None = None
        self._on_resurrection: ResurrectionCallback | None = None
        # bindings run as separate tasks; handlers must see events one at a time
        self._dispatch_lock = asyncio.Lock()

    async def install(self) -> None:
        """Expose the callbacks and hook the listeners into current and future documents."""
        if self._installed:
            return
        await self._page.expose_function(_NAVIGATE_BINDING, self._dispatch_navigate)
        await self._page.expose_function(_RESURRECT_BINDING, self._dispatch_resurrection)
        await self._page.add_init_script(f"({_LISTENER_JS})();")
        await self._page.evaluate(_LISTENER_JS)
        self._installed = True

    # ------------------------------------------------------------------
    # HistoryBridge
    # ------------------------------------------------------------------

    async def replace_current_entry(self, tag: HistoryEntryTag | None, url: str) -> None:
        state = {"tag": tag.value} if tag is not None else {}
        ok = await self._page.evaluate(_REPLACE_JS, [state, url])
        if not ok:
            raise HistoryUnavailable("history.replaceState is not available")

    async def push_entry(self, tag: HistoryEntryTag, url: str) -> None:
        ok = await self._page.evaluate(_PUSH_JS, [{"tag": tag.value}, url])
        if not ok:
            raise HistoryUnavailable("history.pushState is not available")

    async def go_back(self) -> None:
        await self._page.evaluate(_BACK_JS)

    async def current_url(self) -> str:
        # page.url lags behind same-document history changes
        return await self._page.evaluate(_HREF_JS)

    def subscribe_navigate(self, callback: NavigateCallback) -> None:
        self._on_navigate = callback

    def unsubscribe_navigate(self) -> None:
        self._on_navigate = None

    def subscribe_resurrection(self, callback: ResurrectionCallback) -> None:
        self._on_resurrection = callback

    def unsubscribe_resurrection(self) -> None:
        self._on_resurrection = None

    # ------------------------------------------------------------------
    # Bindings (called from the page)
    # ------------------------------------------------------------------

    async def _dispatch_navigate(self, raw_tag: str | None) -> None:
        if self._on_navigate is None:
            return
        tag = HistoryEntryTag.parse(raw_tag)
        logger.debug("popstate: tag=%s", tag)
        async with self._dispatch_lock:
            callback = self._on_navigate
            if callback is not None:
                await callback(tag)

    async def _dispatch_resurrection(self, back_forward: bool) -> None:
        if self._on_resurrection is None:
            return
        logger.debug("pageshow: back_forward=%s", back_forward)
        async with self._dispatch_lock:
            callback = self._on_resurrection
            if callback is not None:
                await callback(bool(back_forward))
