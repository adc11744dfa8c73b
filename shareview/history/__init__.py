from shareview.history.bridge import HistoryBridge, NavigateCallback, ResurrectionCallback
from shareview.history.browser import PlaywrightHistoryBridge
from shareview.history.memory import HistoryEntry, InMemoryHistory

__all__ = [
    "HistoryBridge",
    "HistoryEntry",
    "InMemoryHistory",
    "NavigateCallback",
    "PlaywrightHistoryBridge",
    "ResurrectionCallback",
]
