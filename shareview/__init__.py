from shareview.core.errors import (
    HistoryUnavailable,
    PayloadMissing,
    PushFailed,
    RegisterFailed,
    RestoreFailed,
    ShareViewError,
    WorkspaceLocked,
)
from shareview.core.feature import ShareFeature
from shareview.core.types import (
    HistoryEntryTag,
    Mode,
    NavigationState,
    SharePayload,
    StatusLevel,
)
from shareview.history import HistoryBridge, InMemoryHistory, PlaywrightHistoryBridge
from shareview.navigation import NavigationController
from shareview.snapshot import ContentSource, SnapshotStore, Workspace
from shareview.ui import LogNotifier, Notifier, SharePreferences, StatusBoard

__all__ = [
    "ShareFeature",
    "HistoryEntryTag",
    "Mode",
    "NavigationState",
    "SharePayload",
    "StatusLevel",
    # Errors
    "HistoryUnavailable",
    "PayloadMissing",
    "PushFailed",
    "RegisterFailed",
    "RestoreFailed",
    "ShareViewError",
    "WorkspaceLocked",
    # State machine
    "NavigationController",
    "SnapshotStore",
    "ContentSource",
    "Workspace",
    # Platform
    "HistoryBridge",
    "InMemoryHistory",
    "PlaywrightHistoryBridge",
    # Status
    "LogNotifier",
    "Notifier",
    "SharePreferences",
    "StatusBoard",
]
