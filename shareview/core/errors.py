"""Exception types raised across shareview."""

from __future__ import annotations


class ShareViewError(Exception):
    """Base class; ``message`` is safe to show to the user."""

    default_message = "Shared view error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class RegisterFailed(ShareViewError):
    default_message = "Could not register the shared view in history"


class PushFailed(ShareViewError):
    default_message = "Could not record the editing step in history"


class RestoreFailed(ShareViewError):
    default_message = "Could not restore the shared content"


class PayloadMissing(ShareViewError):
    default_message = "No shared content is active"


class HistoryUnavailable(ShareViewError):
    """The platform lacks a History API capability (replace or push)."""

    default_message = "History API is not available"


class WorkspaceLocked(ShareViewError):
    default_message = "The workspace is read-only in shared view"
