from shareview.ui.notifier import LogNotifier, Notifier, StatusBoard, StatusMessage
from shareview.ui.preferences import SharePreferences

__all__ = ["LogNotifier", "Notifier", "SharePreferences", "StatusBoard", "StatusMessage"]
