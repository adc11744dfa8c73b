"""Persisted shared-view preferences."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

_DEFAULT_PREFERENCES_PATH = os.path.join(
    os.path.expanduser("~"), ".shareview", "preferences.json"
)
_SKIP_IMPORT_KEY = "share_import_dialog_skip"


class SharePreferences:
    """
    Small JSON file of user preferences.

    Storage problems never surface: an unreadable file reads as defaults and
    a failed write is logged and dropped.
    """

    def __init__(self, path: str | None = None) -> None:
        self._path = Path(path or _DEFAULT_PREFERENCES_PATH)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict:
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError):
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as exc:
            logger.warning("Could not save preferences to %s: %s", self._path, exc)

    def should_skip_import_dialog(self) -> bool:
        """True when the user asked not to confirm before editing a shared view."""
        return self._load().get(_SKIP_IMPORT_KEY) is True

    def set_skip_import_dialog(self, skip: bool) -> None:
        data = self._load()
        if skip:
            data[_SKIP_IMPORT_KEY] = True
        else:
            data.pop(_SKIP_IMPORT_KEY, None)
        self._save(data)
