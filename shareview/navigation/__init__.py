from shareview.navigation.controller import NavigationController
from shareview.navigation.mode import ModeListener, ModeSignal
from shareview.navigation.urls import (
    DEFAULT_QUERY_KEY,
    build_clean_url,
    build_edit_url,
    build_share_url,
    read_shared_payload,
)

__all__ = [
    "DEFAULT_QUERY_KEY",
    "ModeListener",
    "ModeSignal",
    "NavigationController",
    "build_clean_url",
    "build_edit_url",
    "build_share_url",
    "read_shared_payload",
]
