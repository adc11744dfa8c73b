"""URL forms used by the shared-view history entries."""

from __future__ import annotations

from urllib.parse import parse_qsl, quote, urlencode, urlparse

DEFAULT_QUERY_KEY = "share"


def read_shared_payload(url: str, key: str = DEFAULT_QUERY_KEY) -> str:
    """First value of the share parameter, or "" when the link carries none."""
    for name, value in parse_qsl(urlparse(url).query, keep_blank_values=True):
        if name == key:
            return value
    return ""


def _base(url: str) -> str:
    parsed = urlparse(url)
    if parsed.scheme and parsed.netloc:
        return f"{parsed.scheme}://{parsed.netloc}{parsed.path}"
    # file: and other origin-less URLs
    return url.split("?", 1)[0].split("#", 1)[0]


def build_share_url(url: str, payload: str, key: str = DEFAULT_QUERY_KEY) -> str:
    """
    Link that opens ``payload`` in shared view.

    Only origin and path of ``url`` are kept; other parameters and the
    fragment belong to the editing session, not to the shared artifact.
    """
    return f"{_base(url)}?{key}={quote(payload, safe='-_.~')}"


def build_edit_url(url: str, key: str = DEFAULT_QUERY_KEY) -> str:
    """Path of ``url`` with the share parameter removed; other parameters and fragment preserved."""
    parsed = urlparse(url)
    kept = [
        (name, value)
        for name, value in parse_qsl(parsed.query, keep_blank_values=True)
        if name != key
    ]
    search = urlencode(kept)
    result = parsed.path or "/"
    if search:
        result += f"?{search}"
    if parsed.fragment:
        result += f"#{parsed.fragment}"
    return result


def build_clean_url(url: str) -> str:
    """Path only; used when a shared view is abandoned."""
    return urlparse(url).path or "/"
