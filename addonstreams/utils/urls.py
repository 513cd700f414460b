"""Helpers for addon manifest URLs."""

import re
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

_MANIFEST_SUFFIX = re.compile(r"/manifest\.json.*$", re.IGNORECASE)
_MANIFEST_PATH = re.compile(r"/manifest\.json$", re.IGNORECASE)


def strip_manifest_suffix(url: str) -> str:
    """
    Drop a trailing ``/manifest.json`` (plus anything after it) and trailing slashes.

    ``https://host/dir/manifest.json?x=1`` -> ``https://host/dir``
    """
    return _MANIFEST_SUFFIX.sub("", url).rstrip("/")


def base_url_from_manifest(manifest_url: str) -> Optional[str]:
    """
    Derive an addon's base URL by parsing its manifest URL.

    Returns None if the value is not an absolute http(s) URL.
    """
    if not manifest_url.isprintable():
        return None

    try:
        parts = urlsplit(manifest_url.strip())
    except ValueError:
        return None

    if parts.scheme not in ("http", "https") or not parts.netloc:
        return None

    path = _MANIFEST_PATH.sub("", parts.path) or "/"
    return urlunsplit((parts.scheme, parts.netloc, path, "", "")).rstrip("/")


def is_http_url(value: str) -> bool:
    """Check that a value is an absolute http(s) URL."""
    return base_url_from_manifest(value) is not None
