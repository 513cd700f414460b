"""Shared utilities: logging, outbound HTTP, manifest URL helpers."""

from addonstreams.utils.http import RequestError, make_request
from addonstreams.utils.logging_setup import setup_logging, setup_logging_from_config
from addonstreams.utils.urls import (
    base_url_from_manifest,
    is_http_url,
    strip_manifest_suffix,
)

__all__ = [
    "RequestError",
    "make_request",
    "setup_logging",
    "setup_logging_from_config",
    "base_url_from_manifest",
    "is_http_url",
    "strip_manifest_suffix",
]
