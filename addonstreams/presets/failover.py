"""
Failover order reporting.

Tells an addon instance, out of band, the order in which its streams are
being presented so it can re-rank its own failover candidates. Reports are
best effort: they are scheduled on the running loop and never awaited by
the caller, and every failure ends in a debug log line.
"""

import asyncio
import json
import logging
from typing import Any, Iterable, Optional

from addonstreams.config import get_config
from addonstreams.streams.constants import USER_AGENT
from addonstreams.streams.models import Addon, ParsedStream
from addonstreams.utils.http import make_request
from addonstreams.utils.urls import base_url_from_manifest, strip_manifest_suffix

logger = logging.getLogger(__name__)

# Keeps detached report tasks alive until they finish
_pending_reports: set[asyncio.Task] = set()

# Fixed for every report, independent of the instance timeout
REPORT_TIMEOUT = 5000  # milliseconds


class FailoverEndpointError(Exception):
    """Neither the configured URL nor the manifest URL gives a usable endpoint."""

    def __init__(self, message: str, addon_name: str):
        super().__init__(message)
        self.addon_name = addon_name


def partition_by_manifest(streams: Iterable[ParsedStream]) -> dict[str, list[ParsedStream]]:
    """Group streams by their addon's manifest URL, keeping first-seen order."""
    partitions: dict[str, list[ParsedStream]] = {}
    for stream in streams:
        partitions.setdefault(stream.addon.manifest_url or "", []).append(stream)
    return partitions


def resolve_base_url(addon: Addon) -> str:
    """
    Work out an addon instance's base URL.

    The configured URL wins (minus any ``/manifest.json`` suffix); otherwise
    the manifest URL is parsed and its manifest path segment dropped.

    Raises:
        FailoverEndpointError: If no usable URL can be derived
    """
    configured = addon.configured_url
    if configured:
        base = strip_manifest_suffix(configured)
        if base:
            return base

    base = base_url_from_manifest(addon.manifest_url or "")
    if base is None:
        raise FailoverEndpointError(
            f"No usable URL for addon {addon.name!r} (manifest: {addon.manifest_url!r})",
            addon.name,
        )
    return base


def failover_order_url(base_url: str, path: Optional[str] = None) -> str:
    if path is None:
        path = get_config().failover.report_path
    return f"{base_url.rstrip('/')}{path}"


def build_failover_payload(streams: Iterable[ParsedStream]) -> dict[str, Any]:
    """One entry per stream, in presentation order. Missing ids stay as None."""
    return {"streams": [{"failoverId": s.failover_id} for s in streams]}


async def report_failover_order(
    streams: list[ParsedStream],
    base_url: str,
    source_name: str = "addon",
) -> None:
    """POST the presentation order to ``<base_url>/failover_order``. Never raises."""
    if not streams:
        return

    config = get_config()
    url = failover_order_url(base_url, config.failover.report_path)

    try:
        await make_request(
            url,
            method="POST",
            timeout=REPORT_TIMEOUT,
            body=json.dumps(build_failover_payload(streams)),
            headers={
                "Content-Type": "application/json",
                "User-Agent": USER_AGENT,
            },
        )
        logger.debug(f"Reported failover order of {len(streams)} streams to {url}")
    except Exception as e:
        logger.debug(f"Failed to report failover order to {source_name}: {e}")


def dispatch_failover_report(
    streams: list[ParsedStream],
    base_url: str,
    source_name: str = "addon",
) -> Optional[asyncio.Task]:
    """
    Schedule a failover report and return without waiting for it.

    Returns the scheduled task, or None when there is no running event loop.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.debug(f"No running event loop, failover order not reported to {source_name}")
        return None

    task = loop.create_task(report_failover_order(list(streams), base_url, source_name))
    _pending_reports.add(task)
    task.add_done_callback(_pending_reports.discard)
    return task


async def wait_for_pending_reports() -> None:
    """Wait for every report dispatched so far to finish."""
    if _pending_reports:
        await asyncio.gather(*list(_pending_reports), return_exceptions=True)
