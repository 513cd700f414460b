"""
Stream aggregation.

One request cycle: query every enabled addon instance's stream resource
concurrently, normalize each instance's streams with its preset's parser,
then hand each preset its combined batch.
"""

import asyncio
import logging
from typing import Optional, Sequence

import httpx

from addonstreams.presets.failover import wait_for_pending_reports
from addonstreams.presets.registry import PresetRegistry, get_preset_registry
from addonstreams.streams.client import AddonClient, AddonRequestError
from addonstreams.streams.constants import ResourceType
from addonstreams.streams.models import Addon, ParsedStream, SkippedStream, Stream, UserData

logger = logging.getLogger(__name__)


class StreamAggregator:
    """
    Collects and normalizes streams across addon instances.

    Features:
    - Addon instance construction from user configuration
    - Concurrent fetching with per-addon failure isolation
    - Per-preset streams-ready hooks, once per request cycle
    """

    def __init__(
        self,
        registry: Optional[PresetRegistry] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.registry = registry or get_preset_registry()
        self._http_client = http_client

    def build_addons(self, user_data: UserData) -> list[Addon]:
        """
        Build addon instances for every enabled preset a user configured.

        Raises:
            PresetNotFoundError: If a configured preset is unknown
            PresetOptionError: If a preset's options are invalid
        """
        addons: list[Addon] = []

        for entry in user_data.presets:
            if not entry.enabled:
                continue
            preset = self.registry.get(entry.type)
            options = preset.resolve_options(entry.options)
            addons.extend(preset.build_addons(user_data, options))

        logger.debug(f"Built {len(addons)} addon instances")
        return addons

    def normalize(self, addon: Addon, raw_streams: Sequence[Stream]) -> list[ParsedStream]:
        """Parse raw streams from one addon instance, dropping skipped ones."""
        parser = self.registry.get(addon.preset.type).parser_for(addon)

        parsed: list[ParsedStream] = []
        skipped = 0
        for stream in raw_streams:
            result = parser.parse(stream)
            if isinstance(result, SkippedStream):
                skipped += 1
                continue
            parsed.append(result)

        if skipped:
            logger.debug(f"Skipped {skipped} of {len(raw_streams)} streams from {addon.name}")
        return parsed

    async def get_streams(
        self,
        addons: Sequence[Addon],
        media_type: str,
        media_id: str,
    ) -> list[ParsedStream]:
        """
        Run one request cycle.

        Returns normalized streams in addon order. Addons that fail to respond
        contribute nothing; the others are unaffected.
        """
        targets = [
            addon for addon in addons
            if addon.enabled
            and addon.supports_resource(ResourceType.STREAM)
            and addon.supports_media_type(media_type)
        ]

        results = await asyncio.gather(
            *(self._fetch(addon, media_type, media_id) for addon in targets)
        )

        streams: list[ParsedStream] = []
        batches: dict[str, list[ParsedStream]] = {}
        for addon, parsed in zip(targets, results):
            streams.extend(parsed)
            batches.setdefault(addon.preset.type, []).extend(parsed)

        for preset_type, batch in batches.items():
            self.registry.get(preset_type).streams_ready(batch)

        logger.info(
            f"Collected {len(streams)} streams for {media_type}/{media_id} "
            f"from {len(targets)} addons"
        )
        return streams

    async def shutdown(self) -> None:
        """Let in-flight failover reports finish."""
        await wait_for_pending_reports()

    async def _fetch(self, addon: Addon, media_type: str, media_id: str) -> list[ParsedStream]:
        client = AddonClient(addon, self._http_client)
        try:
            raw_streams = await client.get_streams(media_type, media_id)
        except AddonRequestError as e:
            logger.warning(f"Failed to fetch streams: {e}")
            return []
        return self.normalize(addon, raw_streams)
