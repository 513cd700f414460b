"""
Preset descriptors.

A preset is a plain record: its metadata, a factory that turns resolved user
options into addon instances, the parser overrides for its streams, and an
optional hook that runs once a batch of its streams has been normalized.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from addonstreams.presets.options import Option, resolve_options
from addonstreams.streams.constants import MediaType, PresetCategory, ResourceType, StreamType
from addonstreams.streams.models import Addon, ParsedStream, PresetRef, UserData
from addonstreams.streams.parser import ParserOverrides, StreamParser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PresetMetadata:
    """Static description of an integration."""

    id: str
    name: str
    description: str
    options: tuple[Option, ...]
    supported_resources: tuple[ResourceType, ...]
    supported_stream_types: tuple[StreamType, ...]
    timeout: int
    user_agent: str
    category: PresetCategory = PresetCategory.STREAMS
    logo: str = ""
    url: str = ""
    supported_services: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "logo": self.logo,
            "url": self.url,
            "timeout": self.timeout,
            "category": self.category.value,
            "supportedResources": [r.value for r in self.supported_resources],
            "supportedStreamTypes": [t.value for t in self.supported_stream_types],
            "supportedServices": list(self.supported_services),
            "options": [o.to_dict() for o in self.options],
        }


AddonFactory = Callable[[PresetMetadata, UserData, dict[str, Any]], list[Addon]]
StreamsReadyHook = Callable[[list[ParsedStream]], None]


def generate_addon(metadata: PresetMetadata, options: dict[str, Any]) -> Addon:
    """Build one addon instance, falling back to metadata defaults."""
    resources = options.get("resources") or [r.value for r in metadata.supported_resources]
    media_types = options.get("mediaTypes") or []

    return Addon(
        name=options.get("name") or metadata.name,
        manifest_url=options.get("url") or "",
        enabled=True,
        media_types=[MediaType(m) for m in media_types],
        resources=[ResourceType(r) for r in resources],
        timeout=int(options.get("timeout") or metadata.timeout),
        preset=PresetRef(id="", type=metadata.id, options=dict(options)),
        headers={"User-Agent": metadata.user_agent},
    )


def generate_single_addon(
    metadata: PresetMetadata,
    user_data: UserData,
    options: dict[str, Any],
) -> list[Addon]:
    """Default factory: one addon instance per configured preset."""
    return [generate_addon(metadata, options)]


@dataclass(frozen=True)
class Preset:
    """An integration: metadata, addon factory, parser overrides and batch hook."""

    metadata: PresetMetadata
    generate_addons: AddonFactory = generate_single_addon
    parser_overrides: ParserOverrides = field(default_factory=ParserOverrides)
    on_streams_ready: Optional[StreamsReadyHook] = None

    @property
    def id(self) -> str:
        return self.metadata.id

    def resolve_options(self, user_options: dict[str, Any]) -> dict[str, Any]:
        return resolve_options(self.metadata.options, user_options)

    def build_addons(self, user_data: UserData, options: dict[str, Any]) -> list[Addon]:
        return self.generate_addons(self.metadata, user_data, options)

    def parser_for(self, addon: Addon) -> StreamParser:
        return StreamParser(addon, self.parser_overrides)

    def streams_ready(self, streams: list[ParsedStream]) -> None:
        """Run the batch hook. Errors raised by the hook are logged, not propagated."""
        if self.on_streams_ready is None:
            return

        try:
            self.on_streams_ready(streams)
        except Exception as e:
            logger.error(f"Streams-ready hook failed for preset {self.id}: {e}")
