"""
StreamNZB preset.

StreamNZB streams usenet content straight over NNTP. Its streams carry a
``failoverId``; once AddonStreams has ranked them, the final order is
reported back to the instance so it can reorder its own failover candidates.
"""

import logging
from typing import Any, Optional

from addonstreams.config import get_config
from addonstreams.presets.base import Preset, PresetMetadata, generate_single_addon
from addonstreams.presets.failover import (
    dispatch_failover_report,
    partition_by_manifest,
    resolve_base_url,
)
from addonstreams.presets.options import (
    Option,
    OptionType,
    SocialLink,
    base_options,
)
from addonstreams.streams.constants import (
    STREMIO_NNTP_SERVICE,
    USER_AGENT,
    PresetCategory,
    ResourceType,
    StreamType,
)
from addonstreams.streams.models import ParsedStream, Service, Stream
from addonstreams.streams.parser import ParserOverrides

logger = logging.getLogger(__name__)

PRESET_ID = "streamnzb"
PRESET_NAME = "StreamNZB"


class StreamNZBOverrides(ParserOverrides):
    """Usenet typing, cached hints and failover ids for StreamNZB streams."""

    def classify_service(
        self,
        stream: Stream,
        base_service: Optional[Service],
    ) -> Optional[Service]:
        cached = stream.cached_hint
        if cached is None:
            return base_service
        if base_service is not None:
            return Service(id=base_service.id, cached=cached)
        return Service(id=STREMIO_NNTP_SERVICE, cached=cached)

    def classify_type(
        self,
        stream: Stream,
        service: Optional[Service],
        base_type: StreamType,
    ) -> StreamType:
        return StreamType.USENET

    def extract_failover_id(self, stream: Stream) -> Any:
        return stream.failover_id


def streamnzb_metadata() -> PresetMetadata:
    config = get_config()
    supported_resources = (ResourceType.STREAM,)

    options = [
        option
        for option in base_options(PRESET_NAME, supported_resources, config.http.default_timeout)
        if option.id != "url"
    ]
    options.append(
        Option(
            id="url",
            name="Instance URL",
            description="Base URL of your StreamNZB instance (e.g. https://streamnzb.example.com)",
            type=OptionType.URL,
            required=True,
        )
    )
    options.append(
        Option(
            id="socials",
            name="",
            description="",
            type=OptionType.SOCIALS,
            socials=(SocialLink(id="donate", url="https://buymeacoffee.com/gaisberg"),),
        )
    )

    return PresetMetadata(
        id=PRESET_ID,
        name=PRESET_NAME,
        description=(
            "Stream via nntp without any additional services, availability checks, "
            "failover supports aiostreams builtins."
        ),
        options=tuple(options),
        supported_resources=supported_resources,
        supported_stream_types=(StreamType.USENET,),
        timeout=config.http.default_timeout,
        user_agent=USER_AGENT,
        category=PresetCategory.STREAMS,
        logo="https://cdn.discordapp.com/icons/1470288400157380710/6f397b4a2e9561dc7ad43526588cfd67.png",
    )


def on_streams_ready(streams: list[ParsedStream]) -> None:
    """Report the final stream order to each StreamNZB instance in the batch."""
    if not streams:
        return

    for manifest_url, partition in partition_by_manifest(streams).items():
        try:
            base_url = resolve_base_url(partition[0].addon)
            dispatch_failover_report(partition, base_url, source_name=PRESET_NAME)
        except Exception as e:
            logger.debug(f"Skipping failover report for {manifest_url!r}: {e}")


def create_streamnzb_preset() -> Preset:
    return Preset(
        metadata=streamnzb_metadata(),
        generate_addons=generate_single_addon,
        parser_overrides=StreamNZBOverrides(),
        on_streams_ready=on_streams_ready,
    )
