"""
Stream parser.

Turns one raw ``Stream`` into a ``ParsedStream`` (or a ``SkippedStream``).
The generic normalization is source-agnostic; presets specialise it through a
``ParserOverrides`` strategy instead of subclassing the parser.
"""

import re
from dataclasses import replace
from typing import Any, Optional, Union

from addonstreams.streams.constants import SERVICE_SHORT_CODES, StreamType
from addonstreams.streams.models import (
    Addon,
    ParsedStream,
    Service,
    SkippedStream,
    Stream,
)

ParseResult = Union[ParsedStream, SkippedStream]

# "[RD+]", "[TB⚡]", "[AD download]"
_SERVICE_TAG = re.compile(r"\[(?P<code>[A-Z]{2,3})\s*(?P<flag>\+|⚡|download)?\]")


class ParserOverrides:
    """
    Override points a preset can supply.

    Every method receives what the generic step produced and returns the
    value to keep. The defaults pass everything through unchanged.
    """

    def classify_service(
        self,
        stream: Stream,
        base_service: Optional[Service],
    ) -> Optional[Service]:
        return base_service

    def classify_type(
        self,
        stream: Stream,
        service: Optional[Service],
        base_type: StreamType,
    ) -> StreamType:
        return base_type

    def extract_failover_id(self, stream: Stream) -> Any:
        return None


class StreamParser:
    """
    Normalizes raw streams for one addon instance.

    ``parse`` is synchronous and does no I/O.
    """

    def __init__(self, addon: Addon, overrides: Optional[ParserOverrides] = None):
        self.addon = addon
        self.overrides = overrides or ParserOverrides()

    def parse(self, stream: Stream) -> ParseResult:
        result = self.normalize(stream)
        if isinstance(result, SkippedStream):
            return result

        service = self.overrides.classify_service(stream, result.service)
        stream_type = self.overrides.classify_type(stream, service, result.type)
        parsed = replace(result, service=service, type=stream_type)

        failover_id = self.overrides.extract_failover_id(stream)
        if failover_id is not None:
            parsed.failover_id = failover_id
        return parsed

    def normalize(self, stream: Stream) -> ParseResult:
        """Source-agnostic field extraction."""
        if not any(
            (stream.url, stream.external_url, stream.yt_id, stream.info_hash, stream.nzb_url)
        ):
            return SkippedStream(reason="no playable target")

        service = self.get_service(stream)
        return ParsedStream(
            addon=self.addon,
            type=self.get_stream_type(stream, service),
            service=service,
            name=stream.name,
            description=stream.description or stream.title,
            url=stream.url,
            external_url=stream.external_url,
            yt_id=stream.yt_id,
            info_hash=stream.info_hash,
            file_idx=stream.file_idx,
            nzb_url=stream.nzb_url,
            filename=stream.hint_str("filename"),
            folder_name=stream.hint_str("folderName"),
            size=stream.hint_int("videoSize"),
            binge_group=stream.hint_str("bingeGroup"),
        )

    def get_service(self, stream: Stream) -> Optional[Service]:
        """Detect a debrid service from a bracketed tag in the stream name."""
        if not stream.name:
            return None

        match = _SERVICE_TAG.search(stream.name)
        if not match:
            return None

        service_id = SERVICE_SHORT_CODES.get(match.group("code"))
        if service_id is None:
            return None

        return Service(id=service_id, cached=match.group("flag") in ("+", "⚡"))

    def get_stream_type(
        self,
        stream: Stream,
        service: Optional[Service],
    ) -> StreamType:
        if stream.nzb_url:
            return StreamType.USENET
        if stream.info_hash:
            return StreamType.DEBRID if service else StreamType.P2P
        if stream.yt_id:
            return StreamType.YOUTUBE
        if stream.external_url and not stream.url:
            return StreamType.EXTERNAL
        if service:
            return StreamType.DEBRID
        return StreamType.HTTP
