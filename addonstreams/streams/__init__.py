"""
Canonical stream model, parser and addon client.
"""

from addonstreams.streams.client import AddonClient, AddonRequestError
from addonstreams.streams.constants import (
    STREMIO_NNTP_SERVICE,
    USER_AGENT,
    MediaType,
    PresetCategory,
    ResourceType,
    StreamType,
)
from addonstreams.streams.models import (
    Addon,
    ParsedStream,
    PresetEntry,
    PresetRef,
    Service,
    SkippedStream,
    Stream,
    UserData,
)
from addonstreams.streams.parser import ParserOverrides, StreamParser

__all__ = [
    # Constants
    "STREMIO_NNTP_SERVICE",
    "USER_AGENT",
    "MediaType",
    "PresetCategory",
    "ResourceType",
    "StreamType",
    # Models
    "Addon",
    "ParsedStream",
    "PresetEntry",
    "PresetRef",
    "Service",
    "SkippedStream",
    "Stream",
    "UserData",
    # Parsing
    "ParserOverrides",
    "StreamParser",
    # Client
    "AddonClient",
    "AddonRequestError",
]
