"""
Shared enumerations for streams, resources and presets.
"""

from enum import Enum


class StreamType(str, Enum):
    """Kinds of normalized streams."""
    HTTP = "http"
    USENET = "usenet"
    DEBRID = "debrid"
    P2P = "p2p"
    LIVE = "live"
    YOUTUBE = "youtube"
    EXTERNAL = "external"


class ResourceType(str, Enum):
    """Addon resources. Only the stream resource is fetched."""
    STREAM = "stream"
    CATALOG = "catalog"
    META = "meta"
    SUBTITLES = "subtitles"


class MediaType(str, Enum):
    """Media types an addon instance can be limited to."""
    MOVIE = "movie"
    SERIES = "series"
    ANIME = "anime"


class PresetCategory(str, Enum):
    """Grouping used when listing presets."""
    STREAMS = "streams"
    SUBTITLES = "subtitles"
    META_CATALOGS = "meta_catalogs"
    MISC = "misc"


# Identifies AddonStreams to every addon instance it talks to
USER_AGENT = "AIOStreams"

# Service id used for usenet streams served straight over NNTP
STREMIO_NNTP_SERVICE = "stremio_nntp"

# Short codes found in stream names, e.g. "[RD+] Movie 1080p"
SERVICE_SHORT_CODES = {
    "RD": "realdebrid",
    "AD": "alldebrid",
    "PM": "premiumize",
    "DL": "debridlink",
    "TB": "torbox",
    "ED": "easydebrid",
    "OC": "offcloud",
    "PKP": "pikpak",
    "PP": "putio",
    "SR": "seedr",
}
