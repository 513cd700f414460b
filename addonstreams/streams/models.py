"""
Canonical stream model.

``Stream`` is the raw, source-controlled descriptor returned by an addon's
stream resource. ``ParsedStream`` is the normalized form every preset must
produce. ``Addon`` is the runtime instance built from a user's configuration.
"""

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from addonstreams.streams.constants import MediaType, ResourceType, StreamType


class Stream(BaseModel):
    """Raw stream as emitted by an addon. Unknown fields are kept."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    external_url: Optional[str] = Field(None, alias="externalUrl")
    yt_id: Optional[str] = Field(None, alias="ytId")
    info_hash: Optional[str] = Field(None, alias="infoHash")
    file_idx: Optional[int] = Field(None, alias="fileIdx")
    nzb_url: Optional[str] = Field(None, alias="nzbUrl")
    behavior_hints: Optional[dict[str, Any]] = Field(None, alias="behaviorHints")
    # Opaque correlation token, never interpreted
    failover_id: Any = Field(None, alias="failoverId")

    @property
    def hints(self) -> dict[str, Any]:
        return self.behavior_hints or {}

    @property
    def cached_hint(self) -> Optional[bool]:
        """True or False only when the source said so explicitly."""
        cached = self.hints.get("cached")
        if cached is True or cached is False:
            return cached
        return None

    def hint_str(self, key: str) -> Optional[str]:
        value = self.hints.get(key)
        return value if isinstance(value, str) else None

    def hint_int(self, key: str) -> Optional[int]:
        value = self.hints.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return int(value)


@dataclass(frozen=True)
class Service:
    """Debrid/usenet service a stream is served through."""

    id: str
    cached: bool


@dataclass(frozen=True)
class PresetRef:
    """Which preset built an addon instance, and with what options."""

    id: str
    type: str
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Addon:
    """
    A configured addon instance.

    Attributes:
        name: Display name
        manifest_url: URL of the instance's manifest, also its grouping key
        enabled: Whether the instance is queried
        media_types: Media types the instance is limited to (empty = all)
        resources: Resources the instance serves
        timeout: Request timeout in milliseconds
        preset: The preset (and resolved options) that produced it
        headers: Headers sent with every request to the instance
    """

    name: str
    manifest_url: str
    enabled: bool
    media_types: list[MediaType]
    resources: list[ResourceType]
    timeout: int
    preset: PresetRef
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def configured_url(self) -> Optional[str]:
        """The ``url`` option as the user entered it, if any."""
        url = self.preset.options.get("url")
        if isinstance(url, str) and url:
            return url
        return None

    def supports_resource(self, resource: ResourceType) -> bool:
        return resource in self.resources

    def supports_media_type(self, media_type: str) -> bool:
        if not self.media_types:
            return True
        return any(m.value == media_type for m in self.media_types)


@dataclass(frozen=True)
class SkippedStream:
    """Parser result for a raw stream that must not be presented."""

    reason: str = ""


@dataclass
class ParsedStream:
    """A normalized stream."""

    addon: Addon
    type: StreamType
    service: Optional[Service] = None
    failover_id: Any = None

    name: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    external_url: Optional[str] = None
    yt_id: Optional[str] = None
    info_hash: Optional[str] = None
    file_idx: Optional[int] = None
    nzb_url: Optional[str] = None
    filename: Optional[str] = None
    folder_name: Optional[str] = None
    size: Optional[int] = None
    binge_group: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for output; empty fields (including failoverId) are omitted."""
        data: dict[str, Any] = {
            "addon": {"name": self.addon.name, "manifestUrl": self.addon.manifest_url},
            "type": self.type.value,
        }
        if self.service is not None:
            data["service"] = asdict(self.service)
        if self.failover_id is not None:
            data["failoverId"] = self.failover_id

        optional = {
            "name": self.name,
            "description": self.description,
            "url": self.url,
            "externalUrl": self.external_url,
            "ytId": self.yt_id,
            "infoHash": self.info_hash,
            "fileIdx": self.file_idx,
            "nzbUrl": self.nzb_url,
            "filename": self.filename,
            "folderName": self.folder_name,
            "size": self.size,
            "bingeGroup": self.binge_group,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data


class PresetEntry(BaseModel):
    """One preset a user has configured."""

    type: str
    enabled: bool = True
    options: dict[str, Any] = Field(default_factory=dict)


class UserData(BaseModel):
    """Per-user configuration handed to preset factories."""

    uuid: Optional[str] = None
    presets: list[PresetEntry] = Field(default_factory=list)
