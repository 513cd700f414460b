"""
Addon stream resource client.

Fetches ``<base>/stream/<type>/<id>.json`` from one addon instance and
validates the returned stream descriptors.
"""

import logging
from typing import Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from addonstreams.streams.models import Addon, Stream
from addonstreams.utils.http import RequestError, make_request
from addonstreams.utils.urls import strip_manifest_suffix

logger = logging.getLogger(__name__)


class AddonRequestError(Exception):
    """An addon instance could not be queried."""

    def __init__(
        self,
        message: str,
        addon_name: str,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.addon_name = addon_name
        self.original_error = original_error


class AddonClient:
    """Client for a single addon instance's stream resource."""

    def __init__(self, addon: Addon, http_client: Optional[httpx.AsyncClient] = None):
        self.addon = addon
        self._http_client = http_client

    def stream_url(self, media_type: str, media_id: str) -> str:
        base = strip_manifest_suffix(self.addon.manifest_url)
        return f"{base}/stream/{quote(media_type, safe='')}/{quote(media_id, safe=':')}.json"

    async def get_streams(self, media_type: str, media_id: str) -> list[Stream]:
        """
        Fetch raw streams for a media item.

        Entries that fail validation are dropped with a warning.

        Raises:
            AddonRequestError: If the request fails or the body is not a stream list
        """
        url = self.stream_url(media_type, media_id)

        try:
            response = await make_request(
                url,
                timeout=self.addon.timeout,
                headers=self.addon.headers,
                client=self._http_client,
            )
            data = response.json()
        except RequestError as e:
            raise AddonRequestError(
                f"{self.addon.name}: {e}", self.addon.name, original_error=e
            ) from e
        except ValueError as e:
            raise AddonRequestError(
                f"{self.addon.name}: invalid JSON response", self.addon.name, original_error=e
            ) from e

        raw_streams = data.get("streams") if isinstance(data, dict) else None
        if not isinstance(raw_streams, list):
            raise AddonRequestError(
                f"{self.addon.name}: response has no stream list", self.addon.name
            )

        streams: list[Stream] = []
        for index, raw in enumerate(raw_streams):
            try:
                streams.append(Stream.model_validate(raw))
            except ValidationError as e:
                logger.warning(
                    f"Dropping invalid stream #{index} from {self.addon.name}: "
                    f"{e.error_count()} validation error(s)"
                )

        logger.debug(f"{self.addon.name} returned {len(streams)} streams for {media_type}/{media_id}")
        return streams
