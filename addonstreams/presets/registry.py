"""
Preset registry.

Maps preset identifiers to their descriptors. Built once at startup.
"""

import logging
from typing import Optional

from addonstreams.presets.base import Preset
from addonstreams.streams.constants import PresetCategory

logger = logging.getLogger(__name__)


class PresetNotFoundError(Exception):
    """No preset is registered under the requested identifier."""

    def __init__(self, preset_id: str):
        super().__init__(f"Unknown preset: {preset_id}")
        self.preset_id = preset_id


class PresetRegistry:
    """Lookup table of available presets."""

    def __init__(self) -> None:
        self._presets: dict[str, Preset] = {}

    def register(self, preset: Preset) -> None:
        if preset.id in self._presets:
            raise ValueError(f"Preset already registered: {preset.id}")
        self._presets[preset.id] = preset
        logger.debug(f"Registered preset: {preset.metadata.name} ({preset.id})")

    def get(self, preset_id: str) -> Preset:
        preset = self._presets.get(preset_id)
        if preset is None:
            raise PresetNotFoundError(preset_id)
        return preset

    def get_presets(self, category: Optional[PresetCategory] = None) -> list[Preset]:
        """Get presets, optionally filtered by category."""
        presets = list(self._presets.values())
        if category:
            presets = [p for p in presets if p.metadata.category == category]
        return presets

    def __contains__(self, preset_id: str) -> bool:
        return preset_id in self._presets

    def __len__(self) -> int:
        return len(self._presets)


# Global preset registry
preset_registry: Optional[PresetRegistry] = None


def create_registry() -> PresetRegistry:
    """Build a registry holding the built-in presets."""
    from addonstreams.presets.streamnzb import create_streamnzb_preset

    registry = PresetRegistry()
    registry.register(create_streamnzb_preset())
    return registry


def get_preset_registry() -> PresetRegistry:
    """Get the global preset registry, building it on first use."""
    global preset_registry

    if preset_registry is None:
        preset_registry = create_registry()
        logger.info(f"Loaded {len(preset_registry)} presets")
    return preset_registry
