"""
Presets: integration descriptors, their options and the preset registry.
"""

from addonstreams.presets.base import (
    Preset,
    PresetMetadata,
    generate_addon,
    generate_single_addon,
)
from addonstreams.presets.failover import (
    FailoverEndpointError,
    dispatch_failover_report,
    report_failover_order,
    resolve_base_url,
    wait_for_pending_reports,
)
from addonstreams.presets.options import (
    Option,
    OptionType,
    PresetOptionError,
    SocialLink,
    base_options,
    resolve_options,
)
from addonstreams.presets.registry import (
    PresetNotFoundError,
    PresetRegistry,
    create_registry,
    get_preset_registry,
)

__all__ = [
    # Descriptors
    "Preset",
    "PresetMetadata",
    "generate_addon",
    "generate_single_addon",
    # Options
    "Option",
    "OptionType",
    "PresetOptionError",
    "SocialLink",
    "base_options",
    "resolve_options",
    # Registry
    "PresetNotFoundError",
    "PresetRegistry",
    "create_registry",
    "get_preset_registry",
    # Failover reporting
    "FailoverEndpointError",
    "dispatch_failover_report",
    "report_failover_order",
    "resolve_base_url",
    "wait_for_pending_reports",
]
