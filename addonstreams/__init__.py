"""
AddonStreams - stream aggregation across addon sources

Collects stream descriptors from configured addon instances, normalizes them
into one model through per-source presets, and runs each preset's
post-processing (such as failover order reporting) once a batch is ready.
"""

__version__ = "1.0.0"
__license__ = "MIT"

from addonstreams.config import get_config, load_config

__all__ = [
    "__version__",
    "get_config",
    "load_config",
]
