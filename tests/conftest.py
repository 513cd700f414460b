"""
AddonStreams Test Configuration

Shared fixtures and configuration for all tests.
"""

import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Generator
from unittest.mock import AsyncMock, patch

import pytest

from addonstreams import config as config_module
from addonstreams.config import AddonStreamsConfig
from addonstreams.presets.base import Preset
from addonstreams.presets.streamnzb import create_streamnzb_preset
from addonstreams.streams.constants import ResourceType
from addonstreams.streams.models import Addon, PresetRef, Stream


# ============ Environment Fixtures ============


@pytest.fixture(autouse=True)
def clean_environment() -> Generator[None, None, None]:
    """Strip AddonStreams env vars and start each test from default config."""
    original_env = os.environ.copy()

    for key in list(os.environ.keys()):
        if key.startswith("ADDONSTREAMS_"):
            del os.environ[key]

    with patch.object(config_module, "_config", AddonStreamsConfig()):
        yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def mock_env_vars() -> Generator[dict[str, str], None, None]:
    """Set up mock environment variables."""
    env_vars = {
        "ADDONSTREAMS_DEFAULT_TIMEOUT": "20000",
        "ADDONSTREAMS_LOG_FILE": "logs/test.log",
        "ADDONSTREAMS_LOG_LEVEL": "DEBUG",
    }
    with patch.dict(os.environ, env_vars):
        yield env_vars


# ============ Temporary File Fixtures ============


@pytest.fixture(scope="function")
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(scope="function")
def temp_config_file(temp_dir: Path) -> Path:
    """Create a temporary config file."""
    config_file = temp_dir / "config.yaml"
    config_content = """
http:
  default_timeout: 12000

failover:
  report_path: "/api/failover_order"

logging:
  level: "DEBUG"
  max_size: "2MB"
"""
    config_file.write_text(config_content)
    return config_file


# ============ Preset / Stream Fixtures ============


@pytest.fixture
def streamnzb_preset() -> Preset:
    """A fresh StreamNZB preset built from default config."""
    return create_streamnzb_preset()


@pytest.fixture
def make_addon() -> Callable[..., Addon]:
    """Factory for StreamNZB addon instances."""

    def _make_addon(
        manifest_url: str = "https://nzb.example.com/manifest.json",
        url: Any = "__manifest__",
        name: str = "StreamNZB",
        preset_type: str = "streamnzb",
    ) -> Addon:
        options: dict[str, Any] = {}
        if url == "__manifest__":
            options["url"] = manifest_url
        elif url is not None:
            options["url"] = url
        return Addon(
            name=name,
            manifest_url=manifest_url,
            enabled=True,
            media_types=[],
            resources=[ResourceType.STREAM],
            timeout=15000,
            preset=PresetRef(id="", type=preset_type, options=options),
            headers={"User-Agent": "AIOStreams"},
        )

    return _make_addon


@pytest.fixture
def make_stream() -> Callable[..., Stream]:
    """Factory for raw streams from a dict of wire fields."""

    def _make_stream(**fields: Any) -> Stream:
        data = {"name": "StreamNZB 1080p", "url": "https://nzb.example.com/play/1"}
        data.update(fields)
        return Stream.model_validate(data)

    return _make_stream


# ============ Mock Fixtures ============


@pytest.fixture
def mock_make_request() -> Generator[AsyncMock, None, None]:
    """Mock outbound requests made by failover reporting."""
    with patch("addonstreams.presets.failover.make_request", new_callable=AsyncMock) as mock:
        yield mock


# ============ Markers ============


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "network: Network access required")
