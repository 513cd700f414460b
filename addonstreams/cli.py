"""
Command line entry point.

    python -m addonstreams streams movie tt0133093 --preset streamnzb --url https://nzb.example.com
    python -m addonstreams presets --json
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional, Sequence

import httpx

from addonstreams import __version__
from addonstreams.aggregator import StreamAggregator
from addonstreams.config import load_config
from addonstreams.presets.options import PresetOptionError
from addonstreams.presets.registry import PresetNotFoundError, get_preset_registry
from addonstreams.streams.models import PresetEntry, UserData
from addonstreams.utils.logging_setup import setup_logging_from_config

logger = logging.getLogger(__name__)


def _parse_option(value: str) -> tuple[str, str]:
    key, sep, option_value = value.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected key=value, got {value!r}")
    return key, option_value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="addonstreams",
        description="Collect and normalize streams from addon instances",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="Path to config.yaml (auto-detected if not specified)")
    parser.add_argument("--log-level", help="Override the configured log level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    streams = subparsers.add_parser("streams", help="Fetch normalized streams for a media item")
    streams.add_argument("media_type", help="Media type, e.g. movie or series")
    streams.add_argument("media_id", help="Media id, e.g. tt0133093 or tt0944947:1:1")
    streams.add_argument("--preset", default="streamnzb", help="Preset to use (default: streamnzb)")
    streams.add_argument("--url", help="Instance URL")
    streams.add_argument(
        "--option",
        action="append",
        default=[],
        type=_parse_option,
        metavar="KEY=VALUE",
        help="Extra preset option (repeatable)",
    )
    streams.add_argument("--json", action="store_true", help="Print streams as JSON")

    presets = subparsers.add_parser("presets", help="List available presets")
    presets.add_argument("--json", action="store_true", help="Print full preset metadata as JSON")

    return parser


async def _run_streams(args: argparse.Namespace) -> int:
    options = dict(args.option)
    if args.url:
        options["url"] = args.url

    user_data = UserData(presets=[PresetEntry(type=args.preset, options=options)])

    async with httpx.AsyncClient() as http_client:
        aggregator = StreamAggregator(http_client=http_client)
        try:
            addons = aggregator.build_addons(user_data)
        except (PresetNotFoundError, PresetOptionError) as e:
            logger.error(str(e))
            return 2

        streams = await aggregator.get_streams(addons, args.media_type, args.media_id)
        await aggregator.shutdown()

    if args.json:
        print(json.dumps([s.to_dict() for s in streams], indent=2))
    else:
        for index, stream in enumerate(streams, 1):
            cached = ""
            if stream.service is not None:
                cached = " [cached]" if stream.service.cached else " [uncached]"
            print(f"{index:3}. [{stream.type.value}]{cached} {stream.name or stream.filename or '-'}")
        print(f"{len(streams)} streams")

    return 0


def _run_presets(args: argparse.Namespace) -> int:
    presets = get_preset_registry().get_presets()

    if args.json:
        print(json.dumps([p.metadata.to_dict() for p in presets], indent=2))
    else:
        for preset in presets:
            print(f"{preset.id:<16} {preset.metadata.name} - {preset.metadata.description}")

    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    if args.log_level:
        config.logging.level = args.log_level
    setup_logging_from_config(config.logging)

    if args.command == "presets":
        return _run_presets(args)
    return asyncio.run(_run_streams(args))


if __name__ == "__main__":
    sys.exit(main())
