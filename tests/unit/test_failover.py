"""
Unit tests for failover order reporting.
"""

import json
import logging

import pytest

from addonstreams.config import load_config
from addonstreams.presets import failover
from addonstreams.presets.failover import (
    FailoverEndpointError,
    build_failover_payload,
    dispatch_failover_report,
    failover_order_url,
    partition_by_manifest,
    report_failover_order,
    resolve_base_url,
    wait_for_pending_reports,
)
from addonstreams.presets.streamnzb import on_streams_ready
from addonstreams.streams.constants import StreamType
from addonstreams.streams.models import ParsedStream
from addonstreams.utils.http import RequestError


def _parsed(addon, failover_id=None) -> ParsedStream:
    return ParsedStream(addon=addon, type=StreamType.USENET, failover_id=failover_id)


def _posted_ids(call) -> list:
    return [entry["failoverId"] for entry in json.loads(call.kwargs["body"])["streams"]]


@pytest.mark.unit
class TestResolveBaseUrl:
    """Tests for resolve_base_url."""

    @pytest.mark.parametrize(
        "configured,expected",
        [
            ("https://host/dir/manifest.json?x=1", "https://host/dir"),
            ("https://host/dir/MANIFEST.JSON", "https://host/dir"),
            ("https://host/dir/", "https://host/dir"),
            ("https://host", "https://host"),
        ],
    )
    def test_configured_url(self, make_addon, configured, expected):
        addon = make_addon(manifest_url="https://other/manifest.json", url=configured)

        assert resolve_base_url(addon) == expected

    def test_report_endpoint_from_configured_url(self, make_addon):
        addon = make_addon(url="https://host/dir/manifest.json?x=1")

        assert failover_order_url(resolve_base_url(addon)) == "https://host/dir/failover_order"

    @pytest.mark.parametrize(
        "manifest_url,expected",
        [
            ("https://host/dir/manifest.json", "https://host/dir"),
            ("https://host/manifest.json", "https://host"),
            ("https://host:8443/a/b/manifest.json?token=1", "https://host:8443/a/b"),
            ("http://host", "http://host"),
        ],
    )
    def test_falls_back_to_manifest_url(self, make_addon, manifest_url, expected):
        addon = make_addon(manifest_url=manifest_url, url=None)

        assert resolve_base_url(addon) == expected

    def test_configured_manifest_only_path_falls_back(self, make_addon):
        """A configured URL that strips to nothing defers to the manifest URL."""
        addon = make_addon(manifest_url="https://host/x/manifest.json", url="/manifest.json")

        assert resolve_base_url(addon) == "https://host/x"

    @pytest.mark.parametrize("manifest_url", ["", "not a url", "ftp://host/manifest.json"])
    def test_no_usable_url(self, make_addon, manifest_url):
        addon = make_addon(manifest_url=manifest_url, url=None)

        with pytest.raises(FailoverEndpointError):
            resolve_base_url(addon)


@pytest.mark.unit
class TestPayload:
    """Tests for partitioning and payload construction."""

    def test_payload_keeps_missing_ids_in_place(self, make_addon):
        addon = make_addon()
        streams = [_parsed(addon, "a"), _parsed(addon), _parsed(addon, "c")]

        assert build_failover_payload(streams) == {
            "streams": [{"failoverId": "a"}, {"failoverId": None}, {"failoverId": "c"}]
        }

    def test_partition_by_manifest_keeps_order(self, make_addon):
        first = make_addon(manifest_url="https://a/manifest.json")
        second = make_addon(manifest_url="https://b/manifest.json")
        unnamed = make_addon(manifest_url="", url=None)
        streams = [
            _parsed(first, "1"),
            _parsed(second, "2"),
            _parsed(first, "3"),
            _parsed(unnamed, "4"),
        ]

        partitions = partition_by_manifest(streams)

        assert list(partitions) == ["https://a/manifest.json", "https://b/manifest.json", ""]
        assert [s.failover_id for s in partitions["https://a/manifest.json"]] == ["1", "3"]
        assert [s.failover_id for s in partitions[""]] == ["4"]


@pytest.mark.unit
class TestReportFailoverOrder:
    """Tests for the report request itself."""

    @pytest.mark.asyncio
    async def test_request_shape(self, make_addon, mock_make_request):
        addon = make_addon()
        streams = [_parsed(addon, "x"), _parsed(addon)]

        await report_failover_order(streams, "https://host/dir/", "StreamNZB")

        mock_make_request.assert_awaited_once()
        call = mock_make_request.call_args
        assert call.args == ("https://host/dir/failover_order",)
        assert call.kwargs["method"] == "POST"
        assert call.kwargs["timeout"] == 5000
        assert call.kwargs["headers"] == {
            "Content-Type": "application/json",
            "User-Agent": "AIOStreams",
        }
        assert json.loads(call.kwargs["body"]) == {
            "streams": [{"failoverId": "x"}, {"failoverId": None}]
        }

    @pytest.mark.asyncio
    async def test_header_and_timeout_ignore_config(
        self, make_addon, mock_make_request, temp_config_file
    ):
        """The configured addon timeout never leaks into the report request."""
        load_config(str(temp_config_file))

        await report_failover_order([_parsed(make_addon(), "x")], "https://host", "StreamNZB")

        call = mock_make_request.call_args
        assert call.args == ("https://host/api/failover_order",)
        assert call.kwargs["timeout"] == 5000
        assert call.kwargs["headers"]["User-Agent"] == "AIOStreams"

    @pytest.mark.asyncio
    async def test_empty_partition_sends_nothing(self, mock_make_request):
        await report_failover_order([], "https://host")

        mock_make_request.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_is_logged_at_debug(self, make_addon, mock_make_request, caplog):
        mock_make_request.side_effect = RequestError("Request timed out after 5000ms", url="u")
        caplog.set_level(logging.DEBUG, logger="addonstreams.presets.failover")

        await report_failover_order([_parsed(make_addon(), "x")], "https://host", "StreamNZB")

        records = [r for r in caplog.records if "Failed to report failover order" in r.message]
        assert len(records) == 1
        assert records[0].levelno == logging.DEBUG
        assert "StreamNZB" in records[0].message
        assert "timed out" in records[0].message

    def test_dispatch_without_running_loop(self, make_addon, mock_make_request):
        """Outside an event loop the report is skipped instead of raising."""
        assert dispatch_failover_report([_parsed(make_addon())], "https://host") is None
        mock_make_request.assert_not_called()


@pytest.mark.unit
class TestOnStreamsReady:
    """Tests for the StreamNZB batch hook."""

    @pytest.mark.asyncio
    async def test_empty_batch(self, mock_make_request):
        on_streams_ready([])
        await wait_for_pending_reports()

        mock_make_request.assert_not_called()

    @pytest.mark.asyncio
    async def test_returns_before_requests_run(self, make_addon, mock_make_request):
        """The hook only schedules reports; nothing is sent until the loop runs."""
        on_streams_ready([_parsed(make_addon(), "x")])

        assert mock_make_request.await_count == 0
        assert len(failover._pending_reports) == 1

        await wait_for_pending_reports()

        assert mock_make_request.await_count == 1
        assert not failover._pending_reports

    @pytest.mark.asyncio
    async def test_one_request_per_manifest(self, make_addon, mock_make_request):
        first = make_addon(manifest_url="https://a.example/manifest.json")
        second = make_addon(manifest_url="https://b.example/nzb/manifest.json")
        streams = [_parsed(first, "a1"), _parsed(second, "b1"), _parsed(first, "a2")]

        on_streams_ready(streams)
        await wait_for_pending_reports()

        assert mock_make_request.await_count == 2
        sent = {call.args[0]: _posted_ids(call) for call in mock_make_request.call_args_list}
        assert sent == {
            "https://a.example/failover_order": ["a1", "a2"],
            "https://b.example/nzb/failover_order": ["b1"],
        }

    @pytest.mark.asyncio
    async def test_failure_is_isolated(self, make_addon, mock_make_request):
        first = make_addon(manifest_url="https://a.example/manifest.json")
        second = make_addon(manifest_url="https://b.example/manifest.json")

        async def fail_first(url, **kwargs):
            if url.startswith("https://a.example"):
                raise RequestError("connection refused", url=url)

        mock_make_request.side_effect = fail_first

        on_streams_ready([_parsed(first, "a"), _parsed(second, "b")])
        await wait_for_pending_reports()

        urls = [call.args[0] for call in mock_make_request.call_args_list]
        assert urls == [
            "https://a.example/failover_order",
            "https://b.example/failover_order",
        ]

    @pytest.mark.asyncio
    async def test_unresolvable_endpoint_is_skipped(self, make_addon, mock_make_request):
        broken = make_addon(manifest_url="", url=None)
        good = make_addon(manifest_url="https://good.example/manifest.json")

        on_streams_ready([_parsed(broken, "x"), _parsed(good, "y")])
        await wait_for_pending_reports()

        mock_make_request.assert_awaited_once()
        assert mock_make_request.call_args.args[0] == "https://good.example/failover_order"

    @pytest.mark.asyncio
    async def test_partial_failover_ids(self, make_addon, mock_make_request):
        addon = make_addon()

        on_streams_ready([_parsed(addon, "first"), _parsed(addon), _parsed(addon, "third")])
        await wait_for_pending_reports()

        assert _posted_ids(mock_make_request.call_args) == ["first", None, "third"]
