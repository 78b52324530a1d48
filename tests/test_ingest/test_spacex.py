"""Tests for launch source acquisition."""

from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from minietl.core.exceptions import MalformedPayload, SourceUnavailable
from minietl.ingest.spacex import Fallback, Ok, acquire, fetch_launches, parse_launches

pytestmark = pytest.mark.asyncio

API_URL = "https://api.example.com/v5/launches"


def _launch_payload(index: int, **overrides) -> dict:
    payload = {
        "id": f"launch-{index}",
        "name": f"Mission {index}",
        "date_utc": f"2024-01-{index % 28 + 1:02d}T12:00:00.000Z",
        "success": True,
        "upcoming": False,
        "rocket": "5e9d0d95eda69973a809d1ec",
        "launchpad": "5e9e4502f509094188566f88",
        "payloads": ["5eb0e4d0b6c3bb0006eeb253"],
        "flight_number": index,
    }
    payload.update(overrides)
    return payload


def _mock_response(mock_get, status: int = 200, body=None, json_error: Exception | None = None):
    mock_response = AsyncMock()
    mock_response.status = status
    if json_error is not None:
        mock_response.json = AsyncMock(side_effect=json_error)
    else:
        mock_response.json = AsyncMock(return_value=body)
    mock_get.return_value.__aenter__.return_value = mock_response
    return mock_response


class TestParseLaunches:
    """Tests for payload validation and windowing."""

    async def test_keeps_last_records_in_order(self):
        """Should keep the tail window in source order."""
        payload = [_launch_payload(i) for i in range(25)]

        records = parse_launches(payload, batch_size=10)

        assert [r.id for r in records] == [f"launch-{i}" for i in range(15, 25)]

    async def test_short_payload_kept_whole(self):
        """Should keep every record when fewer than the window."""
        records = parse_launches([_launch_payload(1), _launch_payload(2)], batch_size=10)
        assert len(records) == 2

    async def test_empty_list_is_valid(self):
        """Should accept an empty array."""
        assert parse_launches([], batch_size=10) == ()

    async def test_carries_auxiliary_fields(self):
        """Should keep unknown source fields on the record."""
        (record,) = parse_launches([_launch_payload(3)], batch_size=10)

        assert record.flight_number == 3
        assert record.payloads == ["5eb0e4d0b6c3bb0006eeb253"]

    async def test_populated_rocket_kept_as_is(self):
        """Should accept expanded rocket and launchpad objects."""
        rocket = {"id": "5e9d0d95eda69973a809d1ec", "name": "Falcon 9"}
        launchpad = {"id": "5e9e4502f509094188566f88", "name": "KSC LC 39A"}

        (record,) = parse_launches(
            [_launch_payload(5, rocket=rocket, launchpad=launchpad)], batch_size=10
        )

        assert record.rocket == rocket
        assert record.launchpad == launchpad

    async def test_null_success_allowed(self):
        """Should accept launches without an outcome yet."""
        (record,) = parse_launches([_launch_payload(4, success=None, upcoming=True)], 10)

        assert record.success is None
        assert record.upcoming is True

    async def test_rejects_non_list(self):
        """Should reject a payload that is not an array."""
        with pytest.raises(MalformedPayload):
            parse_launches({"docs": []}, batch_size=10)

    async def test_rejects_invalid_record(self):
        """Should reject records missing required fields."""
        with pytest.raises(MalformedPayload):
            parse_launches([{"id": "x"}], batch_size=10)

    async def test_ignores_invalid_records_outside_window(self):
        """Only the retained window is validated."""
        payload = [{"garbage": True}] + [_launch_payload(i) for i in range(10)]

        records = parse_launches(payload, batch_size=10)

        assert len(records) == 10


class TestFetchLaunches:
    """Tests for the tagged fetch result."""

    async def test_success_returns_ok(self):
        """Should return Ok with parsed records."""
        with patch("aiohttp.ClientSession.get") as mock_get:
            _mock_response(mock_get, body=[_launch_payload(1)])

            result = await fetch_launches(API_URL, batch_size=10)

        assert isinstance(result, Ok)
        assert result.records[0].name == "Mission 1"

    async def test_http_error_returns_fallback(self):
        """Should classify non-2xx as source unavailable."""
        with patch("aiohttp.ClientSession.get") as mock_get:
            _mock_response(mock_get, status=503)

            result = await fetch_launches(API_URL, batch_size=10)

        assert isinstance(result, Fallback)
        assert isinstance(result.reason, SourceUnavailable)
        assert "503" in str(result.reason)

    async def test_connection_error_returns_fallback(self):
        """Should classify transport errors as source unavailable."""
        with patch("aiohttp.ClientSession.get") as mock_get:
            mock_get.side_effect = aiohttp.ClientConnectionError("Connection refused")

            result = await fetch_launches(API_URL, batch_size=10)

        assert isinstance(result, Fallback)
        assert isinstance(result.reason, SourceUnavailable)

    async def test_invalid_json_returns_fallback(self):
        """Should classify undecodable bodies as malformed."""
        with patch("aiohttp.ClientSession.get") as mock_get:
            _mock_response(mock_get, json_error=ValueError("Expecting value"))

            result = await fetch_launches(API_URL, batch_size=10)

        assert isinstance(result, Fallback)
        assert isinstance(result.reason, MalformedPayload)

    async def test_object_payload_returns_fallback(self):
        """Should classify a non-array body as malformed."""
        with patch("aiohttp.ClientSession.get") as mock_get:
            _mock_response(mock_get, body={"error": "rate limited"})

            result = await fetch_launches(API_URL, batch_size=10)

        assert isinstance(result, Fallback)
        assert isinstance(result.reason, MalformedPayload)


class TestAcquire:
    """Tests for the acquisition boundary."""

    async def test_live_batch(self):
        """Should return live records without the fallback flag."""
        with patch("aiohttp.ClientSession.get") as mock_get:
            _mock_response(mock_get, body=[_launch_payload(i) for i in range(12)])

            acquisition = await acquire(API_URL)

        assert acquisition.fallback_used is False
        assert acquisition.source_url == API_URL
        assert len(acquisition.records) == 10
        assert acquisition.records[-1].id == "launch-11"

    async def test_transport_failure_uses_fixture(self):
        """Should never raise; fixture batch is flagged as fallback."""
        with patch("aiohttp.ClientSession.get") as mock_get:
            mock_get.side_effect = aiohttp.ClientConnectionError("Connection refused")

            acquisition = await acquire(API_URL)

        assert acquisition.fallback_used is True
        assert [r.id for r in acquisition.records] == ["demo-1", "demo-2", "demo-3"]
        assert acquisition.source_url == API_URL

    async def test_timeout_uses_fixture(self):
        """Should treat transport timeouts like any other failure."""
        with patch("aiohttp.ClientSession.get") as mock_get:
            mock_get.side_effect = TimeoutError()

            acquisition = await acquire(API_URL)

        assert acquisition.fallback_used is True
        assert len(acquisition.records) == 3

    async def test_malformed_payload_uses_fixture(self):
        """Should fall back identically when the body is not a list."""
        with patch("aiohttp.ClientSession.get") as mock_get:
            _mock_response(mock_get, body="not a list")

            acquisition = await acquire(API_URL)

        assert acquisition.fallback_used is True
        assert len(acquisition.records) == 3

    async def test_fetched_at_set_on_both_paths(self):
        """Should stamp completion time whether live or fallback."""
        with patch("aiohttp.ClientSession.get") as mock_get:
            _mock_response(mock_get, status=500)
            failed = await acquire(API_URL)

        with patch("aiohttp.ClientSession.get") as mock_get:
            _mock_response(mock_get, body=[_launch_payload(1)])
            live = await acquire(API_URL)

        assert failed.fetched_at.tzinfo is not None
        assert live.fetched_at >= failed.fetched_at

    async def test_defaults_to_configured_url(self, monkeypatch):
        """Should use the configured endpoint when no override is given."""
        from minietl.config import Settings

        monkeypatch.setattr(
            "minietl.ingest.spacex.get_settings",
            lambda: Settings(spacex_api_url="https://mirror.example.com/launches"),
        )

        with patch("aiohttp.ClientSession.get") as mock_get:
            _mock_response(mock_get, body=[])

            acquisition = await acquire()

        assert acquisition.source_url == "https://mirror.example.com/launches"
        assert mock_get.call_args.args[0] == "https://mirror.example.com/launches"
