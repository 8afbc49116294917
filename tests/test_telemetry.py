"""Tests for the game server telemetry client."""

import httpx
import pytest

from conftest import run
from dashboard.services.telemetry import TelemetryClient, TelemetryResult, parse_live_snapshot
from gamedata.models import LiveSnapshot

LIVE_BODY = {"connectedUsers": 42, "activeMatches": 5, "usersInLobby": 12, "usersInMatch": 30}


def make_client(handler, base_url="https://game.test") -> TelemetryClient:
    return TelemetryClient(base_url, timeout=1.0, transport=httpx.MockTransport(handler))


def fetch(client: TelemetryClient) -> TelemetryResult:
    async def _go():
        try:
            return await client.fetch_live_snapshot()
        finally:
            await client.close()

    return run(_go())


class TestFetchLiveSnapshot:
    def test_success(self):
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, json=LIVE_BODY)

        result = fetch(make_client(handler, base_url="https://game.test/"))

        assert requested == ["https://game.test/api/stats"]
        assert result.available is True
        assert result.error is None
        assert result.snapshot == LiveSnapshot(
            connected_users=42, active_matches=5, users_in_lobby=12, users_in_match=30
        )

    def test_extra_fields_ignored(self):
        body = {**LIVE_BODY, "uptime": 1234}
        result = fetch(make_client(lambda request: httpx.Response(200, json=body)))
        assert result.available is True
        assert result.snapshot.connected_users == 42

    @pytest.mark.parametrize("status", [404, 500, 503])
    def test_non_success_status_is_zeroed(self, status):
        result = fetch(make_client(lambda request: httpx.Response(status, json=LIVE_BODY)))
        assert result.available is False
        assert result.snapshot == LiveSnapshot.zero()
        assert str(status) in result.error

    def test_connection_error_is_zeroed(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result = fetch(make_client(handler))
        assert result.available is False
        assert result.snapshot == LiveSnapshot.zero()
        assert "ConnectError" in result.error

    def test_timeout_is_zeroed(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        result = fetch(make_client(handler))
        assert result.available is False
        assert result.snapshot == LiveSnapshot.zero()

    def test_invalid_json_is_zeroed(self):
        result = fetch(make_client(lambda request: httpx.Response(200, text="<html>oops</html>")))
        assert result.available is False
        assert result.snapshot == LiveSnapshot.zero()
        assert "malformed" in result.error

    def test_missing_field_is_zeroed(self):
        body = {k: v for k, v in LIVE_BODY.items() if k != "usersInMatch"}
        result = fetch(make_client(lambda request: httpx.Response(200, json=body)))
        assert result.available is False
        assert result.snapshot == LiveSnapshot.zero()

    def test_failure_is_logged(self, caplog):
        caplog.set_level("WARNING")
        fetch(make_client(lambda request: httpx.Response(502)))
        assert "Could not fetch live stats" in caplog.text


class TestParseLiveSnapshot:
    def test_rejects_non_object(self):
        with pytest.raises(ValueError):
            parse_live_snapshot([1, 2, 3])

    @pytest.mark.parametrize("bad", ["12", 1.5, None, True, -1])
    def test_rejects_bad_counts(self, bad):
        with pytest.raises(ValueError):
            parse_live_snapshot({**LIVE_BODY, "activeMatches": bad})


class TestTelemetryResult:
    def test_default_is_unavailable_zero(self):
        result = TelemetryResult()
        assert result.available is False
        assert result.snapshot == LiveSnapshot(0, 0, 0, 0)

    def test_unavailable_carries_reason(self):
        result = TelemetryResult.unavailable("HTTP 500")
        assert result.error == "HTTP 500"
        assert result.snapshot == LiveSnapshot.zero()


class TestClientConfig:
    def test_timeout_applied_to_http_client(self):
        client = TelemetryClient("https://game.test", timeout=2.5)
        try:
            assert client._http.timeout == httpx.Timeout(2.5)
        finally:
            run(client.close())

    def test_stats_url_built_from_base(self):
        client = TelemetryClient("https://game.test/")
        try:
            assert client.stats_url == "https://game.test/api/stats"
        finally:
            run(client.close())
