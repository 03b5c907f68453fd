"""Unit tests for the authenticated HTTP client and the endpoint services."""

import asyncio
import logging

import httpx
import pytest

from parkhub_passes.config.settings import ClientConfig
from parkhub_passes.http.client import AuthenticatedClient
from parkhub_passes.models.events import ParkHubEvent
from parkhub_passes.reliability.codes import ErrorCode
from parkhub_passes.reliability.errors import (
    AuthenticationError,
    NetworkError,
    ServerError,
    UnknownError,
    ValidationError,
)
from parkhub_passes.services.events import EventsApi
from parkhub_passes.storage.credentials import InMemoryCredentialStore, validate_api_key
from tests.conftest import EVENT_ID, TEST_API_KEY
from tests.helpers.fake_parkhub import (
    ScriptedResponse,
    connect_error,
    rate_limited,
    server_error,
)
from tests.helpers.mock_exceptions import error_body

LANDMARK = ClientConfig().landmark_id
PASSES_PATH = f"/{LANDMARK}/passes"


class TestCredential:
    """API key handling."""

    @pytest.mark.asyncio
    async def test_missing_key_raises_before_any_call(self, fake_server, retry_manager):
        client = AuthenticatedClient(
            ClientConfig(), transport=fake_server.transport, retry_manager=retry_manager
        )

        with pytest.raises(AuthenticationError) as exc_info:
            await client.get("/events/x")

        assert exc_info.value.code == ErrorCode.MISSING_API_KEY
        assert exc_info.value.status_code is None
        assert fake_server.calls == []

    @pytest.mark.asyncio
    async def test_bearer_header(self, http_client, fake_server):
        await http_client.get(f"/events/{LANDMARK}")
        assert fake_server.calls[0].authorization == f"Bearer {TEST_API_KEY}"

    def test_key_sources_in_order(self):
        store = InMemoryCredentialStore("stored_key")
        assert AuthenticatedClient(ClientConfig(), credential_store=store)._api_key == "stored_key"
        assert AuthenticatedClient(
            ClientConfig(api_key="config_key"), credential_store=store
        )._api_key == "config_key"
        assert AuthenticatedClient(
            ClientConfig(api_key="config_key"), api_key="explicit_key"
        )._api_key == "explicit_key"

    def test_set_and_clear_persist_to_store(self):
        store = InMemoryCredentialStore()
        client = AuthenticatedClient(ClientConfig(), credential_store=store)

        client.set_api_key("new_key")
        assert store.get() == "new_key"
        assert client.has_api_key

        client.clear_api_key()
        assert store.get() is None
        assert not client.has_api_key

    def test_blank_key_rejected(self, http_client):
        with pytest.raises(ValueError):
            http_client.set_api_key("   ")

    @pytest.mark.asyncio
    async def test_rotation_does_not_affect_in_flight_call(self, config, retry_manager):
        release = asyncio.Event()

        async def handler(request):
            seen.append(request.headers["Authorization"])
            await release.wait()
            return httpx.Response(200, json=[])

        seen = []
        client = AuthenticatedClient(
            config, transport=httpx.MockTransport(handler), retry_manager=retry_manager
        )
        in_flight = asyncio.ensure_future(client.get("/events/x"))
        await asyncio.sleep(0.01)

        client.set_api_key("rotated_key")
        release.set()
        await in_flight
        await client.get("/events/x")

        assert seen == [f"Bearer {TEST_API_KEY}", "Bearer rotated_key"]

    @pytest.mark.asyncio
    async def test_retries_keep_original_key(self, config, retry_manager):
        seen = []

        def handler(request):
            seen.append(request.headers["Authorization"])
            if len(seen) == 1:
                client.set_api_key("rotated_key")
                return httpx.Response(503)
            return httpx.Response(200, json=[])

        client = AuthenticatedClient(
            config, transport=httpx.MockTransport(handler), retry_manager=retry_manager
        )
        await client.get("/events/x")

        assert seen == [f"Bearer {TEST_API_KEY}", f"Bearer {TEST_API_KEY}"]

    @pytest.mark.asyncio
    async def test_clear_key_on_auth_error_when_enabled(self, fake_server, retry_manager):
        fake_server.script_path("/events/x", ScriptedResponse(status_code=401))
        client = AuthenticatedClient(
            ClientConfig(api_key=TEST_API_KEY, clear_key_on_auth_error=True),
            transport=fake_server.transport,
            retry_manager=retry_manager,
        )

        response = await client.get("/events/x")

        assert response.success is False
        assert isinstance(response.app_error, AuthenticationError)
        assert not client.has_api_key

    @pytest.mark.asyncio
    async def test_key_kept_on_auth_error_by_default(self, http_client, fake_server):
        fake_server.script_path("/events/x", ScriptedResponse(status_code=401))
        await http_client.get("/events/x")
        assert http_client.has_api_key

    def test_validate_api_key(self):
        assert validate_api_key(TEST_API_KEY)
        assert validate_api_key("a" * 32)
        assert not validate_api_key("a" * 31)
        assert not validate_api_key("a" * 129)
        assert not validate_api_key("bad key with spaces and more than 32 chars")
        assert not validate_api_key(None)


class TestResponses:
    """Envelope handling and failures."""

    @pytest.mark.asyncio
    async def test_bare_json_is_wrapped(self, http_client, fake_server):
        response = await http_client.get(f"/events/{LANDMARK}")
        assert response.success is True
        assert response.data == fake_server.events
        assert response.error is None

    @pytest.mark.asyncio
    async def test_envelope_kept(self, http_client, fake_server):
        fake_server.script_path(
            "/x", ScriptedResponse(body={"success": True, "data": {"a": 1}, "error": None})
        )
        response = await http_client.get("/x")
        assert response.data == {"a": 1}

    @pytest.mark.asyncio
    async def test_failed_envelope_with_2xx(self, http_client, fake_server):
        fake_server.script_path("/x", ScriptedResponse(body=error_body("event_not_found")))
        response = await http_client.get("/x")

        assert response.success is False
        assert response.error.code == "event_not_found"
        assert response.app_error.code == ErrorCode.EVENT_NOT_FOUND

    @pytest.mark.asyncio
    async def test_raise_errors(self, http_client, fake_server):
        fake_server.script_path("/x", ScriptedResponse(status_code=400, body=error_body("invalid_input")))
        with pytest.raises(ValidationError):
            await http_client.post("/x", {}, raise_errors=True)

    @pytest.mark.asyncio
    async def test_failure_envelope_is_not_serialised_with_app_error(self, http_client, fake_server):
        fake_server.script_path("/x", server_error(500))
        response = await http_client.get("/x", retry=False)

        dumped = response.model_dump()
        assert "app_error" not in dumped
        assert dumped["error"]["code"] == "server_error"

    @pytest.mark.asyncio
    async def test_invalid_json_is_unknown_error(self, http_client):
        def handler(request):
            return httpx.Response(200, text="<html>")

        client = AuthenticatedClient(
            http_client.config, transport=httpx.MockTransport(handler)
        )
        response = await client.get("/x")
        assert isinstance(response.app_error, UnknownError)


class TestRetryPerCallSite:

    @pytest.mark.asyncio
    async def test_get_retries_by_default(self, http_client, fake_server, no_sleep):
        fake_server.script_path("/events/x", server_error(503), connect_error())
        response = await http_client.get("/events/x")

        assert response.success is True
        assert len(fake_server.calls) == 3
        assert no_sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_each_retry_logs_one_warning(self, http_client, fake_server, caplog):
        fake_server.script_path("/events/x", server_error(503), server_error(503))

        with caplog.at_level(logging.DEBUG, logger="parkhub_passes"):
            await http_client.get("/events/x")

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 2
        assert all(r.name == "parkhub_passes.reliability.retry" for r in warnings)

    @pytest.mark.asyncio
    async def test_post_does_not_retry_by_default(self, http_client, fake_server):
        fake_server.script_path("/x", server_error(503))
        response = await http_client.post("/x", {"a": 1})

        assert isinstance(response.app_error, ServerError)
        assert len(fake_server.calls) == 1

    @pytest.mark.asyncio
    async def test_post_retry_opt_in(self, http_client, fake_server):
        fake_server.script_path(
            "/x", rate_limited("0"), ScriptedResponse(body={"success": True, "passId": "P-1"})
        )
        response = await http_client.post("/x", {"a": 1}, retry=True)

        assert response.success is True
        assert len(fake_server.calls) == 2

    @pytest.mark.asyncio
    async def test_retry_exhaustion_reports_network_error(self, http_client, fake_server):
        fake_server.script_path("/x", *[connect_error() for _ in range(4)])
        response = await http_client.get("/x")

        assert isinstance(response.app_error, NetworkError)
        assert response.app_error.retry_count == 3
        assert len(fake_server.calls) == 4


class TestInterceptors:

    @pytest.mark.asyncio
    async def test_request_interceptor_and_removal(self, http_client, fake_server):
        def add_header(request):
            request.headers["X-Trace"] = "abc"
            return request

        interceptor_id = http_client.add_request_interceptor(add_header)
        seen = []
        http_client.add_request_interceptor(lambda r: seen.append(r.headers.get("X-Trace")))

        await http_client.get("/events/x")
        assert http_client.remove_interceptor("request", interceptor_id) is True
        assert http_client.remove_interceptor("request", interceptor_id) is False
        await http_client.get("/events/x")

        assert seen == ["abc", None]

    @pytest.mark.asyncio
    async def test_response_interceptor_sees_response(self, http_client):
        statuses = []

        async def record(response):
            statuses.append(response.status_code)

        http_client.add_response_interceptor(record)
        await http_client.get("/events/x")
        assert statuses == [200]

    def test_unknown_kind(self, http_client):
        with pytest.raises(ValueError):
            http_client.remove_interceptor("sideways", 1)


class TestServices:

    @pytest.mark.asyncio
    async def test_get_events(self, http_client, fake_server):
        response = await EventsApi(http_client).get_events(date_from="2026-10-01T00:00:00Z")

        assert response.success is True
        assert isinstance(response.data[0], ParkHubEvent)
        assert response.data[0].id == EVENT_ID

        call = fake_server.calls[0]
        assert call.path == f"/events/{LANDMARK}"
        assert call.params == {"landMarkId": LANDMARK, "dateFrom": "2026-10-01T00:00:00Z"}

    @pytest.mark.asyncio
    async def test_get_events_defaults_date_from(self, http_client, fake_server):
        await EventsApi(http_client).get_events()
        assert fake_server.calls[0].params["dateFrom"]

    @pytest.mark.asyncio
    async def test_get_passes_for_event(self, passes_api, fake_server, make_request):
        await passes_api.create_pass(make_request("BC000001"))
        response = await passes_api.get_passes_for_event(EVENT_ID)

        assert response.success is True
        assert [p.barcode for p in response.data] == ["BC000001"]
        assert fake_server.calls[-1].params == {"landMarkId": LANDMARK, "eventId": EVENT_ID}

    @pytest.mark.asyncio
    async def test_get_passes_blank_event(self, passes_api, fake_server):
        with pytest.raises(ValueError):
            await passes_api.get_passes_for_event("  ")
        assert fake_server.calls == []

    @pytest.mark.asyncio
    async def test_create_pass(self, passes_api, fake_server, make_request):
        success = await passes_api.create_pass(make_request("BC000001"))

        assert success.pass_id == "PASS-0001"
        assert success.barcode == "BC000001"
        call = fake_server.create_calls[0]
        assert call.path == PASSES_PATH
        assert call.body == {
            "eventId": EVENT_ID,
            "accountId": "ACC-1",
            "barcode": "BC000001",
            "customerName": "Customer BC000001",
            "spotType": "Regular",
            "lotId": "LOT-A",
        }

    @pytest.mark.asyncio
    async def test_create_pass_id_inside_data(self, passes_api, fake_server, make_request):
        fake_server.script_create(
            "BC000001",
            ScriptedResponse(body={"success": True, "data": {"passId": "P-9"}, "error": None}),
        )
        success = await passes_api.create_pass(make_request("BC000001"))
        assert success.pass_id == "P-9"

    @pytest.mark.asyncio
    async def test_create_pass_without_id(self, passes_api, fake_server, make_request):
        fake_server.script_create("BC000001", ScriptedResponse(body={"success": True}))
        with pytest.raises(UnknownError):
            await passes_api.create_pass(make_request("BC000001"))

    @pytest.mark.asyncio
    async def test_missing_field_is_rejected_locally(self, passes_api, fake_server, make_request):
        with pytest.raises(ValidationError) as exc_info:
            await passes_api.create_pass(make_request("BC000001", lot_id=None))

        assert exc_info.value.field == "lotId"
        assert exc_info.value.message == "Lot ID is required."
        assert fake_server.calls == []

    @pytest.mark.asyncio
    async def test_every_missing_field_gets_required_message(self, passes_api, fake_server, make_request):
        request = make_request("BC000001", event_id=None, customer_name="")

        with pytest.raises(ValidationError) as exc_info:
            await passes_api.create_pass(request)

        assert exc_info.value.field == "eventId"
        assert exc_info.value.field_errors == {
            "eventId": "Event ID is required.",
            "customerName": "Customer name is required.",
        }
        assert fake_server.calls == []
