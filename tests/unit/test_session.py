"""Tests for ApprovalSession — binding, store ownership and shutdown."""

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest

from sampling_approval.approval.coordinator import ApprovalCoordinator, ApprovalState
from sampling_approval.approval.models import DecisionAction
from sampling_approval.approval.views import NO_MESSAGE_CONTENT, PendingView
from sampling_approval.config.settings import Settings
from sampling_approval.core.exceptions import ValidationError
from sampling_approval.protocols.confirmation import ConfirmationResult, HttpConfirmationClient
from sampling_approval.session import ApprovalSession

SAMPLING_PAYLOAD = {
    "actionType": "samplingApproval",
    "id": "req-7",
    "extensionName": "memory",
    "messages": [{"content": "remember this"}],
}


@pytest.fixture
def session(client, settings, trust_settings):
    return ApprovalSession("session-1", settings, client=client, trust_settings=trust_settings)


class TestBind:
    def test_binds_sampling_payload(self, session):
        coordinator = session.bind(SAMPLING_PAYLOAD)
        assert isinstance(coordinator, ApprovalCoordinator)
        assert coordinator.request_id == "req-7"
        assert coordinator.session_id == "session-1"
        assert coordinator.state is ApprovalState.PENDING

    def test_other_variant_has_no_side_effects(self, session):
        payload = {**SAMPLING_PAYLOAD, "actionType": "toolConfirmation"}
        assert session.bind(payload, resolved_historically=True) is None
        assert len(session.store) == 0

    def test_malformed_payload(self, session):
        with pytest.raises(ValidationError):
            session.bind({"extensionName": "memory"})

    @pytest.mark.parametrize(
        "messages, preview",
        [
            (None, NO_MESSAGE_CONTENT),
            ("not a list", NO_MESSAGE_CONTENT),
            (["plain string"], NO_MESSAGE_CONTENT),
            ([{"content": "ok"}, 42, None], "ok"),
        ],
    )
    def test_odd_messages_fall_back_to_preview(self, session, messages, preview):
        coordinator = session.bind({**SAMPLING_PAYLOAD, "messages": messages})
        assert coordinator.state is ApprovalState.PENDING
        view = coordinator.view()
        assert isinstance(view, PendingView)
        assert view.preview == preview

    def test_missing_messages_still_shows_stored_decision(self, session):
        payload = {k: v for k, v in SAMPLING_PAYLOAD.items() if k != "messages"}
        session.bind(payload, resolved_historically=True)
        rebound = session.bind({**payload, "messages": None})
        assert rebound.state is ApprovalState.DECIDED

    def test_snake_case_payload(self, session):
        payload = {"action_type": "samplingApproval", "id": "req-8", "extension_name": "memory"}
        assert session.bind(payload).request.extension_name == "memory"

    def test_historical_bind_persists_in_session_store(self, session):
        session.bind(SAMPLING_PAYLOAD, resolved_historically=True)
        assert session.store.get("req-7").action is DecisionAction.CONFIRMED_HISTORICAL

    @pytest.mark.asyncio
    async def test_decision_survives_rebind(self, session, client):
        await session.bind(SAMPLING_PAYLOAD).approve()
        rebound = session.bind(SAMPLING_PAYLOAD)
        assert rebound.state is ApprovalState.DECIDED
        assert rebound.record.action is DecisionAction.APPROVED
        assert client.submit.await_count == 1

    def test_sessions_do_not_share_decisions(self, client, settings):
        first = ApprovalSession("a", settings, client=client)
        second = ApprovalSession("b", settings, client=client)
        first.bind(SAMPLING_PAYLOAD, resolved_historically=True)
        assert second.bind(SAMPLING_PAYLOAD).state is ApprovalState.PENDING

    @pytest.mark.asyncio
    async def test_principal_type_from_settings(self, client):
        settings = Settings(service={"principal_type": "Tool"})
        session = ApprovalSession("s", settings, client=client)
        await session.bind(SAMPLING_PAYLOAD).deny()
        assert client.submit.await_args.kwargs["principal_type"] == "Tool"


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_tracks_inflight_tasks(self, session, client):
        gate = asyncio.Event()

        async def slow_submit(*args, **kwargs):
            await gate.wait()
            return ConfirmationResult()

        client.submit = AsyncMock(side_effect=slow_submit)
        task = session.bind(SAMPLING_PAYLOAD).approve()
        assert task in session.active_tasks

        assert await session.drain(timeout=0.01) is False
        assert not task.cancelled()

        gate.set()
        assert await session.drain() is True
        assert session.active_tasks == set()

    @pytest.mark.asyncio
    async def test_close_releases_owned_client(self, settings):
        session = ApprovalSession("s", settings)
        assert isinstance(session.client, HttpConfirmationClient)
        await session.close()
        assert session.client.closed

    @pytest.mark.asyncio
    async def test_close_waits_for_confirmation(self, settings):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200)

        client = HttpConfirmationClient(settings.service, transport=httpx.MockTransport(handler))
        async with ApprovalSession("s", settings, client=client) as session:
            session.bind(SAMPLING_PAYLOAD).approve()
        assert len(calls) == 1
        # Injected clients belong to the caller
        assert not client.closed
        await client.aclose()
