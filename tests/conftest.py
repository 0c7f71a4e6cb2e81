"""
Pytest configuration for sampling approval tests — shared fixtures for
stores, payloads and a stubbed permission service client.
"""

import os
from unittest.mock import AsyncMock, Mock

import pytest

from sampling_approval.approval.models import SAMPLING_APPROVAL, ActionRequired
from sampling_approval.approval.store import DecisionStore
from sampling_approval.config.settings import Settings
from sampling_approval.core.event_bus import EventBus
from sampling_approval.protocols.confirmation import ConfirmationResult


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep developer SAMPLING_APPROVAL_* variables out of the tests."""
    for key in list(os.environ):
        if key.startswith("SAMPLING_APPROVAL_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def store():
    return DecisionStore()


@pytest.fixture
def event_bus():
    return EventBus(enable_history=True)


@pytest.fixture
def client():
    mock = Mock()
    mock.submit = AsyncMock(return_value=ConfirmationResult())
    return mock


@pytest.fixture
def trust_settings():
    return Mock()


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def make_action():
    def _make(
        request_id: str = "req-1",
        extension_name: str = "developer_tools",
        messages=None,
        action_type: str = SAMPLING_APPROVAL,
    ) -> ActionRequired:
        return ActionRequired(
            actionType=action_type,
            id=request_id,
            extensionName=extension_name,
            messages=[{"role": "user", "content": "summarize this file"}] if messages is None else messages,
        )

    return _make
