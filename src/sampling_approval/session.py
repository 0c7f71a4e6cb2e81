"""Session Lifecycle — owns the decision store and the in-flight confirmations of one session."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine, Mapping
from typing import Any

import pydantic

from sampling_approval.approval.coordinator import ApprovalCoordinator
from sampling_approval.approval.models import ActionRequired
from sampling_approval.approval.registry import CoordinatorRegistry
from sampling_approval.approval.store import DecisionStore
from sampling_approval.approval.trust import TrustSettingsCollaborator
from sampling_approval.config.settings import Settings, load_settings
from sampling_approval.core.event_bus import EventBus
from sampling_approval.core.exceptions import ValidationError
from sampling_approval.core.structured_logger import get_logger
from sampling_approval.protocols.confirmation import ConfirmationClient, HttpConfirmationClient

logger = get_logger("ApprovalSession")


class ApprovalSession:
    """
    One conversational session's approval state.

    The session creates the DecisionStore when it starts and hands it to
    every coordinator it binds; the store lives exactly as long as the
    session and is never cleared. Confirmation tasks spawned by those
    coordinators are tracked here so they are not garbage collected and so
    ``close()`` can let them finish. They are never cancelled.
    """

    def __init__(
        self,
        session_id: str,
        settings: Settings | None = None,
        *,
        client: ConfirmationClient | None = None,
        store: DecisionStore | None = None,
        event_bus: EventBus | None = None,
        trust_settings: TrustSettingsCollaborator | None = None,
    ) -> None:
        self.session_id = session_id
        self.settings = settings or load_settings()
        self.store = store or DecisionStore()
        self.event_bus = event_bus or EventBus()
        self.trust_settings = trust_settings
        self._owns_client = client is None
        self.client: ConfirmationClient = client or HttpConfirmationClient(self.settings.service)
        self.active_tasks: set[asyncio.Task[Any]] = set()
        self._closed = False

        logger.info("Approval session started", session_id=session_id)

    def bind(
        self,
        payload: ActionRequired | Mapping[str, Any],
        *,
        is_cancelled: bool = False,
        resolved_historically: bool = False,
    ) -> ApprovalCoordinator | None:
        """
        Bind a coordinator to an action-required payload.

        Returns None, without touching the store, for request variants no
        coordinator is registered for.

        Raises:
            ValidationError: if the payload is malformed
        """
        action = self._parse(payload)
        coordinator_cls = CoordinatorRegistry.find(action.action_type)
        if coordinator_cls is None:
            logger.debug(
                "No coordinator for action type",
                session_id=self.session_id,
                action_type=action.action_type,
            )
            return None

        return coordinator_cls(
            action,
            session_id=self.session_id,
            store=self.store,
            client=self.client,
            is_cancelled=is_cancelled,
            resolved_historically=resolved_historically,
            trust_settings=self.trust_settings,
            event_bus=self.event_bus,
            principal_type=self.settings.service.principal_type,
            spawn=self._spawn,
        )

    @staticmethod
    def _parse(payload: ActionRequired | Mapping[str, Any]) -> ActionRequired:
        if isinstance(payload, ActionRequired):
            return payload
        try:
            return ActionRequired.model_validate(payload)
        except pydantic.ValidationError as e:
            raise ValidationError(
                "Malformed action-required payload",
                details={"errors": e.errors(include_url=False)},
            ) from e

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        task = asyncio.create_task(coro)
        self.active_tasks.add(task)
        task.add_done_callback(self.active_tasks.discard)
        return task

    async def drain(self, timeout: float | None = None) -> bool:
        """Wait for in-flight confirmations. Returns False if some are still running."""
        if not self.active_tasks:
            return True
        _, pending = await asyncio.wait(set(self.active_tasks), timeout=timeout)
        if pending:
            logger.warning(
                "Confirmations still in flight",
                session_id=self.session_id,
                pending=len(pending),
            )
        return not pending

    async def close(self, timeout: float | None = None) -> None:
        """End the session: let confirmations finish, then release the HTTP client."""
        if self._closed:
            return
        self._closed = True
        drained = await self.drain(timeout)
        if self._owns_client and drained:
            await self.client.aclose()
        logger.info(
            "Approval session closed",
            session_id=self.session_id,
            decisions=len(self.store),
        )

    async def __aenter__(self) -> ApprovalSession:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
