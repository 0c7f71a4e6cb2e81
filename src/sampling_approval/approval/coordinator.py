"""Approval Coordinator — per-request decision state for sampling approvals."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from enum import Enum
from typing import Any

from sampling_approval.approval.models import (
    SAMPLING_APPROVAL,
    ActionRequired,
    ApprovalRequest,
    DecisionAction,
    DecisionRecord,
    LocalDecision,
)
from sampling_approval.approval.reconcile import reconcile
from sampling_approval.approval.registry import CoordinatorRegistry
from sampling_approval.approval.store import DecisionStore
from sampling_approval.approval.trust import TrustSettingsCollaborator
from sampling_approval.approval.views import (
    ApprovalView,
    CancelledView,
    DecidedView,
    PendingView,
    decided_status_text,
    format_messages,
)
from sampling_approval.core.event_bus import EventBus, EventType
from sampling_approval.core.exceptions import ValidationError
from sampling_approval.core.structured_logger import get_trace_id
from sampling_approval.protocols.confirmation import (
    DEFAULT_PRINCIPAL_TYPE,
    ConfirmationClient,
    ConfirmationResult,
)

logger = logging.getLogger(__name__)

TaskSpawner = Callable[[Coroutine[Any, Any, Any]], "asyncio.Task[Any]"]


class ApprovalState(Enum):
    CANCELLED = "cancelled"
    PENDING = "pending"
    DECIDED = "decided"


@CoordinatorRegistry.register(SAMPLING_APPROVAL)
class ApprovalCoordinator:
    """
    Owns the decision for exactly one sampling request id.

    A decision is committed in two phases that are never collapsed:

    1. ``approve()``/``deny()`` synchronously switch the local state to
       decided and write the record into the shared DecisionStore.
    2. The permission service is notified from a background task. Its
       outcome is logged and published, but never rolls back phase 1.

    A fresh coordinator for an id that already has a record (a remount)
    starts decided from that record. Without a record, a request the server
    reports as resolved materializes a historical confirmation instead of
    prompting again. A cancelled request short-circuits everything and
    never touches the store.

    ``approve()`` and ``deny()`` must be called from a running event loop
    when the default ``asyncio.create_task`` spawner is used; otherwise the
    record is committed and ``RuntimeError`` is raised without submitting.
    """

    action_type = SAMPLING_APPROVAL

    def __init__(
        self,
        action: ActionRequired,
        *,
        session_id: str,
        store: DecisionStore,
        client: ConfirmationClient,
        is_cancelled: bool = False,
        resolved_historically: bool = False,
        trust_settings: TrustSettingsCollaborator | None = None,
        event_bus: EventBus | None = None,
        principal_type: str = DEFAULT_PRINCIPAL_TYPE,
        spawn: TaskSpawner | None = None,
    ) -> None:
        if action.action_type != self.action_type:
            raise ValidationError(
                f"{type(self).__name__} cannot handle {action.action_type!r} requests",
                details={"request_id": action.id, "expected": self.action_type},
            )
        self.request = ApprovalRequest.from_action(action)
        self.session_id = session_id
        self.principal_type = principal_type
        self._store = store
        self._client = client
        self._trust_settings = trust_settings
        self._event_bus = event_bus
        self._spawn = spawn or asyncio.create_task
        self._is_cancelled = is_cancelled
        self._resolved_historically = resolved_historically
        self._local = LocalDecision.PENDING
        self._detached = False
        self._sync()

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def request_id(self) -> str:
        return self.request.id

    @property
    def local(self) -> LocalDecision:
        return self._local

    @property
    def state(self) -> ApprovalState:
        if self._is_cancelled:
            return ApprovalState.CANCELLED
        if self._local.decided:
            return ApprovalState.DECIDED
        return ApprovalState.PENDING

    @property
    def record(self) -> DecisionRecord | None:
        return self._local.to_record() if self._local.decided else None

    def view(self) -> ApprovalView:
        state = self.state
        if state is ApprovalState.CANCELLED:
            return CancelledView()
        if state is ApprovalState.PENDING:
            return PendingView(
                extension_name=self.request.extension_name,
                preview=format_messages(self.request.messages),
            )
        return DecidedView(
            action=self._local.action,
            label=self._local.display_label,
            status_text=decided_status_text(
                self.request.extension_name,
                self._local.display_label,
                self._resolved_historically,
            ),
        )

    def observe(
        self,
        *,
        resolved_historically: bool | None = None,
        is_cancelled: bool | None = None,
    ) -> ApprovalState:
        """Feed changed upstream flags back in and re-derive the state."""
        if is_cancelled is not None:
            self._is_cancelled = is_cancelled
        if resolved_historically is not None:
            self._resolved_historically = resolved_historically
        self._sync()
        return self.state

    def _sync(self) -> None:
        if self._is_cancelled:
            return

        stored = self._store.get(self.request.id)
        if stored is not None:
            self._local = LocalDecision.from_record(stored)
            return

        reconciled = reconcile(self._local, self._resolved_historically)
        if reconciled is self._local:
            return
        self._local = reconciled
        self._store.set(self.request.id, reconciled.to_record())
        logger.info(
            "Sampling approval %s reconciled from history",
            self.request.id,
            extra={"session_id": self.session_id, "action": reconciled.action.value},
        )

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def approve(self) -> asyncio.Task[ConfirmationResult | None] | None:
        return self._decide(DecisionAction.APPROVED)

    def deny(self) -> asyncio.Task[ConfirmationResult | None] | None:
        return self._decide(DecisionAction.DENIED)

    def _decide(self, action: DecisionAction) -> asyncio.Task[ConfirmationResult | None] | None:
        # Another instance bound to the same id may have decided already.
        self._sync()
        state = self.state
        if self._detached or state is not ApprovalState.PENDING:
            logger.warning(
                "Ignoring %s for sampling approval %s",
                action.value,
                self.request.id,
                extra={"state": state.value, "detached": self._detached},
            )
            return None

        record = DecisionRecord.for_action(action)
        self._local = LocalDecision.from_record(record)
        self._store.set(self.request.id, record)
        logger.info(
            "Sampling approval %s %s",
            self.request.id,
            record.display_label,
            extra={"session_id": self.session_id, "extension": self.request.extension_name},
        )
        confirmation = self._confirm(record)
        try:
            return self._spawn(confirmation)
        except RuntimeError:
            # No running event loop; the local decision stays committed.
            confirmation.close()
            raise

    async def _confirm(self, record: DecisionRecord) -> ConfirmationResult | None:
        wire_action = record.action.wire_action
        data = {"request_id": self.request.id, "action": wire_action}
        await self._publish(EventType.DECISION_RECORDED, data)

        try:
            result = await self._client.submit(
                self.session_id,
                self.request.id,
                wire_action,
                principal_type=self.principal_type,
            )
        except Exception as e:
            logger.error("Error confirming sampling approval %s: %s", self.request.id, e, exc_info=True)
            await self._publish(EventType.CONFIRMATION_FAILED, {**data, "error": str(e)})
            return None

        if result.error:
            logger.error("Failed to confirm sampling approval %s: %s", self.request.id, result.error)
            await self._publish(EventType.CONFIRMATION_FAILED, {**data, "error": result.error})
        else:
            await self._publish(EventType.CONFIRMATION_SENT, data)
        return result

    async def _publish(self, event_type: EventType, data: dict[str, Any]) -> None:
        if self._event_bus is None:
            return
        await self._event_bus.publish(event_type, self.session_id, data, get_trace_id())

    def change_trust(self) -> bool:
        """Open the extension's trust settings; only offered once decided."""
        if self.state is not ApprovalState.DECIDED or self._trust_settings is None:
            return False
        self._trust_settings.open(self.request.extension_name)
        return True

    def detach(self) -> None:
        """
        Release this instance when its widget goes away.

        An in-flight confirmation keeps running; the decision already lives
        in the store, so the next coordinator for this id picks it up.
        """
        self._detached = True
