"""
Approval Domain Types
=====================

Inbound payloads, the request they describe, and the decision records the
coordinator keeps for each request id.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

SAMPLING_APPROVAL = "samplingApproval"

ALLOW_ONCE = "allow_once"
DENY = "deny"


class DecisionAction(str, Enum):
    """Terminal outcome recorded for a request id"""

    APPROVED = "approved"
    DENIED = "denied"
    CONFIRMED_HISTORICAL = "confirmedHistorical"

    @property
    def wire_action(self) -> str | None:
        """Action string sent to the permission service; None is never submitted"""
        return {
            DecisionAction.APPROVED: ALLOW_ONCE,
            DecisionAction.DENIED: DENY,
        }.get(self)

    @property
    def display_label(self) -> str:
        return {
            DecisionAction.APPROVED: "approved",
            DecisionAction.DENIED: "denied",
            DecisionAction.CONFIRMED_HISTORICAL: "confirmed",
        }[self]

    def __str__(self) -> str:
        return self.value


class ActionRequired(BaseModel):
    """Action-required payload as it arrives from the conversation stream."""

    action_type: str = Field(..., alias="actionType")
    id: str
    extension_name: str = Field("", alias="extensionName")
    messages: list[Any] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @field_validator("messages", mode="before")
    @classmethod
    def coerce_messages(cls, v: Any) -> list[Any]:
        # Anything that is not a list renders as an empty preview.
        if isinstance(v, (list, tuple)):
            return list(v)
        return []


@dataclass(frozen=True)
class ApprovalRequest:
    id: str
    extension_name: str
    messages: tuple[Any, ...] = ()

    @classmethod
    def from_action(cls, action: ActionRequired) -> ApprovalRequest:
        return cls(
            id=action.id,
            extension_name=action.extension_name,
            messages=tuple(action.messages),
        )


@dataclass(frozen=True)
class DecisionRecord:
    """What the DecisionStore holds for one request id."""

    decided: bool
    action: DecisionAction
    display_label: str

    @classmethod
    def for_action(cls, action: DecisionAction) -> DecisionRecord:
        return cls(decided=True, action=action, display_label=action.display_label)

    def to_dict(self) -> dict[str, Any]:
        return {
            "decided": self.decided,
            "action": self.action.value,
            "display_label": self.display_label,
        }


@dataclass(frozen=True)
class LocalDecision:
    """
    The coordinator's local view of a request.

    ``action`` is None while the status is still unknown, which is the
    only state a historical signal may overwrite.
    """

    decided: bool = False
    action: DecisionAction | None = None
    display_label: str = ""

    PENDING: ClassVar[LocalDecision]

    @property
    def status_unknown(self) -> bool:
        return self.action is None

    @classmethod
    def from_record(cls, record: DecisionRecord) -> LocalDecision:
        return cls(decided=record.decided, action=record.action, display_label=record.display_label)

    def to_record(self) -> DecisionRecord | None:
        if self.action is None:
            return None
        return DecisionRecord(decided=self.decided, action=self.action, display_label=self.display_label)


LocalDecision.PENDING = LocalDecision()
