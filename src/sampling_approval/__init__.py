"""Approval decision coordination for extension sampling requests."""

from sampling_approval.approval import (
    ActionRequired,
    ApprovalCoordinator,
    ApprovalState,
    DecisionAction,
    DecisionRecord,
    DecisionStore,
    reconcile,
)
from sampling_approval.protocols import ConfirmationClient, ConfirmationResult, HttpConfirmationClient
from sampling_approval.session import ApprovalSession

__all__ = [
    "ActionRequired",
    "ApprovalCoordinator",
    "ApprovalSession",
    "ApprovalState",
    "ConfirmationClient",
    "ConfirmationResult",
    "DecisionAction",
    "DecisionRecord",
    "DecisionStore",
    "HttpConfirmationClient",
    "reconcile",
]
