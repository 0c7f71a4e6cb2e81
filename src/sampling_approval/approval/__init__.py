"""
Sampling Approval
=================

Per-request approval coordination for extension sampling requests:

1. A session binds an ApprovalCoordinator to each sampling request id
2. The coordinator derives its state from the shared DecisionStore, or
   from the server's "already resolved" flag when nothing is stored
3. A user decision is committed locally, then reported to the permission
   service in the background
"""

from sampling_approval.approval.coordinator import ApprovalCoordinator, ApprovalState
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
    format_messages,
    snake_to_title_case,
)

__all__ = [
    'SAMPLING_APPROVAL',
    'ActionRequired',
    'ApprovalCoordinator',
    'ApprovalRequest',
    'ApprovalState',
    'ApprovalView',
    'CancelledView',
    'CoordinatorRegistry',
    'DecidedView',
    'DecisionAction',
    'DecisionRecord',
    'DecisionStore',
    'LocalDecision',
    'PendingView',
    'TrustSettingsCollaborator',
    'format_messages',
    'reconcile',
    'snake_to_title_case',
]
