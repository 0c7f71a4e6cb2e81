"""Tests for sampling_approval.approval.reconcile"""

import pytest

from sampling_approval.approval.models import DecisionAction, DecisionRecord, LocalDecision
from sampling_approval.approval.reconcile import reconcile


class TestReconcile:
    def test_historical_flag_materializes_confirmation(self):
        result = reconcile(LocalDecision.PENDING, True)
        assert result.decided is True
        assert result.action is DecisionAction.CONFIRMED_HISTORICAL
        assert result.display_label == "confirmed"

    def test_no_flag_is_noop(self):
        local = LocalDecision.PENDING
        assert reconcile(local, False) is local

    @pytest.mark.parametrize("action", [DecisionAction.APPROVED, DecisionAction.DENIED])
    def test_live_decision_wins(self, action):
        local = LocalDecision.from_record(DecisionRecord.for_action(action))
        assert reconcile(local, True) is local

    def test_known_status_is_not_overwritten(self):
        local = LocalDecision(decided=False, action=DecisionAction.DENIED, display_label="denied")
        assert reconcile(local, True) is local

    def test_already_confirmed_is_stable(self):
        once = reconcile(LocalDecision.PENDING, True)
        assert reconcile(once, True) is once

    def test_result_converts_to_record(self):
        record = reconcile(LocalDecision.PENDING, True).to_record()
        assert record == DecisionRecord(
            decided=True,
            action=DecisionAction.CONFIRMED_HISTORICAL,
            display_label="confirmed",
        )

    def test_pending_has_no_record(self):
        assert LocalDecision.PENDING.to_record() is None
