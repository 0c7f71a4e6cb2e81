"""Tests for sampling_approval.core.exceptions"""

from sampling_approval.core.exceptions import (
    ConfigurationError,
    ConfirmationError,
    ErrorCode,
    SamplingApprovalError,
    UnknownActionTypeError,
    ValidationError,
)


class TestExceptions:
    def test_base_defaults(self):
        err = SamplingApprovalError("boom")
        assert err.error_code == ErrorCode.INTERNAL_ERROR
        assert err.details == {}
        assert str(err) == "boom"

    def test_to_dict(self):
        err = ConfirmationError("req-1", "refused", details={"url": "http://x"})
        assert err.to_dict() == {
            "error_type": "ConfirmationError",
            "error_code": 3001,
            "message": "refused",
            "details": {"url": "http://x"},
        }
        assert err.request_id == "req-1"

    def test_user_message_uses_code(self):
        assert ConfirmationError("r", "socket closed").user_message() == (
            "Error 3001: Permission service unavailable"
        )
        assert ValidationError("bad").user_message() == "Error 1001: Invalid approval request"

    def test_unknown_action_type(self):
        err = UnknownActionTypeError("elicitation")
        assert err.action_type == "elicitation"
        assert "elicitation" in err.message

    def test_hierarchy(self):
        for err in (
            ValidationError("x"),
            ConfigurationError("x"),
            ConfirmationError("r", "x"),
            UnknownActionTypeError("t"),
        ):
            assert isinstance(err, SamplingApprovalError)
