"""Core building blocks shared by the approval coordinator."""

from sampling_approval.core.event_bus import Event, EventBus, EventType
from sampling_approval.core.exceptions import (
    ConfigurationError,
    ConfirmationError,
    ErrorCode,
    SamplingApprovalError,
    UnknownActionTypeError,
    ValidationError,
)
from sampling_approval.core.structured_logger import TraceContext, configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "ConfirmationError",
    "ErrorCode",
    "Event",
    "EventBus",
    "EventType",
    "SamplingApprovalError",
    "TraceContext",
    "UnknownActionTypeError",
    "ValidationError",
    "configure_logging",
    "get_logger",
]
