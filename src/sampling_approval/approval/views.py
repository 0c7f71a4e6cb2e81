"""
Renderable outputs handed to the presentation layer.

The coordinator produces exactly one of these per observation; markup,
icons and colours are left to whatever renders them.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Union

from sampling_approval.approval.models import DecisionAction

CANCELLED_MESSAGE = "Sampling approval is cancelled."
APPROVAL_PROMPT = "Allow this request?"
HISTORICAL_STATUS = "Sampling approval is not available"
NO_MESSAGE_CONTENT = "No message content"


@dataclass(frozen=True)
class CancelledView:
    message: str = CANCELLED_MESSAGE


@dataclass(frozen=True)
class PendingView:
    extension_name: str
    preview: str
    prompt: str = APPROVAL_PROMPT
    actions: tuple[str, ...] = ("approve", "deny")


@dataclass(frozen=True)
class DecidedView:
    action: DecisionAction
    label: str
    status_text: str
    change_label: str = "Change"


ApprovalView = Union[CancelledView, PendingView, DecidedView]


def snake_to_title_case(value: str) -> str:
    """developer_tools -> Developer Tools"""
    return " ".join(word[:1].upper() + word[1:].lower() for word in value.split("_") if word)


def format_messages(messages: Iterable[Any] | None) -> str:
    """Flatten message bodies into a single preview line."""
    parts = []
    for msg in messages or ():
        if not isinstance(msg, dict):
            continue
        content = msg.get("content") or msg.get("text")
        if not content:
            continue
        parts.append(content if isinstance(content, str) else json.dumps(content, separators=(",", ":")))
    if not parts:
        return NO_MESSAGE_CONTENT
    return " ".join(parts)


def decided_status_text(extension_name: str, label: str, resolved_historically: bool) -> str:
    # Historical items never offered a live choice in this session.
    if resolved_historically:
        return HISTORICAL_STATUS
    return f"{snake_to_title_case(extension_name)} sampling {label}"
