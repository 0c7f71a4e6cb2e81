"""
Confirmation Protocol
=====================

Interface-agnostic reporting of approval decisions to the permission
service, plus the HTTP implementation used by default.
"""

from sampling_approval.protocols.confirmation import (
    DEFAULT_PRINCIPAL_TYPE,
    ConfirmationClient,
    ConfirmationResult,
    HttpConfirmationClient,
)

__all__ = [
    "DEFAULT_PRINCIPAL_TYPE",
    "ConfirmationClient",
    "ConfirmationResult",
    "HttpConfirmationClient",
]
