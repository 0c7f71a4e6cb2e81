"""Extension-level trust settings, owned by the host application."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class TrustSettingsCollaborator(Protocol):
    """
    Opens the host's trust-settings dialog for an extension.

    Changing an extension's standing policy never touches a decision that
    has already been recorded for a specific request.
    """

    def open(self, extension_name: str) -> None:
        ...
