"""
CoordinatorRegistry — dispatch on the action-required discriminant.

Coordinators register themselves for the one request variant they own:

    @CoordinatorRegistry.register("samplingApproval")
    class ApprovalCoordinator:
        ...

Variants nobody registered resolve to nothing, so a session can hand every
action-required payload to the registry and only act on the ones it owns.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from sampling_approval.core.exceptions import UnknownActionTypeError

logger = logging.getLogger(__name__)


class CoordinatorRegistry:
    _registry: dict[str, type[Any]] = {}

    @classmethod
    def register(cls, action_type: str) -> Callable[[type[Any]], type[Any]]:
        """Decorator: register *coordinator_cls* under *action_type*."""

        def decorator(coordinator_cls: type[Any]) -> type[Any]:
            cls._registry[action_type] = coordinator_cls
            logger.debug("Registered coordinator %r → %s", action_type, coordinator_cls.__qualname__)
            return coordinator_cls

        return decorator

    @classmethod
    def find(cls, action_type: str) -> type[Any] | None:
        """Return the coordinator class for *action_type*, or None."""
        return cls._registry.get(action_type)

    @classmethod
    def get(cls, action_type: str) -> type[Any]:
        """Return the coordinator class registered under *action_type*.

        Raises:
            UnknownActionTypeError: if no coordinator is registered for it.
        """
        try:
            return cls._registry[action_type]
        except KeyError:
            available = ", ".join(sorted(cls._registry)) or "<none>"
            raise UnknownActionTypeError(action_type, details={"available": available}) from None

    @classmethod
    def registered_types(cls) -> list[str]:
        return sorted(cls._registry)
