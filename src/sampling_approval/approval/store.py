"""Session-scoped decision store shared by every coordinator in a session."""

import logging

from sampling_approval.approval.models import DecisionRecord

logger = logging.getLogger(__name__)


class DecisionStore:
    """
    Keyed collection of decision records, one per request id.

    Lifecycle: created when an ApprovalSession starts, read and written by
    the coordinators that session binds, and never cleared. Records are
    never deleted; request ids are bounded by the length of the session.

    All access happens on the event loop thread, so there is no locking.
    ``set`` is last-write-wins and tolerates redundant identical writes.
    """

    def __init__(self) -> None:
        self._records: dict[str, DecisionRecord] = {}

    def get(self, request_id: str) -> DecisionRecord | None:
        return self._records.get(request_id)

    def set(self, request_id: str, record: DecisionRecord) -> None:
        previous = self._records.get(request_id)
        self._records[request_id] = record
        if previous is None:
            logger.debug("Decision stored for %s", request_id, extra={"action": record.action.value})
        elif previous != record:
            logger.info(
                "Decision for %s replaced",
                request_id,
                extra={"previous": previous.action.value, "action": record.action.value},
            )

    def __contains__(self, request_id: object) -> bool:
        return request_id in self._records

    def __len__(self) -> int:
        return len(self._records)
