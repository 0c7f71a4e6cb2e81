"""Historical reconciliation of a request's local decision state."""

from sampling_approval.approval.models import DecisionAction, LocalDecision

HISTORICAL_CONFIRMATION = LocalDecision(
    decided=True,
    action=DecisionAction.CONFIRMED_HISTORICAL,
    display_label=DecisionAction.CONFIRMED_HISTORICAL.display_label,
)


def reconcile(local: LocalDecision, resolved_historically: bool) -> LocalDecision:
    """
    Fold the server's "already resolved" flag into the local state.

    A live local decision always wins: the historical confirmation is only
    materialized while nothing has been decided and the status is unknown.
    Returns ``local`` itself when nothing changes, so callers can use an
    identity check to decide whether to persist.
    """
    if resolved_historically and not local.decided and local.status_unknown:
        return HISTORICAL_CONFIRMATION
    return local
