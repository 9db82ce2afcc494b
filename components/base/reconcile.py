"""
Convergence Driver

Applies a desired resource set in order through an owned-upsert transport and
decides what the scheduler should do next.
"""
import logging
from typing import Any, Dict, List, Protocol, Sequence

from components.base.component_types import ManagedResource, NextAction
from components.base.constants import REQUEUE_AFTER_SECONDS
from components.base.errors import ApplyFailure, ReconcileError, TransportError

logger = logging.getLogger(__name__)


class ApplyTransport(Protocol):
    def apply(self, resource: ManagedResource, field_manager: str) -> Dict[str, Any]:
        ...


def apply_owned_resources(
    resources: Sequence[ManagedResource],
    transport: ApplyTransport,
    field_manager: str,
) -> List[Dict[str, Any]]:
    """
    Apply resources one at a time, in the given order.

    Stops at the first failure. Resources applied before the failure are left
    in place; the next reconciliation applies the whole sequence again.

    Args:
        resources: Desired resources in application order
        transport: Owned upsert implementation
        field_manager: Originator identifier for the upsert

    Returns:
        The applied objects, in order

    Raises:
        ApplyFailure: for the first resource the transport rejects
    """
    applied = []
    for resource in resources:
        try:
            applied.append(transport.apply(resource, field_manager))
        except TransportError as e:
            raise ApplyFailure(resource.kind, resource.name) from e
    return applied


def error_policy(error: ReconcileError, requeue_after: float = REQUEUE_AFTER_SECONDS) -> NextAction:
    """Every failure is retried after the same fixed delay."""
    logger.warning("reconciliation failed, retrying in %ss: %s", requeue_after, error)
    return NextAction(requeue_after=requeue_after)
