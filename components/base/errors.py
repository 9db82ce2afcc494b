"""
Reconciliation error taxonomy.

Every error raised by a reconcile function derives from ReconcileError so the
scheduler adapter can route all of them through the same retry policy.
"""
from typing import Optional


class ReconcileError(Exception):
    """Base class for errors surfaced by a reconciliation."""


class MissingNamespace(ReconcileError):
    """The parent object carries no namespace, so nothing can be generated for it."""

    def __init__(self, obj_ref: str):
        self.obj_ref = obj_ref
        super().__init__(f"object {obj_ref} has no namespace")


class AddressResolutionFailure(ReconcileError):
    """A stable network address could not be derived for a role."""

    def __init__(self, role: str, reason: str = ""):
        self.role = role
        self.reason = reason
        message = f"failed to resolve addresses for role {role}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ApplyFailure(ReconcileError):
    """An owned upsert was rejected or could not be delivered."""

    def __init__(self, kind: str, name: Optional[str] = None):
        self.kind = kind
        self.name = name
        if name:
            super().__init__(f"failed to apply {kind} {name}")
        else:
            super().__init__(f"failed to apply {kind}")


class TransportError(Exception):
    """Raised by upsert transports; wrapped into ApplyFailure by the driver."""
