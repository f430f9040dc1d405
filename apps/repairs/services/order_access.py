"""
Helpers shared by the order service modules: row locking, the terminal
state guard, status history and audit entries for an order.
"""

from typing import Optional
from uuid import UUID

from apps.accounts.models import User
from apps.ledger.services import write_audit
from apps.repairs.models import ServiceOrder, ServiceStatusHistory

from .exceptions import OrderClosedError, ServiceOrderNotFoundError

AUDIT_ENTITY = 'ServiceOrder'


def actor_user(actor) -> Optional[User]:
    """Return ``actor`` if it is a real user, None for anonymous/system calls."""
    if actor is None or not getattr(actor, 'is_authenticated', False):
        return None
    return actor


def lock_order(order_id: UUID) -> ServiceOrder:
    """
    Fetch an order and lock its row until the surrounding transaction ends.

    Must be called inside ``transaction.atomic``.

    Raises:
        ServiceOrderNotFoundError: If the order doesn't exist or is soft-deleted
    """
    try:
        return ServiceOrder.objects.select_for_update().get(id=order_id)
    except ServiceOrder.DoesNotExist:
        raise ServiceOrderNotFoundError(f"Service order {order_id} not found")


def ensure_open(order: ServiceOrder) -> None:
    """
    Raises:
        OrderClosedError: If the order is DELIVERED or CANCELLED
    """
    if order.is_terminal:
        raise OrderClosedError(
            f"Service order {order.code} is {order.status} and can no longer be changed"
        )


def record_history(order: ServiceOrder, status: str, note=None, actor=None) -> ServiceStatusHistory:
    """Append a status history row for ``order``."""
    return ServiceStatusHistory.objects.create(
        service_order=order,
        status=status,
        note=note,
        changed_by=actor_user(actor),
    )


def audit_order(actor, action: str, order: ServiceOrder, meta: Optional[dict] = None):
    return write_audit(actor_user(actor), action, AUDIT_ENTITY, order.id, meta or {})
