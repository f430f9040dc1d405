"""
Service order state machine.

    RECEIVED  -> CLEANING, REPAIRING, READY, CANCELLED
    CLEANING  -> REPAIRING, READY, CANCELLED
    REPAIRING -> READY, CANCELLED
    READY     -> DELIVERED (only when PAID), CANCELLED
    DELIVERED, CANCELLED: terminal

READY and DELIVERED are reached only through mark_ready() and deliver();
set_status() handles the rest.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from apps.common.money import money_decimals, to_minor
from apps.ledger.models import ARType
from apps.ledger.services import has_charge, record_ar_transaction
from apps.repairs.models import PaymentStatus, ServiceOrder, ServiceOrderStatus

from .exceptions import (
    InvalidStatusTransitionError,
    OrderValidationError,
    PaymentIncompleteError,
    StatusRequiresDedicatedActionError,
)
from .order_access import actor_user, audit_order, ensure_open, lock_order, record_history
from .totals import recompute_payment_status, recompute_totals

logger = logging.getLogger(__name__)

S = ServiceOrderStatus

ALLOWED_TRANSITIONS = {
    S.RECEIVED: frozenset({S.CLEANING, S.REPAIRING, S.READY, S.CANCELLED}),
    S.CLEANING: frozenset({S.REPAIRING, S.READY, S.CANCELLED}),
    S.REPAIRING: frozenset({S.READY, S.CANCELLED}),
    S.READY: frozenset({S.DELIVERED, S.CANCELLED}),
    S.DELIVERED: frozenset(),
    S.CANCELLED: frozenset(),
}

SETTABLE_STATUSES = frozenset({S.RECEIVED, S.CLEANING, S.REPAIRING, S.CANCELLED})


def can_transition(from_status: str, to_status: str) -> bool:
    return to_status in ALLOWED_TRANSITIONS.get(from_status, frozenset())


def _ensure_transition(order: ServiceOrder, to_status: str) -> None:
    if not can_transition(order.status, to_status):
        raise InvalidStatusTransitionError(
            f"Cannot move service order {order.code} from {order.status} to {to_status}"
        )


@transaction.atomic
def set_status(
    *,
    order_id: UUID,
    status: str,
    actor: Optional[User] = None,
    note: Optional[str] = None
) -> ServiceOrder:
    """
    Move an order to RECEIVED, CLEANING, REPAIRING or CANCELLED.

    Raises:
        OrderValidationError: If status is not a known status
        StatusRequiresDedicatedActionError: If status is READY or DELIVERED
        ServiceOrderNotFoundError: If the order doesn't exist
        OrderClosedError: If the order is already DELIVERED or CANCELLED
        InvalidStatusTransitionError: If the state machine has no such edge
    """
    if status not in S.values:
        raise OrderValidationError(f"Unknown status: {status}")
    if status not in SETTABLE_STATUSES:
        action = "mark READY" if status == S.READY else "deliver"
        raise StatusRequiresDedicatedActionError(f"Use {action} to move an order to {status}")

    order = lock_order(order_id)
    ensure_open(order)
    _ensure_transition(order, status)

    previous = order.status
    order.status = status
    order.save(update_fields=['status', 'updated_at'])

    record_history(order, status, note=note, actor=actor)
    audit_order(actor, 'SERVICE_ORDER_STATUS_SET', order, {
        'from_status': previous,
        'status': status,
        'note': note,
    })

    logger.info("Service order %s: %s -> %s", order.code, previous, status)
    return order


@transaction.atomic
def mark_ready(*, order_id: UUID, actor: Optional[User] = None, discount=None) -> ServiceOrder:
    """
    Finalize pricing and move the order to READY.

    Calling it again while READY re-prices the order. The AR charge for the
    order total is created only the first time; the existence check runs
    under the order row lock.

    Args:
        order_id: UUID of the order
        actor: User performing the action
        discount: Optional new discount in major units, clamped to the subtotal

    Raises:
        ServiceOrderNotFoundError: If the order doesn't exist
        OrderClosedError: If the order is DELIVERED or CANCELLED
        InvalidStatusTransitionError: If READY is not reachable
    """
    order = lock_order(order_id)
    ensure_open(order)
    if order.status != S.READY:
        _ensure_transition(order, S.READY)

    recompute_totals(order, discount=discount)

    previous = order.status
    order.status = S.READY
    order.save(update_fields=['status', 'updated_at'])

    decimals = money_decimals()
    total_minor = to_minor(order.total, decimals)

    if not has_charge(order):
        record_ar_transaction(
            customer=order.customer,
            service_order=order,
            ar_type=ARType.CHARGE,
            amount_minor=total_minor,
            ref_type='ServiceOrder',
            ref_id=order.id,
            note='Service charge',
            created_by=actor_user(actor),
        )

    record_history(order, S.READY, note='Marked READY', actor=actor)
    audit_order(actor, 'SERVICE_ORDER_MARK_READY', order, {
        'discount_minor': to_minor(order.discount, decimals),
        'total_minor': total_minor,
    })

    recompute_payment_status(order)

    logger.info("Service order %s: %s -> READY (total %s)", order.code, previous, order.total)
    return order


@transaction.atomic
def deliver(*, order_id: UUID, actor: Optional[User] = None, note: Optional[str] = None) -> ServiceOrder:
    """
    Hand the shoes back to the customer.

    Payment status is re-derived first; anything other than PAID blocks
    delivery and leaves the order unchanged.

    Raises:
        ServiceOrderNotFoundError: If the order doesn't exist
        OrderClosedError: If the order is already DELIVERED or CANCELLED
        PaymentIncompleteError: If the order is not fully paid
        InvalidStatusTransitionError: If the order is not READY
    """
    order = lock_order(order_id)
    ensure_open(order)

    recompute_payment_status(order)
    if order.payment_status != PaymentStatus.PAID:
        logger.warning(
            "Delivery of %s refused: payment status %s", order.code, order.payment_status
        )
        raise PaymentIncompleteError("Cannot deliver: payment not complete")

    _ensure_transition(order, S.DELIVERED)

    note = note or 'Delivered'
    order.status = S.DELIVERED
    order.save(update_fields=['status', 'updated_at'])

    record_history(order, S.DELIVERED, note=note, actor=actor)
    audit_order(actor, 'SERVICE_ORDER_DELIVER', order, {'note': note})

    logger.info("Service order %s delivered", order.code)
    return order
