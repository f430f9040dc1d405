"""
Payment and refund management.

The payment ledger is append-only: a refund is a new negative payment,
the refunded payment is never touched. Every entry is mirrored in the AR
journal. Payments are accepted in every order status.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from apps.common.money import fits_money_column, minor_to_decimal, money_decimals, to_minor
from apps.ledger.models import ARType
from apps.ledger.services import record_ar_transaction
from apps.repairs.models import Payment, PaymentMethod, ServiceOrder

from .exceptions import (
    PaymentNotFoundError,
    PaymentValidationError,
    RefundNotAllowedError,
)
from .order_access import actor_user, audit_order, lock_order
from .totals import recompute_payment_status

logger = logging.getLogger(__name__)


def validate_method(method: str) -> str:
    if method not in PaymentMethod.values:
        raise PaymentValidationError(
            f"Unknown payment method: {method}. Use one of {', '.join(PaymentMethod.values)}"
        )
    return method


def create_payment(
    order: ServiceOrder,
    *,
    amount_minor: int,
    method: str,
    actor: Optional[User] = None,
    note: Optional[str] = None,
    paid_at: Optional[datetime] = None
) -> Payment:
    """Insert a positive payment and its AR PAYMENT entry. No recompute."""
    fields = {}
    if paid_at is not None:
        fields['paid_at'] = paid_at

    payment = Payment.objects.create(
        service_order=order,
        amount=minor_to_decimal(amount_minor, money_decimals()),
        method=method,
        note=note,
        received_by=actor_user(actor),
        **fields,
    )
    record_ar_transaction(
        customer=order.customer,
        service_order=order,
        ar_type=ARType.PAYMENT,
        amount_minor=amount_minor,
        ref_type='Payment',
        ref_id=payment.id,
        note=note or '',
        created_by=actor_user(actor),
    )
    return payment


@transaction.atomic
def add_payment(
    *,
    order_id: UUID,
    amount,
    method: str = PaymentMethod.CASH,
    actor: Optional[User] = None,
    note: Optional[str] = None,
    paid_at: Optional[datetime] = None
) -> Payment:
    """
    Record a customer payment.

    Overpayment is accepted; the order simply reads PAID with a negative
    balance.

    Returns:
        The created Payment

    Raises:
        ServiceOrderNotFoundError: If the order doesn't exist
        PaymentValidationError: If amount is not positive or method unknown
    """
    order = lock_order(order_id)
    validate_method(method)

    decimals = money_decimals()
    amount_minor = to_minor(amount, decimals)
    if amount_minor <= 0:
        raise PaymentValidationError("Payment amount must be greater than 0")
    if not fits_money_column(amount_minor, decimals):
        raise PaymentValidationError("Payment amount exceeds the largest storable amount")

    payment = create_payment(
        order,
        amount_minor=amount_minor,
        method=method,
        actor=actor,
        note=note,
        paid_at=paid_at,
    )
    audit_order(actor, 'SERVICE_ORDER_PAYMENT_ADD', order, {
        'payment_id': str(payment.id),
        'amount_minor': amount_minor,
        'method': method,
        'note': note,
    })

    recompute_payment_status(order)

    logger.info(
        "Payment %s %s on %s -> %s", payment.amount, method, order.code, order.payment_status
    )
    return payment


@transaction.atomic
def refund_payment(
    *,
    order_id: UUID,
    payment_id: UUID,
    reason: str,
    actor: Optional[User] = None,
    amount=None
) -> Payment:
    """
    Refund all or part of a payment.

    Creates a negative payment with the original method and a
    ``REFUND: <reason>`` note. The link to the original payment is kept in
    the audit entry.

    Args:
        order_id: UUID of the order
        payment_id: UUID of the payment being refunded
        reason: Mandatory free-text reason
        actor: User performing the refund
        amount: Optional amount in major units, defaults to the full payment

    Returns:
        The refund Payment (negative amount)

    Raises:
        ServiceOrderNotFoundError: If the order doesn't exist
        PaymentNotFoundError: If the payment is not on this order
        PaymentValidationError: Missing reason or non-positive amount
        RefundNotAllowedError: Refunding a refund, or more than the original
    """
    reason = (reason or '').strip()
    if not reason:
        raise PaymentValidationError("Refund reason is required")

    order = lock_order(order_id)

    try:
        original = Payment.objects.get(id=payment_id, service_order=order)
    except Payment.DoesNotExist:
        raise PaymentNotFoundError(f"Payment {payment_id} not found on order {order.code}")

    decimals = money_decimals()
    original_minor = to_minor(original.amount, decimals)
    if original_minor <= 0:
        raise RefundNotAllowedError("Only positive payments can be refunded")

    refund_minor = original_minor if amount is None else to_minor(amount, decimals)
    if refund_minor <= 0:
        raise PaymentValidationError("Refund amount must be greater than 0")
    if refund_minor > original_minor:
        logger.warning(
            "Refund of %s minor units on %s exceeds payment %s (%s)",
            refund_minor, order.code, original.id, original_minor,
        )
        raise RefundNotAllowedError("Refund amount exceeds original payment")

    refund = Payment.objects.create(
        service_order=order,
        amount=minor_to_decimal(-refund_minor, decimals),
        method=original.method,
        note=f"REFUND: {reason}",
        received_by=actor_user(actor),
    )
    record_ar_transaction(
        customer=order.customer,
        service_order=order,
        ar_type=ARType.REFUND,
        amount_minor=refund_minor,
        ref_type='PaymentRefund',
        ref_id=refund.id,
        note=reason,
        created_by=actor_user(actor),
    )
    audit_order(actor, 'SERVICE_ORDER_PAYMENT_REFUND', order, {
        'original_payment_id': str(original.id),
        'refund_payment_id': str(refund.id),
        'refund_minor': refund_minor,
        'reason': reason,
    })

    recompute_payment_status(order)

    logger.info(
        "Refund %s on %s (payment %s) -> %s",
        refund.amount, order.code, original.id, order.payment_status,
    )
    return refund
