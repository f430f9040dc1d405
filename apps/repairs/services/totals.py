"""
Derived money fields of a service order.

Totals and payment status are always re-derived from the current set of
lines, parts and payments. Nothing here patches a stored value by a delta.
All arithmetic is on integer minor units.
"""

from apps.common.money import (
    clamp_minor_non_negative,
    fits_money_column,
    minor_to_decimal,
    minor_to_decimal_string,
    money_decimals,
    to_minor,
)
from apps.repairs.models import (
    Payment,
    PaymentStatus,
    ServiceLine,
    ServiceOrder,
    ServicePart,
)

from .exceptions import OrderValidationError


def compute_payment_status(total_minor: int, paid_minor: int) -> str:
    """
    Payment status as a pure function of total and paid.

    A positive payment against a zero total (deposit taken before any lines
    exist) reads PARTIAL, never PAID.
    """
    if total_minor <= 0:
        return PaymentStatus.PARTIAL if paid_minor > 0 else PaymentStatus.UNPAID
    if paid_minor <= 0:
        return PaymentStatus.UNPAID
    if paid_minor < total_minor:
        return PaymentStatus.PARTIAL
    return PaymentStatus.PAID


def compute_sub_total_minor(order: ServiceOrder, decimals: int) -> int:
    lines = ServiceLine.objects.filter(service_order=order).values_list('price', 'qty')
    parts = ServicePart.objects.filter(service_order=order).values_list('unit_price', 'qty')
    return (
        sum(to_minor(price, decimals) * qty for price, qty in lines)
        + sum(to_minor(unit_price, decimals) * qty for unit_price, qty in parts)
    )


def get_paid_minor(order: ServiceOrder, decimals: int = None) -> int:
    """Sum of all payments on the order, refunds included (negative)."""
    if decimals is None:
        decimals = money_decimals()
    amounts = Payment.objects.filter(service_order=order).values_list('amount', flat=True)
    return sum(to_minor(amount, decimals) for amount in amounts)


def recompute_totals(order: ServiceOrder, discount=None) -> ServiceOrder:
    """
    Re-derive ``sub_total`` and ``total`` and clamp ``discount`` to
    ``[0, sub_total]``.

    Args:
        order: Order to update (should be locked by the caller)
        discount: Optional new discount in major units; the stored one is
            kept otherwise

    Returns:
        The same order instance, saved

    Raises:
        OrderValidationError: If the subtotal does not fit a money column
    """
    decimals = money_decimals()

    sub_total_minor = compute_sub_total_minor(order, decimals)
    if not fits_money_column(sub_total_minor, decimals):
        raise OrderValidationError(
            f"Subtotal of service order {order.code} exceeds the largest storable amount"
        )
    discount_minor = to_minor(order.discount if discount is None else discount, decimals)
    discount_minor = min(clamp_minor_non_negative(discount_minor), sub_total_minor)
    total_minor = clamp_minor_non_negative(sub_total_minor - discount_minor)

    order.sub_total = minor_to_decimal(sub_total_minor, decimals)
    order.discount = minor_to_decimal(discount_minor, decimals)
    order.total = minor_to_decimal(total_minor, decimals)
    order.save(update_fields=['sub_total', 'discount', 'total', 'updated_at'])
    return order


def recompute_payment_status(order: ServiceOrder) -> ServiceOrder:
    decimals = money_decimals()
    order.payment_status = compute_payment_status(
        to_minor(order.total, decimals),
        get_paid_minor(order, decimals),
    )
    order.save(update_fields=['payment_status', 'updated_at'])
    return order


def get_order_balance(order: ServiceOrder) -> dict:
    """
    Paid, total and outstanding balance of an order.

    Returns:
        Dict with ``*_minor`` integers and matching decimal strings.
        A negative balance means the customer overpaid.
    """
    decimals = money_decimals()
    total_minor = to_minor(order.total, decimals)
    paid_minor = get_paid_minor(order, decimals)
    balance_minor = total_minor - paid_minor

    return {
        'total_minor': total_minor,
        'paid_minor': paid_minor,
        'balance_minor': balance_minor,
        'total': minor_to_decimal_string(total_minor, decimals),
        'paid': minor_to_decimal_string(paid_minor, decimals),
        'balance': minor_to_decimal_string(balance_minor, decimals),
        'payment_status': compute_payment_status(total_minor, paid_minor),
    }
