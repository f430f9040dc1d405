"""Customer overview - ticket history and money position of one customer."""

from uuid import UUID

from apps.common.money import minor_to_decimal_string, money_decimals
from apps.customers.models import Customer
from apps.customers.services import get_active_customer
from apps.repairs.models import ServiceOrder, ServiceOrderStatus

from .exceptions import CustomerNotFoundError
from .totals import get_order_balance

OVERVIEW_MIN_LIMIT = 5
OVERVIEW_MAX_LIMIT = 200
OVERVIEW_DEFAULT_LIMIT = 50


def get_customer_overview(*, customer_id: UUID, limit: int = OVERVIEW_DEFAULT_LIMIT) -> dict:
    """
    Summarize a customer's tickets for the front desk.

    Stats cover every non-deleted order of the customer. Only the
    ``limit`` most recent orders are listed.

    Args:
        customer_id: UUID of the customer
        limit: Number of recent orders to list (clamped to 5..200)

    Returns:
        Dictionary with:
        - customer: Customer instance
        - stats: tickets, total_spent (CANCELLED orders excluded),
          total_paid, outstanding (sum of positive balances), last_visit
          and repeat_customer (2 or more tickets)
        - recent_orders: list of dicts with code, statuses, dates and
          total / paid / balance strings, newest intake first

    Raises:
        CustomerNotFoundError: If the customer doesn't exist or is deleted
    """
    try:
        customer = get_active_customer(customer_id)
    except Customer.DoesNotExist:
        raise CustomerNotFoundError(f"Customer {customer_id} not found")

    limit = max(OVERVIEW_MIN_LIMIT, min(OVERVIEW_MAX_LIMIT, limit))
    decimals = money_decimals()

    orders = list(
        ServiceOrder.objects
        .filter(customer=customer)
        .order_by('-received_at')
    )

    spent_minor = 0
    paid_minor = 0
    outstanding_minor = 0
    recent_orders = []

    for index, order in enumerate(orders):
        balance = get_order_balance(order)

        if order.status != ServiceOrderStatus.CANCELLED:
            spent_minor += balance['total_minor']
        paid_minor += balance['paid_minor']
        if balance['balance_minor'] > 0:
            outstanding_minor += balance['balance_minor']

        if index < limit:
            recent_orders.append({
                'id': order.id,
                'code': order.code,
                'status': order.status,
                'payment_status': order.payment_status,
                'received_at': order.received_at,
                'promised_at': order.promised_at,
                'total': balance['total'],
                'paid': balance['paid'],
                'balance': balance['balance'],
            })

    return {
        'customer': customer,
        'stats': {
            'tickets': len(orders),
            'total_spent': minor_to_decimal_string(spent_minor, decimals),
            'total_paid': minor_to_decimal_string(paid_minor, decimals),
            'outstanding': minor_to_decimal_string(outstanding_minor, decimals),
            'last_visit': orders[0].received_at if orders else None,
            'repeat_customer': len(orders) >= 2,
        },
        'recent_orders': recent_orders,
    }
