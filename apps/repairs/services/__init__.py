"""
Repairs app services layer.

Services contain the service-order lifecycle: intake, lines and parts,
the status state machine, discounts, payments and refunds. Every
state-changing operation runs in one transaction with the order row
locked, and re-derives totals and payment status before returning.
"""

from .exceptions import (
    RepairsServiceError,
    OrderValidationError,
    LineValidationError,
    PartValidationError,
    PaymentValidationError,
    BusinessRuleError,
    InvalidStatusTransitionError,
    StatusRequiresDedicatedActionError,
    PaymentIncompleteError,
    RefundNotAllowedError,
    OrderClosedError,
    NotFoundError,
    ServiceOrderNotFoundError,
    ServiceLineNotFoundError,
    ServicePartNotFoundError,
    PaymentNotFoundError,
    CustomerNotFoundError,
    StaffNotFoundError,
    RepairServiceNotFoundError,
    ItemNotFoundError,
)

from .totals import (
    compute_payment_status,
    recompute_totals,
    recompute_payment_status,
    get_paid_minor,
    get_order_balance,
)

from .order_management import (
    create_order,
    update_order,
    get_order,
    search_orders,
    delete_order,
    get_order_audit_trail,
    generate_order_code,
)

from .line_management import (
    add_line,
    remove_line,
    add_part,
    remove_part,
    apply_discount,
)

from .status_management import (
    ALLOWED_TRANSITIONS,
    SETTABLE_STATUSES,
    can_transition,
    set_status,
    mark_ready,
    deliver,
)

from .payment_management import (
    add_payment,
    refund_payment,
)

from .customer_overview import (
    get_customer_overview,
)


__all__ = [
    # Exceptions
    'RepairsServiceError',
    'OrderValidationError',
    'LineValidationError',
    'PartValidationError',
    'PaymentValidationError',
    'BusinessRuleError',
    'InvalidStatusTransitionError',
    'StatusRequiresDedicatedActionError',
    'PaymentIncompleteError',
    'RefundNotAllowedError',
    'OrderClosedError',
    'NotFoundError',
    'ServiceOrderNotFoundError',
    'ServiceLineNotFoundError',
    'ServicePartNotFoundError',
    'PaymentNotFoundError',
    'CustomerNotFoundError',
    'StaffNotFoundError',
    'RepairServiceNotFoundError',
    'ItemNotFoundError',

    # Totals
    'compute_payment_status',
    'recompute_totals',
    'recompute_payment_status',
    'get_paid_minor',
    'get_order_balance',

    # Order Management
    'create_order',
    'update_order',
    'get_order',
    'search_orders',
    'delete_order',
    'get_order_audit_trail',
    'generate_order_code',

    # Lines, Parts & Discount
    'add_line',
    'remove_line',
    'add_part',
    'remove_part',
    'apply_discount',

    # Status
    'ALLOWED_TRANSITIONS',
    'SETTABLE_STATUSES',
    'can_transition',
    'set_status',
    'mark_ready',
    'deliver',

    # Payments
    'add_payment',
    'refund_payment',

    # Customer overview
    'get_customer_overview',
]
