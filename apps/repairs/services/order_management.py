"""
Service order management service.

Handles intake (with optional initial lines and deposit), header edits,
lookups and soft deletion.
"""

import logging
import secrets
import time
from datetime import date
from typing import Iterable, Optional
from uuid import UUID

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Prefetch, Q, QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.common.money import fits_money_column, money_decimals, to_minor
from apps.customers.models import Customer
from apps.customers.services import get_active_customer
from apps.ledger.services import get_audit_trail
from apps.repairs.models import (
    Payment,
    PaymentMethod,
    ServiceLine,
    ServiceOrder,
    ServiceOrderStatus,
    ServicePart,
    ServiceStatusHistory,
)
from apps.staff.models import StaffMember
from apps.staff.services import get_active_staff_member

from .exceptions import (
    CustomerNotFoundError,
    OrderValidationError,
    PaymentValidationError,
    ServiceOrderNotFoundError,
    StaffNotFoundError,
)
from .line_management import create_line
from .order_access import AUDIT_ENTITY, actor_user, audit_order, lock_order, record_history
from .payment_management import create_payment, validate_method
from .totals import recompute_payment_status, recompute_totals

logger = logging.getLogger(__name__)

HEADER_FIELDS = frozenset({
    'customer_id',
    'assigned_staff_id',
    'vet_code',
    'shoe_brand',
    'shoe_color',
    'shoe_size',
    'shoe_type',
    'pair_count',
    'urgent',
    'before_photo_url',
    'after_photo_url',
    'problem_desc',
    'received_at',
    'promised_at',
})

MAX_PAIR_COUNT = 10


def generate_order_code(*, prefix: Optional[str] = None, day: Optional[date] = None) -> str:
    """Random ``<prefix>-YYYYMMDD-NNNN`` code. Uniqueness is enforced on insert."""
    prefix = prefix or getattr(settings, 'SERVICE_CODE_PREFIX', 'SR')
    day = day or timezone.localdate()
    return f"{prefix}-{day:%Y%m%d}-{secrets.randbelow(10000):04d}"


def _fallback_order_code(prefix: Optional[str] = None) -> str:
    prefix = prefix or getattr(settings, 'SERVICE_CODE_PREFIX', 'SR')
    return f"{prefix}-{int(time.time() * 1000)}"


def _resolve_customer(customer_id) -> Customer:
    try:
        return get_active_customer(customer_id)
    except Customer.DoesNotExist:
        raise CustomerNotFoundError(f"Customer {customer_id} not found")


def _resolve_staff(staff_id) -> Optional[StaffMember]:
    if not staff_id:
        return None
    try:
        return get_active_staff_member(staff_id)
    except StaffMember.DoesNotExist:
        raise StaffNotFoundError(f"Staff member {staff_id} not found")


def _clean_vet_code(value) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip() or None


def _validate_pair_count(pair_count) -> int:
    if (
        not isinstance(pair_count, int)
        or isinstance(pair_count, bool)
        or not 1 <= pair_count <= MAX_PAIR_COUNT
    ):
        raise OrderValidationError(f"Pair count must be between 1 and {MAX_PAIR_COUNT}")
    return pair_count


def create_order(
    *,
    customer_id: UUID,
    actor: Optional[User] = None,
    assigned_staff_id: Optional[UUID] = None,
    code: Optional[str] = None,
    vet_code: Optional[str] = None,
    shoe_brand: str = '',
    shoe_color: str = '',
    shoe_size: str = '',
    shoe_type: str = '',
    pair_count: int = 1,
    urgent: bool = False,
    before_photo_url: Optional[str] = None,
    after_photo_url: Optional[str] = None,
    problem_desc: str = '',
    received_at=None,
    promised_at=None,
    lines: Iterable[dict] = (),
    deposit_amount=0,
    deposit_method: str = PaymentMethod.CASH,
    deposit_note: Optional[str] = None,
    max_retries: int = 5
) -> ServiceOrder:
    """
    Create a service order at intake.

    This is a multi-step operation wrapped in a transaction:
    1. Generate a unique code (unless one is supplied)
    2. Create the order in RECEIVED with its first history entry
    3. Add initial lines, if any
    4. Record the deposit, if any
    5. Recompute totals and payment status

    Args:
        customer_id: UUID of an existing customer
        actor: User taking the order in
        lines: Dicts with ``repair_service_id``, ``description``, ``qty``, ``price``
        deposit_amount: Amount paid at intake, in major units
        max_retries: Attempts to find a free generated code

    Returns:
        Created ServiceOrder

    Raises:
        CustomerNotFoundError / StaffNotFoundError: Unknown references
        OrderValidationError: Bad header input or a duplicate supplied code
        LineValidationError: If an initial line cannot be priced
        PaymentValidationError: Negative or oversized deposit, or unknown method
    """
    customer = _resolve_customer(customer_id)
    staff = _resolve_staff(assigned_staff_id)
    _validate_pair_count(pair_count)
    validate_method(deposit_method)

    decimals = money_decimals()
    deposit_minor = to_minor(deposit_amount, decimals)
    if deposit_minor < 0:
        raise PaymentValidationError("Deposit cannot be negative")
    if not fits_money_column(deposit_minor, decimals):
        raise PaymentValidationError("Deposit exceeds the largest storable amount")

    lines = list(lines or [])
    supplied_code = (code or '').strip() or None
    if supplied_code and ServiceOrder.all_objects.filter(code=supplied_code).exists():
        raise OrderValidationError(f"Service order code {supplied_code} already exists")

    # Retry logic outside transaction to handle code collisions
    for attempt in range(max_retries):
        if supplied_code:
            order_code = supplied_code
        elif attempt == max_retries - 1:
            order_code = _fallback_order_code()
        else:
            order_code = generate_order_code()

        try:
            # Each attempt is a separate transaction
            with transaction.atomic():
                order = ServiceOrder.objects.create(
                    code=order_code,
                    vet_code=_clean_vet_code(vet_code),
                    customer=customer,
                    assigned_staff=staff,
                    shoe_brand=shoe_brand or '',
                    shoe_color=shoe_color or '',
                    shoe_size=shoe_size or '',
                    shoe_type=shoe_type or '',
                    pair_count=pair_count,
                    urgent=bool(urgent),
                    before_photo_url=before_photo_url or None,
                    after_photo_url=after_photo_url or None,
                    problem_desc=problem_desc or '',
                    received_at=received_at or timezone.now(),
                    promised_at=promised_at,
                    status=ServiceOrderStatus.RECEIVED,
                    created_by=actor_user(actor),
                )
                _populate_new_order(
                    order,
                    actor=actor,
                    lines=lines,
                    deposit_minor=deposit_minor,
                    deposit_method=deposit_method,
                    deposit_note=deposit_note,
                )
                return order

        except IntegrityError:
            # Code collision (rare)
            if supplied_code or attempt == max_retries - 1:
                raise
            continue

    # Should never reach here
    raise RuntimeError("Unexpected error in service order creation")


def _populate_new_order(order, *, actor, lines, deposit_minor, deposit_method, deposit_note):
    record_history(order, ServiceOrderStatus.RECEIVED, note='Created', actor=actor)
    audit_order(actor, 'SERVICE_ORDER_CREATE', order, {
        'code': order.code,
        'customer_id': str(order.customer_id),
        'assigned_staff_id': str(order.assigned_staff_id) if order.assigned_staff_id else None,
        'vet_code': order.vet_code,
    })

    for line in lines:
        create_line(
            order,
            actor=actor,
            repair_service_id=line.get('repair_service_id'),
            description=line.get('description'),
            qty=line.get('qty', 1),
            price=line.get('price'),
        )
    recompute_totals(order)

    if deposit_minor > 0:
        note = deposit_note or 'Deposit'
        create_payment(
            order,
            amount_minor=deposit_minor,
            method=deposit_method,
            actor=actor,
            note=note,
        )
        audit_order(actor, 'SERVICE_ORDER_DEPOSIT', order, {
            'amount_minor': deposit_minor,
            'method': deposit_method,
            'note': note,
        })

    recompute_payment_status(order)
    logger.info(
        "Service order %s created for customer %s (%d lines, deposit %s minor units)",
        order.code, order.customer_id, len(lines), deposit_minor,
    )


def get_order(*, order_id: UUID) -> ServiceOrder:
    """
    Get an order with everything the detail view shows.

    Raises:
        ServiceOrderNotFoundError: If the order doesn't exist or is soft-deleted
    """
    try:
        return (
            ServiceOrder.objects
            .select_related('customer', 'assigned_staff', 'created_by')
            .prefetch_related(
                Prefetch('lines', queryset=ServiceLine.objects.select_related('repair_service')),
                Prefetch('parts', queryset=ServicePart.objects.select_related('item')),
                Prefetch(
                    'status_history',
                    queryset=ServiceStatusHistory.objects.select_related('changed_by').order_by('changed_at')
                ),
                Prefetch(
                    'payments',
                    queryset=Payment.objects.select_related('received_by').order_by('-paid_at')
                ),
            )
            .get(id=order_id)
        )
    except ServiceOrder.DoesNotExist:
        raise ServiceOrderNotFoundError(f"Service order {order_id} not found")


def search_orders(
    *,
    query: Optional[str] = None,
    status: Optional[str] = None,
    payment_status: Optional[str] = None,
    customer_id: Optional[UUID] = None
) -> QuerySet:
    """List orders, newest intake first, optionally filtered."""
    queryset = ServiceOrder.objects.select_related('customer', 'assigned_staff')

    if query:
        queryset = queryset.filter(
            Q(code__icontains=query)
            | Q(vet_code__icontains=query)
            | Q(customer__name__icontains=query)
            | Q(customer__phone__icontains=query)
            | Q(shoe_brand__icontains=query)
            | Q(shoe_type__icontains=query)
            | Q(problem_desc__icontains=query)
        )
    if status:
        queryset = queryset.filter(status=status)
    if payment_status:
        queryset = queryset.filter(payment_status=payment_status)
    if customer_id:
        queryset = queryset.filter(customer_id=customer_id)

    return queryset.order_by('-received_at')


@transaction.atomic
def update_order(*, order_id: UUID, actor: Optional[User] = None, **fields) -> ServiceOrder:
    """
    Partially update header fields (customer, staff, shoe details, dates...).

    Money fields, status and code are not header fields and are rejected.

    Raises:
        ServiceOrderNotFoundError: If the order doesn't exist
        OrderValidationError: Unknown field or bad pair count
        CustomerNotFoundError / StaffNotFoundError: Unknown references
    """
    unknown = set(fields) - HEADER_FIELDS
    if unknown:
        raise OrderValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

    order = lock_order(order_id)
    changed = []

    for name, value in fields.items():
        if name == 'customer_id':
            order.customer = _resolve_customer(value)
            changed.append('customer')
            continue
        if name == 'assigned_staff_id':
            order.assigned_staff = _resolve_staff(value)
            changed.append('assigned_staff')
            continue

        if name == 'vet_code':
            value = _clean_vet_code(value)
        elif name == 'pair_count':
            value = _validate_pair_count(value)
        elif name in ('before_photo_url', 'after_photo_url'):
            value = value or None
        elif name in ('shoe_brand', 'shoe_color', 'shoe_size', 'shoe_type', 'problem_desc'):
            value = value or ''
        elif name == 'urgent':
            value = bool(value)
        setattr(order, name, value)
        changed.append(name)

    if changed:
        order.save(update_fields=changed + ['updated_at'])

    audit_order(actor, 'SERVICE_ORDER_UPDATE', order, {'changed_fields': sorted(fields)})
    logger.info("Service order %s updated: %s", order.code, ', '.join(sorted(fields)) or '-')
    return order


@transaction.atomic
def delete_order(*, order_id: UUID, actor: Optional[User] = None) -> None:
    """
    Soft-delete an order. It disappears from every lookup but its ledgers stay.

    Raises:
        ServiceOrderNotFoundError: If the order doesn't exist
    """
    order = lock_order(order_id)
    order.soft_delete()
    audit_order(actor, 'SERVICE_ORDER_SOFT_DELETE', order, {'code': order.code})
    logger.info("Service order %s soft-deleted by %s", order.code, actor_user(actor))


def get_order_audit_trail(*, order_id: UUID) -> list:
    """
    Latest audit entries for an order, newest first.

    Raises:
        ServiceOrderNotFoundError: If the order doesn't exist
    """
    if not ServiceOrder.objects.filter(id=order_id).exists():
        raise ServiceOrderNotFoundError(f"Service order {order_id} not found")
    return get_audit_trail(AUDIT_ENTITY, order_id)
