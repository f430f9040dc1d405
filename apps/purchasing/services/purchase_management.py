"""
Purchase order management service.

Purchases start as DRAFT. Totals are re-derived from the lines on every
write (discount clamped to ``[0, sub_total]``). Receiving a DRAFT records a
PURCHASE_IN stock movement per line and makes the purchase read-only.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional
from uuid import UUID

from django.db import transaction
from django.db.models import Prefetch, Q, QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.common.money import (
    MAX_QTY,
    clamp_minor_non_negative,
    fits_money_column,
    minor_to_decimal,
    money_decimals,
    to_minor,
)
from apps.inventory.models import Item, StockMovementType
from apps.inventory.services import get_active_item, record_stock_movement
from apps.ledger.services import write_audit
from apps.purchasing.models import Purchase, PurchaseLine, PurchaseStatus, Supplier

from .exceptions import (
    ItemNotFoundError,
    PurchaseNotDraftError,
    PurchaseNotFoundError,
    PurchaseValidationError,
    SupplierNotFoundError,
)

logger = logging.getLogger(__name__)

AUDIT_ENTITY = 'Purchase'

EDITABLE_FIELDS = frozenset({'supplier_id', 'invoice_no', 'purchased_at', 'discount', 'lines'})


def _actor_user(actor) -> Optional[User]:
    if actor is None or not getattr(actor, 'is_authenticated', False):
        return None
    return actor


def _resolve_supplier(supplier_id) -> Supplier:
    try:
        return Supplier.objects.get(id=supplier_id)
    except Supplier.DoesNotExist:
        raise SupplierNotFoundError(f"Supplier {supplier_id} not found")


def _resolve_lines(lines: Iterable[dict], decimals: int) -> list:
    """
    Validate line input and look up the items.

    Returns:
        List of ``(item, qty, unit_cost_minor)`` tuples
    """
    resolved = []
    for line in lines:
        qty = line.get('qty')
        if not isinstance(qty, int) or isinstance(qty, bool) or not 1 <= qty <= MAX_QTY:
            raise PurchaseValidationError(f"Quantity must be a whole number between 1 and {MAX_QTY}")

        unit_cost = line.get('unit_cost')
        if unit_cost is None or unit_cost == '':
            raise PurchaseValidationError("Unit cost required")
        unit_cost_minor = to_minor(unit_cost, decimals)
        if unit_cost_minor < 0:
            raise PurchaseValidationError("Unit cost cannot be negative")
        if not fits_money_column(unit_cost_minor * qty, decimals):
            raise PurchaseValidationError("Line total exceeds the largest storable amount")

        try:
            item = get_active_item(line.get('item_id'))
        except Item.DoesNotExist:
            raise ItemNotFoundError(f"Item {line.get('item_id')} not found")

        resolved.append((item, qty, unit_cost_minor))

    if not resolved:
        raise PurchaseValidationError("A purchase needs at least one line")
    return resolved


def _replace_lines(purchase: Purchase, resolved: list, decimals: int) -> None:
    purchase.lines.all().delete()
    PurchaseLine.objects.bulk_create([
        PurchaseLine(
            purchase=purchase,
            item=item,
            qty=qty,
            unit_cost=minor_to_decimal(unit_cost_minor, decimals),
            line_total=minor_to_decimal(unit_cost_minor * qty, decimals),
        )
        for item, qty, unit_cost_minor in resolved
    ])


def _apply_totals(purchase: Purchase, discount, decimals: int) -> None:
    lines = purchase.lines.values_list('unit_cost', 'qty')
    sub_total_minor = sum(to_minor(unit_cost, decimals) * qty for unit_cost, qty in lines)
    if not fits_money_column(sub_total_minor, decimals):
        raise PurchaseValidationError("Purchase subtotal exceeds the largest storable amount")

    discount_minor = min(clamp_minor_non_negative(to_minor(discount, decimals)), sub_total_minor)

    purchase.sub_total = minor_to_decimal(sub_total_minor, decimals)
    purchase.discount = minor_to_decimal(discount_minor, decimals)
    purchase.total = minor_to_decimal(sub_total_minor - discount_minor, decimals)


def _lock_purchase(purchase_id: UUID) -> Purchase:
    try:
        return Purchase.objects.select_for_update().get(id=purchase_id)
    except Purchase.DoesNotExist:
        raise PurchaseNotFoundError(f"Purchase {purchase_id} not found")


def _ensure_draft(purchase: Purchase, verb: str) -> None:
    if not purchase.is_draft:
        raise PurchaseNotDraftError(f"Only DRAFT purchases can be {verb}")


def get_purchase(*, purchase_id: UUID) -> Purchase:
    """
    Raises:
        PurchaseNotFoundError: If the purchase doesn't exist or is soft-deleted
    """
    try:
        return (
            Purchase.objects
            .select_related('supplier', 'created_by')
            .prefetch_related(
                Prefetch('lines', queryset=PurchaseLine.objects.select_related('item'))
            )
            .get(id=purchase_id)
        )
    except Purchase.DoesNotExist:
        raise PurchaseNotFoundError(f"Purchase {purchase_id} not found")


def search_purchases(
    *,
    query: Optional[str] = None,
    status: Optional[str] = None,
    supplier_id: Optional[UUID] = None
) -> QuerySet:
    """List purchases, newest first, by invoice number or supplier name."""
    queryset = Purchase.objects.select_related('supplier')

    if query:
        queryset = queryset.filter(
            Q(invoice_no__icontains=query) | Q(supplier__name__icontains=query)
        )
    if status:
        queryset = queryset.filter(status=status)
    if supplier_id:
        queryset = queryset.filter(supplier_id=supplier_id)

    return queryset.order_by('-purchased_at')


@transaction.atomic
def create_purchase(
    *,
    supplier_id: UUID,
    lines: Iterable[dict],
    invoice_no: Optional[str] = None,
    purchased_at: Optional[datetime] = None,
    discount=0,
    actor: Optional[User] = None
) -> Purchase:
    """
    Create a DRAFT purchase with its lines.

    Args:
        supplier_id: UUID of an active supplier
        lines: Dicts with ``item_id``, ``qty`` and ``unit_cost`` (major units)
        invoice_no: Supplier invoice reference
        purchased_at: Defaults to now
        discount: Major units, clamped to the subtotal
        actor: User recording the purchase

    Returns:
        Created Purchase

    Raises:
        SupplierNotFoundError: Unknown or deleted supplier
        ItemNotFoundError: Unknown or inactive item
        PurchaseValidationError: No lines, bad qty or cost, oversized totals
    """
    decimals = money_decimals()
    supplier = _resolve_supplier(supplier_id)
    resolved = _resolve_lines(lines or [], decimals)

    purchase = Purchase.objects.create(
        supplier=supplier,
        invoice_no=(invoice_no or '').strip(),
        purchased_at=purchased_at or timezone.now(),
        status=PurchaseStatus.DRAFT,
        created_by=_actor_user(actor),
    )
    _replace_lines(purchase, resolved, decimals)
    _apply_totals(purchase, discount, decimals)
    purchase.save(update_fields=['sub_total', 'discount', 'total', 'updated_at'])

    write_audit(_actor_user(actor), 'PURCHASE_CREATE', AUDIT_ENTITY, purchase.id, {
        'supplier_id': str(supplier.id),
        'invoice_no': purchase.invoice_no,
        'lines': len(resolved),
        'total_minor': to_minor(purchase.total, decimals),
    })

    logger.info(
        "Purchase %s created from %s (%d lines, total %s)",
        purchase.id, supplier.name, len(resolved), purchase.total,
    )
    return purchase


@transaction.atomic
def update_purchase(*, purchase_id: UUID, actor: Optional[User] = None, **fields) -> Purchase:
    """
    Edit a DRAFT purchase. ``lines``, when given, replace all current lines.

    Raises:
        PurchaseNotFoundError: If the purchase doesn't exist
        PurchaseNotDraftError: If the purchase was already received
        SupplierNotFoundError / ItemNotFoundError: Unknown references
        PurchaseValidationError: Unknown field, bad lines, oversized totals
    """
    unknown = set(fields) - EDITABLE_FIELDS
    if unknown:
        raise PurchaseValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

    purchase = _lock_purchase(purchase_id)
    _ensure_draft(purchase, 'edited')

    decimals = money_decimals()
    update_fields = ['sub_total', 'discount', 'total', 'updated_at']

    if 'supplier_id' in fields:
        purchase.supplier = _resolve_supplier(fields['supplier_id'])
        update_fields.append('supplier')
    if 'invoice_no' in fields:
        purchase.invoice_no = (fields['invoice_no'] or '').strip()
        update_fields.append('invoice_no')
    if fields.get('purchased_at') is not None:
        purchase.purchased_at = fields['purchased_at']
        update_fields.append('purchased_at')
    if 'lines' in fields:
        _replace_lines(purchase, _resolve_lines(fields['lines'] or [], decimals), decimals)

    _apply_totals(purchase, fields.get('discount', purchase.discount), decimals)
    purchase.save(update_fields=update_fields)

    write_audit(_actor_user(actor), 'PURCHASE_UPDATE', AUDIT_ENTITY, purchase.id, {
        'fields': sorted(fields),
        'total_minor': to_minor(purchase.total, decimals),
    })

    logger.info("Purchase %s updated: %s", purchase.id, ', '.join(sorted(fields)))
    return purchase


@transaction.atomic
def receive_purchase(*, purchase_id: UUID, actor: Optional[User] = None) -> Purchase:
    """
    Book a DRAFT purchase into stock.

    Records one PURCHASE_IN movement per line (reference ``Purchase`` /
    purchase id, note = invoice number) and marks the purchase RECEIVED.

    Raises:
        PurchaseNotFoundError: If the purchase doesn't exist
        PurchaseNotDraftError: If the purchase was already received
    """
    purchase = _lock_purchase(purchase_id)
    _ensure_draft(purchase, 'received')

    lines = list(purchase.lines.select_related('item'))
    for line in lines:
        record_stock_movement(
            item=line.item,
            movement_type=StockMovementType.PURCHASE_IN,
            qty=line.qty,
            unit_cost=line.unit_cost,
            created_by=_actor_user(actor),
            ref_type='Purchase',
            ref_id=purchase.id,
            note=purchase.invoice_no,
        )

    purchase.status = PurchaseStatus.RECEIVED
    purchase.received_at = timezone.now()
    purchase.save(update_fields=['status', 'received_at', 'updated_at'])

    write_audit(_actor_user(actor), 'PURCHASE_RECEIVE', AUDIT_ENTITY, purchase.id, {
        'lines': len(lines),
        'units': sum(line.qty for line in lines),
    })

    logger.info("Purchase %s received (%d lines)", purchase.id, len(lines))
    return purchase


@transaction.atomic
def delete_purchase(*, purchase_id: UUID, actor: Optional[User] = None) -> None:
    """
    Soft-delete a purchase.

    Stock movements of a received purchase stay in the ledger; corrections
    go through a manual ADJUSTMENT.

    Raises:
        PurchaseNotFoundError: If the purchase doesn't exist
    """
    purchase = _lock_purchase(purchase_id)
    purchase.soft_delete()

    write_audit(_actor_user(actor), 'PURCHASE_SOFT_DELETE', AUDIT_ENTITY, purchase.id, {
        'status': purchase.status,
    })
    logger.info("Purchase %s soft-deleted", purchase.id)
