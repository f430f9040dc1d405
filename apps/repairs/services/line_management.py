"""
Service line, service part and discount management.

Every mutation locks the order, writes the child record, re-derives
totals from the full set of lines and parts (clamping the discount to the
new subtotal), then re-derives payment status.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from apps.catalog.models import RepairService
from apps.catalog.services import get_active_repair_service
from apps.common.money import MAX_QTY, fits_money_column, minor_to_decimal, money_decimals, to_minor
from apps.inventory.models import Item, StockMovementType
from apps.inventory.services import get_active_item, record_stock_movement
from apps.repairs.models import ServiceLine, ServiceOrder, ServicePart

from .exceptions import (
    ItemNotFoundError,
    LineValidationError,
    PartValidationError,
    RepairServiceNotFoundError,
    ServiceLineNotFoundError,
    ServicePartNotFoundError,
)
from .order_access import actor_user, audit_order, ensure_open, lock_order
from .totals import recompute_payment_status, recompute_totals

logger = logging.getLogger(__name__)


def _is_valid_qty(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= MAX_QTY


def create_line(
    order: ServiceOrder,
    *,
    actor: Optional[User] = None,
    repair_service_id: Optional[UUID] = None,
    description: Optional[str] = None,
    qty: int = 1,
    price=None
) -> ServiceLine:
    """
    Validate and insert one line without recomputing totals.

    Description falls back to the catalog service name and price to its
    default price.

    Raises:
        LineValidationError: Missing description or price, bad qty, negative price
        RepairServiceNotFoundError: If repair_service_id is not an active service
    """
    if not _is_valid_qty(qty):
        raise LineValidationError(f"Quantity must be a whole number between 1 and {MAX_QTY}")

    description = (description or '').strip()
    if price == '':
        price = None

    repair_service = None
    if repair_service_id:
        try:
            repair_service = get_active_repair_service(repair_service_id)
        except RepairService.DoesNotExist:
            raise RepairServiceNotFoundError(f"Repair service {repair_service_id} not found")
        if not description:
            description = repair_service.name
        if price is None:
            price = repair_service.default_price

    if not description:
        raise LineValidationError("Line description required")
    if price is None:
        raise LineValidationError("Price required")

    decimals = money_decimals()
    price_minor = to_minor(price, decimals)
    if price_minor < 0:
        raise LineValidationError("Price cannot be negative")
    if not fits_money_column(price_minor, decimals):
        raise LineValidationError("Price exceeds the largest storable amount")

    line = ServiceLine.objects.create(
        service_order=order,
        repair_service=repair_service,
        description=description,
        qty=qty,
        price=minor_to_decimal(price_minor, decimals),
    )

    audit_order(actor, 'SERVICE_ORDER_LINE_ADD', order, {
        'line_id': str(line.id),
        'description': description,
        'qty': qty,
        'price_minor': price_minor,
        'repair_service_id': str(repair_service.id) if repair_service else None,
    })
    return line


@transaction.atomic
def add_line(
    *,
    order_id: UUID,
    actor: Optional[User] = None,
    repair_service_id: Optional[UUID] = None,
    description: Optional[str] = None,
    qty: int = 1,
    price=None
) -> ServiceOrder:
    """
    Add a service line to an order.

    Returns:
        The order with refreshed totals

    Raises:
        ServiceOrderNotFoundError: If the order doesn't exist
        OrderClosedError: If the order is DELIVERED or CANCELLED
        LineValidationError: If description or price cannot be resolved
        RepairServiceNotFoundError: If the catalog service is not active
    """
    order = lock_order(order_id)
    ensure_open(order)

    line = create_line(
        order,
        actor=actor,
        repair_service_id=repair_service_id,
        description=description,
        qty=qty,
        price=price,
    )
    recompute_totals(order)
    recompute_payment_status(order)

    logger.info("Line added to %s: %s x%s", order.code, line.description, line.qty)
    return order


@transaction.atomic
def remove_line(*, order_id: UUID, line_id: UUID, actor: Optional[User] = None) -> ServiceOrder:
    """
    Raises:
        ServiceOrderNotFoundError: If the order doesn't exist
        ServiceLineNotFoundError: If the line is not on this order
        OrderClosedError: If the order is DELIVERED or CANCELLED
    """
    order = lock_order(order_id)
    ensure_open(order)

    try:
        line = ServiceLine.objects.get(id=line_id, service_order=order)
    except ServiceLine.DoesNotExist:
        raise ServiceLineNotFoundError(f"Line {line_id} not found on order {order.code}")

    audit_order(actor, 'SERVICE_ORDER_LINE_DELETE', order, {
        'line_id': str(line.id),
        'description': line.description,
        'qty': line.qty,
        'price_minor': to_minor(line.price, money_decimals()),
    })
    line.delete()

    recompute_totals(order)
    recompute_payment_status(order)

    logger.info("Line %s removed from %s", line_id, order.code)
    return order


@transaction.atomic
def add_part(
    *,
    order_id: UUID,
    item_id: UUID,
    qty: int,
    unit_price,
    actor: Optional[User] = None
) -> ServiceOrder:
    """
    Add an inventory part to an order and record the stock deduction.

    Raises:
        ServiceOrderNotFoundError: If the order doesn't exist
        OrderClosedError: If the order is DELIVERED or CANCELLED
        PartValidationError: Bad qty, missing or negative unit price
        ItemNotFoundError: If the item is not active
    """
    order = lock_order(order_id)
    ensure_open(order)

    if not _is_valid_qty(qty):
        raise PartValidationError(f"Quantity must be a whole number between 1 and {MAX_QTY}")
    if unit_price is None or unit_price == '':
        raise PartValidationError("Unit price required")

    decimals = money_decimals()
    unit_price_minor = to_minor(unit_price, decimals)
    if unit_price_minor < 0:
        raise PartValidationError("Unit price cannot be negative")
    if not fits_money_column(unit_price_minor, decimals):
        raise PartValidationError("Unit price exceeds the largest storable amount")

    try:
        item = get_active_item(item_id)
    except Item.DoesNotExist:
        raise ItemNotFoundError(f"Item {item_id} not found")

    part = ServicePart.objects.create(
        service_order=order,
        item=item,
        qty=qty,
        unit_price=minor_to_decimal(unit_price_minor, decimals),
    )

    audit_order(actor, 'SERVICE_ORDER_PART_ADD', order, {
        'part_id': str(part.id),
        'item_id': str(item.id),
        'qty': qty,
        'unit_price_minor': unit_price_minor,
    })

    record_stock_movement(
        item=item,
        movement_type=StockMovementType.SERVICE_OUT,
        qty=qty,
        created_by=actor_user(actor),
        ref_type='ServiceOrder',
        ref_id=order.id,
        note='Service part used',
    )

    recompute_totals(order)
    recompute_payment_status(order)

    logger.info("Part %s x%s added to %s", item.name, qty, order.code)
    return order


@transaction.atomic
def remove_part(*, order_id: UUID, part_id: UUID, actor: Optional[User] = None) -> ServiceOrder:
    """
    Remove a part from an order.

    The SERVICE_OUT stock movement recorded when the part was added is not
    reversed; stock corrections go through a manual ADJUSTMENT.

    Raises:
        ServiceOrderNotFoundError: If the order doesn't exist
        ServicePartNotFoundError: If the part is not on this order
        OrderClosedError: If the order is DELIVERED or CANCELLED
    """
    order = lock_order(order_id)
    ensure_open(order)

    try:
        part = ServicePart.objects.get(id=part_id, service_order=order)
    except ServicePart.DoesNotExist:
        raise ServicePartNotFoundError(f"Part {part_id} not found on order {order.code}")

    audit_order(actor, 'SERVICE_ORDER_PART_DELETE', order, {
        'part_id': str(part.id),
        'item_id': str(part.item_id),
        'qty': part.qty,
        'unit_price_minor': to_minor(part.unit_price, money_decimals()),
    })
    part.delete()

    recompute_totals(order)
    recompute_payment_status(order)

    logger.info("Part %s removed from %s (stock not restored)", part_id, order.code)
    return order


@transaction.atomic
def apply_discount(*, order_id: UUID, discount, actor: Optional[User] = None) -> ServiceOrder:
    """
    Set the order discount, clamped to ``[0, sub_total]``.

    Does not change the order status.

    Raises:
        ServiceOrderNotFoundError: If the order doesn't exist
        OrderClosedError: If the order is DELIVERED or CANCELLED
    """
    order = lock_order(order_id)
    ensure_open(order)

    decimals = money_decimals()
    requested_minor = to_minor(discount, decimals)

    recompute_totals(order, discount=minor_to_decimal(requested_minor, decimals))
    recompute_payment_status(order)

    discount_minor = to_minor(order.discount, decimals)
    audit_order(actor, 'SERVICE_ORDER_DISCOUNT_UPDATE', order, {
        'requested_discount_minor': requested_minor,
        'discount_minor': discount_minor,
    })

    if discount_minor != requested_minor:
        logger.info(
            "Discount on %s clamped from %s to %s (minor units)",
            order.code, requested_minor, discount_minor,
        )
    return order
