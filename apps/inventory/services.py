"""
Inventory services.

Lookups for items used as service parts and the stock movement recorder.
Stock on hand is never stored; it is summed from the movement ledger.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db.models import Case, F, IntegerField, Sum, When

from apps.accounts.models import User
from .models import Item, StockMovement, StockMovementType

logger = logging.getLogger(__name__)


def get_active_item(item_id: UUID) -> Item:
    """
    Raises:
        Item.DoesNotExist: If the item is unknown, inactive or deleted.
    """
    return Item.objects.get(id=item_id, active=True)


def record_stock_movement(
    *,
    item: Item,
    movement_type: str,
    qty: int,
    created_by: Optional[User] = None,
    unit_cost=None,
    ref_type: str = '',
    ref_id: str = '',
    note: str = ''
) -> StockMovement:
    """
    Append a stock movement.

    Runs in the caller's transaction so a movement recorded for a service
    part rolls back together with the part.
    """
    if movement_type not in StockMovementType.values:
        raise ValueError(f"Unknown stock movement type: {movement_type}")
    if movement_type != StockMovementType.ADJUSTMENT and qty <= 0:
        raise ValueError("Quantity must be positive")

    movement = StockMovement.objects.create(
        item=item,
        type=movement_type,
        qty=qty,
        unit_cost=unit_cost,
        ref_type=ref_type,
        ref_id=str(ref_id) if ref_id else '',
        note=note,
        created_by=created_by,
    )
    logger.info(
        "Stock movement %s: %s x %s (ref %s %s)",
        movement_type, qty, item.name, ref_type or '-', ref_id or '-',
    )
    return movement


def get_stock_on_hand(item: Item) -> int:
    """Sum the movement ledger: purchases add, service usage subtracts."""
    result = item.stock_movements.aggregate(
        on_hand=Sum(
            Case(
                When(type=StockMovementType.SERVICE_OUT, then=-F('qty')),
                default=F('qty'),
                output_field=IntegerField(),
            )
        )
    )
    return result['on_hand'] or 0
