"""
Ledger services.

Both sinks write inside the caller's transaction: an audit entry or AR
transaction for a rejected operation is rolled back with it.
"""

import logging
from typing import Optional

from apps.accounts.models import User
from apps.common.money import clamp_minor_non_negative, minor_to_decimal, money_decimals
from .models import ARTransaction, ARType, AuditLog

logger = logging.getLogger(__name__)

AUDIT_TRAIL_LIMIT = 200


def write_audit(
    user: Optional[User],
    action: str,
    entity: str,
    entity_id,
    meta: Optional[dict] = None
) -> AuditLog:
    """Append one audit entry. ``user`` may be None for system actions."""
    entry = AuditLog.objects.create(
        user=user if user is not None and user.is_authenticated else None,
        action=action,
        entity=entity,
        entity_id=str(entity_id),
        meta=meta or {},
    )
    logger.debug("Audit %s %s:%s", action, entity, entity_id)
    return entry


def record_ar_transaction(
    *,
    customer,
    ar_type: str,
    amount_minor: int,
    service_order=None,
    ref_type: str = '',
    ref_id='',
    note: str = '',
    created_by: Optional[User] = None
) -> ARTransaction:
    """
    Append an AR journal entry.

    ``amount_minor`` is stored as its magnitude; the direction is implied
    by ``ar_type``.
    """
    if ar_type not in ARType.values:
        raise ValueError(f"Unknown AR transaction type: {ar_type}")

    amount = minor_to_decimal(clamp_minor_non_negative(abs(amount_minor)), money_decimals())
    txn = ARTransaction.objects.create(
        customer=customer,
        service_order=service_order,
        type=ar_type,
        amount=amount,
        ref_type=ref_type,
        ref_id=str(ref_id) if ref_id else '',
        note=note,
        created_by=created_by if created_by is not None and created_by.is_authenticated else None,
    )
    logger.info(
        "AR %s %s for customer %s (order %s)",
        ar_type, amount, customer.pk, getattr(service_order, 'pk', None),
    )
    return txn


def has_charge(service_order) -> bool:
    """True if an AR CHARGE already exists for the order."""
    return ARTransaction.objects.filter(
        service_order=service_order,
        type=ARType.CHARGE,
    ).exists()


def get_audit_trail(entity: str, entity_id, limit: int = AUDIT_TRAIL_LIMIT):
    """Latest audit entries for one entity, newest first."""
    return list(
        AuditLog.objects
        .filter(entity=entity, entity_id=str(entity_id))
        .select_related('user')
        .order_by('-created_at')[:limit]
    )

