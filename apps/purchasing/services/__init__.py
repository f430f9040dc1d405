"""
Purchasing app services layer.

Supplier purchase orders: DRAFT editing with derived totals and receipt
into the stock movement ledger.
"""

from .exceptions import (
    PurchasingServiceError,
    PurchaseValidationError,
    PurchaseNotDraftError,
    NotFoundError,
    PurchaseNotFoundError,
    SupplierNotFoundError,
    ItemNotFoundError,
)

from .purchase_management import (
    get_purchase,
    search_purchases,
    create_purchase,
    update_purchase,
    receive_purchase,
    delete_purchase,
)


__all__ = [
    # Exceptions
    'PurchasingServiceError',
    'PurchaseValidationError',
    'PurchaseNotDraftError',
    'NotFoundError',
    'PurchaseNotFoundError',
    'SupplierNotFoundError',
    'ItemNotFoundError',

    # Purchases
    'get_purchase',
    'search_purchases',
    'create_purchase',
    'update_purchase',
    'receive_purchase',
    'delete_purchase',
]
