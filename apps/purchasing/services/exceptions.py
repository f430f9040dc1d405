"""
Domain-specific exceptions for the purchasing app.

Each class carries the HTTP ``status_code`` and a stable machine ``code``
so views can convert them without a mapping table.
"""


class PurchasingServiceError(Exception):
    """Base exception for all purchasing service errors."""
    status_code = 400
    code = 'purchasing_error'


class PurchaseValidationError(PurchasingServiceError):
    """Raised when purchase input is malformed (no lines, bad qty or cost)."""
    status_code = 400
    code = 'validation_error'


class PurchaseNotDraftError(PurchasingServiceError):
    """Raised when editing or receiving a purchase that was already received."""
    status_code = 409
    code = 'not_draft'


class NotFoundError(PurchasingServiceError):
    """Base for missing or soft-deleted records."""
    status_code = 404
    code = 'not_found'


class PurchaseNotFoundError(NotFoundError):
    pass


class SupplierNotFoundError(NotFoundError):
    pass


class ItemNotFoundError(NotFoundError):
    pass
