"""
Domain-specific exceptions for the repairs app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses. Each class
carries the HTTP ``status_code`` and a stable machine ``code``.
"""


class RepairsServiceError(Exception):
    """Base exception for all repairs service errors."""
    status_code = 400
    code = 'repairs_error'


# ---- Validation (400): bad input, safe to retry after correcting it ----

class OrderValidationError(RepairsServiceError):
    """Raised when order input is malformed or incomplete."""
    status_code = 400
    code = 'validation_error'


class LineValidationError(OrderValidationError):
    """Raised when a service line has no description, no price or a bad qty."""
    code = 'line_invalid'


class PartValidationError(OrderValidationError):
    """Raised when a service part has a bad qty or unit price."""
    code = 'part_invalid'


class PaymentValidationError(OrderValidationError):
    """Raised when a payment or refund amount is not usable."""
    code = 'payment_invalid'


# ---- Business rules (409): the real-world situation must change first ----

class BusinessRuleError(RepairsServiceError):
    """Base for operations the order's current state does not allow."""
    status_code = 409
    code = 'business_rule'


class InvalidStatusTransitionError(BusinessRuleError):
    """Raised when the state machine has no edge to the requested status."""
    code = 'invalid_transition'


class StatusRequiresDedicatedActionError(BusinessRuleError):
    """Raised when READY or DELIVERED is requested through the generic status setter."""
    status_code = 400
    code = 'use_dedicated_action'


class PaymentIncompleteError(BusinessRuleError):
    """Raised when delivering an order that is not fully paid."""
    code = 'payment_incomplete'


class RefundNotAllowedError(BusinessRuleError):
    """Raised when refunding a refund or more than the original payment."""
    code = 'refund_not_allowed'


class OrderClosedError(BusinessRuleError):
    """Raised when mutating a DELIVERED or CANCELLED order."""
    code = 'order_closed'


# ---- Not found (404) ----

class NotFoundError(RepairsServiceError):
    """Base for missing or soft-deleted records."""
    status_code = 404
    code = 'not_found'


class ServiceOrderNotFoundError(NotFoundError):
    """Raised when a service order does not exist or is soft-deleted."""
    pass


class ServiceLineNotFoundError(NotFoundError):
    """Raised when a line does not exist on the given order."""
    pass


class ServicePartNotFoundError(NotFoundError):
    """Raised when a part does not exist on the given order."""
    pass


class PaymentNotFoundError(NotFoundError):
    """Raised when a payment does not exist on the given order."""
    pass


class CustomerNotFoundError(NotFoundError):
    """Raised when the referenced customer does not exist or is deleted."""
    pass


class StaffNotFoundError(NotFoundError):
    """Raised when the referenced staff member does not exist or is deleted."""
    pass


class RepairServiceNotFoundError(NotFoundError):
    """Raised when a catalog service is unknown, inactive or deleted."""
    pass


class ItemNotFoundError(NotFoundError):
    """Raised when an inventory item is unknown, inactive or deleted."""
    pass
