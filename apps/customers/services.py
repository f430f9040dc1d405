"""Customer lookups used by the repair workflow."""

from uuid import UUID

from .models import Customer


def get_active_customer(customer_id: UUID) -> Customer:
    """
    Return a customer that has not been soft-deleted.

    Raises:
        Customer.DoesNotExist: If the id is unknown or the customer is deleted.
    """
    return Customer.objects.get(id=customer_id)
