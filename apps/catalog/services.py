"""Catalog lookups used when pricing service lines."""

from uuid import UUID

from .models import RepairService


def get_active_repair_service(service_id: UUID) -> RepairService:
    """
    Return an active, non-deleted repair service.

    Raises:
        RepairService.DoesNotExist: If the service is unknown, inactive or deleted.
    """
    return RepairService.objects.get(id=service_id, active=True)
