"""Staff lookups used by the repair workflow."""

from uuid import UUID

from .models import StaffMember


def get_active_staff_member(staff_id: UUID) -> StaffMember:
    """
    Return a staff member that has not been soft-deleted.

    Inactive staff stay assignable so historic tickets can be edited.

    Raises:
        StaffMember.DoesNotExist: If the id is unknown or the record is deleted.
    """
    return StaffMember.objects.get(id=staff_id)
