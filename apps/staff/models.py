from decimal import Decimal

from django.conf import settings
from django.db import models
import uuid

from apps.common.models import SoftDeleteModel


class StaffStatus(models.TextChoices):
    ACTIVE = 'ACTIVE', 'Active'
    INACTIVE = 'INACTIVE', 'Inactive'


class StaffMember(SoftDeleteModel):
    """Shop employee that can be assigned to repair tickets."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=30, unique=True, null=True, blank=True)
    name = models.CharField(max_length=200, db_index=True)
    phone = models.CharField(max_length=50, blank=True)
    position = models.CharField(max_length=100, blank=True)
    salary = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=10, choices=StaffStatus.choices, default=StaffStatus.ACTIVE)

    # Optional login account
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='staff_profiles'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'staff_members'
        indexes = [
            models.Index(fields=['status'], name='staff_membe_status_3d9a1c_idx'),
        ]
        ordering = ['name']

    def __str__(self):
        return self.name
