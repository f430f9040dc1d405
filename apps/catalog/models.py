from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
import uuid

from apps.common.models import SoftDeleteModel


class RepairService(SoftDeleteModel):
    """Catalog entry for a repair the shop offers (heel replacement, resole...)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, db_index=True)
    default_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    default_duration_min = models.PositiveIntegerField(null=True, blank=True)
    active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'repair_services'
        ordering = ['name']

    def __str__(self):
        return self.name

    def soft_delete(self):
        """Deleted services are also deactivated."""
        self.active = False
        self.save(update_fields=['active'])
        super().soft_delete()
