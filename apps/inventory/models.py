from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
import uuid

from apps.common.models import AppendOnlyModel, SoftDeleteModel


class Item(SoftDeleteModel):
    """Stocked material or part (heels, soles, glue, laces...)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    sku = models.CharField(max_length=64, unique=True, null=True, blank=True)
    barcode = models.CharField(max_length=64, blank=True, db_index=True)
    name = models.CharField(max_length=200, db_index=True)
    unit = models.CharField(max_length=20, default='pcs')
    cost = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    reorder_level = models.PositiveIntegerField(default=0)
    active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'items'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.sku})" if self.sku else self.name

    def soft_delete(self):
        self.active = False
        self.save(update_fields=['active'])
        super().soft_delete()


class StockMovementType(models.TextChoices):
    PURCHASE_IN = 'PURCHASE_IN', 'Purchase In'
    SERVICE_OUT = 'SERVICE_OUT', 'Service Out'
    ADJUSTMENT = 'ADJUSTMENT', 'Adjustment'


class StockMovement(AppendOnlyModel):
    """
    One change to an item's stock.

    ``qty`` is positive for PURCHASE_IN and SERVICE_OUT (the type carries the
    direction) and signed for ADJUSTMENT.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    item = models.ForeignKey(
        Item,
        on_delete=models.PROTECT,
        related_name='stock_movements'
    )
    type = models.CharField(max_length=20, choices=StockMovementType.choices)
    qty = models.IntegerField()
    unit_cost = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    ref_type = models.CharField(max_length=50, blank=True)
    ref_id = models.CharField(max_length=64, blank=True)
    note = models.CharField(max_length=255, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='stock_movements'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'stock_movements'
        indexes = [
            models.Index(fields=['item', '-created_at'], name='stock_movem_item_id_6c2e4a_idx'),
            models.Index(fields=['ref_type', 'ref_id'], name='stock_movem_ref_typ_b71d03_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.type} {self.qty} x {self.item_id}"

    @property
    def signed_qty(self):
        if self.type == StockMovementType.SERVICE_OUT:
            return -abs(self.qty)
        if self.type == StockMovementType.PURCHASE_IN:
            return abs(self.qty)
        return self.qty
