from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
import uuid

from apps.common.models import SoftDeleteModel


class Supplier(SoftDeleteModel):
    """Vendor the shop buys soles, heels and other materials from."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=30, unique=True, null=True, blank=True)
    name = models.CharField(max_length=200, db_index=True)
    phone = models.CharField(max_length=50, blank=True)
    email = models.EmailField(blank=True)
    address = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'suppliers'
        ordering = ['-created_at']

    def __str__(self):
        return self.name


class PurchaseStatus(models.TextChoices):
    DRAFT = 'DRAFT', 'Draft'
    RECEIVED = 'RECEIVED', 'Received'


class Purchase(SoftDeleteModel):
    """
    Purchase order from a supplier.

    A DRAFT can be edited freely. Receiving it records one PURCHASE_IN stock
    movement per line and freezes it.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.PROTECT,
        related_name='purchases'
    )
    invoice_no = models.CharField(max_length=64, blank=True)
    purchased_at = models.DateTimeField(default=timezone.now)
    status = models.CharField(
        max_length=10,
        choices=PurchaseStatus.choices,
        default=PurchaseStatus.DRAFT
    )
    received_at = models.DateTimeField(null=True, blank=True)

    sub_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_purchases'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'purchases'
        indexes = [
            models.Index(fields=['-purchased_at'], name='purchases_purchas_4e7a19_idx'),
            models.Index(fields=['status'], name='purchases_status_c2d815_idx'),
        ]
        ordering = ['-purchased_at']

    def __str__(self):
        return f"{self.invoice_no or self.id} ({self.status})"

    @property
    def is_draft(self):
        return self.status == PurchaseStatus.DRAFT


class PurchaseLine(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    purchase = models.ForeignKey(
        Purchase,
        on_delete=models.CASCADE,
        related_name='lines'
    )
    item = models.ForeignKey(
        'inventory.Item',
        on_delete=models.PROTECT,
        related_name='purchase_lines'
    )
    qty = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_cost = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    line_total = models.DecimalField(max_digits=12, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'purchase_lines'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.qty} x {self.item_id} @ {self.unit_cost}"
