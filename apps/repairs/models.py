from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone
import uuid

from apps.common.models import AppendOnlyModel, SoftDeleteModel


class ServiceOrderStatus(models.TextChoices):
    RECEIVED = 'RECEIVED', 'Received'
    CLEANING = 'CLEANING', 'Cleaning'
    REPAIRING = 'REPAIRING', 'Repairing'
    READY = 'READY', 'Ready'
    DELIVERED = 'DELIVERED', 'Delivered'
    CANCELLED = 'CANCELLED', 'Cancelled'


TERMINAL_STATUSES = frozenset({ServiceOrderStatus.DELIVERED, ServiceOrderStatus.CANCELLED})


class PaymentStatus(models.TextChoices):
    UNPAID = 'UNPAID', 'Unpaid'
    PARTIAL = 'PARTIAL', 'Partially paid'
    PAID = 'PAID', 'Paid'


class PaymentMethod(models.TextChoices):
    CASH = 'CASH', 'Cash'
    CARD = 'CARD', 'Card'
    TRANSFER = 'TRANSFER', 'Bank transfer'
    OTHER = 'OTHER', 'Other'


class ServiceOrder(SoftDeleteModel):
    """
    Repair ticket: one customer's shoes from intake to delivery.

    ``sub_total``, ``total`` and ``payment_status`` are derived from the
    lines, parts and payments and are only written by the services layer.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=40, unique=True)
    vet_code = models.CharField(max_length=64, blank=True, null=True)
    customer = models.ForeignKey(
        'customers.Customer',
        on_delete=models.PROTECT,
        related_name='service_orders'
    )
    assigned_staff = models.ForeignKey(
        'staff.StaffMember',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_orders'
    )

    # Shoe details
    shoe_brand = models.CharField(max_length=100, blank=True)
    shoe_color = models.CharField(max_length=50, blank=True)
    shoe_size = models.CharField(max_length=20, blank=True)
    shoe_type = models.CharField(max_length=50, blank=True)
    pair_count = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1), MaxValueValidator(10)]
    )
    urgent = models.BooleanField(default=False)
    before_photo_url = models.URLField(max_length=500, blank=True, null=True)
    after_photo_url = models.URLField(max_length=500, blank=True, null=True)
    problem_desc = models.TextField(blank=True)

    received_at = models.DateTimeField(default=timezone.now)
    promised_at = models.DateTimeField(null=True, blank=True)

    status = models.CharField(
        max_length=20,
        choices=ServiceOrderStatus.choices,
        default=ServiceOrderStatus.RECEIVED
    )
    payment_status = models.CharField(
        max_length=10,
        choices=PaymentStatus.choices,
        default=PaymentStatus.UNPAID
    )

    # Money
    sub_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_service_orders'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'service_orders'
        indexes = [
            models.Index(fields=['status'], name='service_ord_status_8a41c2_idx'),
            models.Index(fields=['customer', '-received_at'], name='service_ord_custome_f03b7d_idx'),
            models.Index(fields=['-received_at'], name='service_ord_receive_2c9e55_idx'),
        ]
        ordering = ['-received_at']

    def __str__(self):
        return f"{self.code} ({self.status})"

    @property
    def is_terminal(self):
        return self.status in TERMINAL_STATUSES


class ServiceLine(models.Model):
    """Billable labor line. ``price`` is per unit."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    service_order = models.ForeignKey(
        ServiceOrder,
        on_delete=models.CASCADE,
        related_name='lines'
    )
    repair_service = models.ForeignKey(
        'catalog.RepairService',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='service_lines'
    )
    description = models.CharField(max_length=255)
    qty = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    price = models.DecimalField(max_digits=12, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'service_lines'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.description} x{self.qty}"


class ServicePart(models.Model):
    """Inventory item consumed on an order."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    service_order = models.ForeignKey(
        ServiceOrder,
        on_delete=models.CASCADE,
        related_name='parts'
    )
    item = models.ForeignKey(
        'inventory.Item',
        on_delete=models.PROTECT,
        related_name='service_parts'
    )
    qty = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'service_parts'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.item_id} x{self.qty}"


class ServiceStatusHistory(AppendOnlyModel):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    service_order = models.ForeignKey(
        ServiceOrder,
        on_delete=models.CASCADE,
        related_name='status_history'
    )
    status = models.CharField(max_length=20, choices=ServiceOrderStatus.choices)
    note = models.CharField(max_length=255, blank=True, null=True)
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='service_status_changes'
    )
    changed_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'service_status_history'
        ordering = ['changed_at']
        verbose_name_plural = 'service status history'

    def __str__(self):
        return f"{self.status} at {self.changed_at}"


class Payment(AppendOnlyModel):
    """
    Payment ledger entry. Positive amounts are payments, negative amounts
    are refunds; rows are never edited.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    service_order = models.ForeignKey(
        ServiceOrder,
        on_delete=models.CASCADE,
        related_name='payments'
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    method = models.CharField(
        max_length=10,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH
    )
    paid_at = models.DateTimeField(default=timezone.now)
    note = models.CharField(max_length=255, blank=True, null=True)
    received_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='received_payments'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'payments'
        indexes = [
            models.Index(fields=['service_order', '-paid_at'], name='payments_service_a7e3b9_idx'),
        ]
        ordering = ['-paid_at']

    def __str__(self):
        return f"{self.amount} {self.method}"

    @property
    def is_refund(self):
        return self.amount < 0
