"""
Append-only ledgers.

AuditLog records every mutation made through the service layer.
ARTransaction is the accounts-receivable journal per customer and order:
one CHARGE when an order first becomes READY, a PAYMENT for every payment
and a REFUND for every refund. Amounts are always positive; the type
carries the sign.
"""

from decimal import Decimal

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.core.validators import MinValueValidator
from django.db import models
import uuid

from apps.common.models import AppendOnlyModel


class AuditLog(AppendOnlyModel):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs'
    )
    action = models.CharField(max_length=64)
    entity = models.CharField(max_length=64)
    entity_id = models.CharField(max_length=64)
    meta = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        indexes = [
            models.Index(fields=['entity', 'entity_id', '-created_at'], name='audit_logs_entity_2e7f90_idx'),
            models.Index(fields=['action'], name='audit_logs_action_c4a1d8_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.action} {self.entity}:{self.entity_id}"


class ARType(models.TextChoices):
    CHARGE = 'CHARGE', 'Charge'
    PAYMENT = 'PAYMENT', 'Payment'
    REFUND = 'REFUND', 'Refund'


class ARTransaction(AppendOnlyModel):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer = models.ForeignKey(
        'customers.Customer',
        on_delete=models.PROTECT,
        related_name='ar_transactions'
    )
    service_order = models.ForeignKey(
        'repairs.ServiceOrder',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='ar_transactions'
    )
    type = models.CharField(max_length=10, choices=ARType.choices)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    ref_type = models.CharField(max_length=50, blank=True)
    ref_id = models.CharField(max_length=64, blank=True)
    note = models.CharField(max_length=255, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='ar_transactions'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'ar_transactions'
        indexes = [
            models.Index(fields=['customer', '-created_at'], name='ar_transact_custome_91b3f2_idx'),
            models.Index(fields=['service_order', 'type'], name='ar_transact_service_5d08ae_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.type} {self.amount} ({self.customer_id})"
