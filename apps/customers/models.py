from django.db import models
import uuid

from apps.common.models import SoftDeleteModel


class Customer(SoftDeleteModel):
    """Shop customer who drops off shoes for repair."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=30, unique=True, null=True, blank=True)
    name = models.CharField(max_length=200, db_index=True)
    phone = models.CharField(max_length=50, blank=True)
    email = models.EmailField(blank=True)
    address = models.TextField(blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'customers'
        indexes = [
            models.Index(fields=['phone'], name='customers_phone_0c1b54_idx'),
            models.Index(fields=['created_at'], name='customers_created_8f3e21_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.name} ({self.phone})" if self.phone else self.name
