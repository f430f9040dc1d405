"""
Abstract model bases shared across apps.

SoftDeleteModel hides rows marked with ``deleted_at`` from the default
manager. AppendOnlyModel refuses updates and instance deletes so ledgers
(status history, payments, audit log, receivables) can only grow.
"""

from django.db import models
from django.utils import timezone


class AppendOnlyError(Exception):
    """Raised when code tries to update or delete an append-only record."""
    pass


class SoftDeleteQuerySet(models.QuerySet):
    def alive(self):
        return self.filter(deleted_at__isnull=True)

    def deleted(self):
        return self.filter(deleted_at__isnull=False)


class SoftDeleteManager(models.Manager.from_queryset(SoftDeleteQuerySet)):
    """Default manager that excludes soft-deleted rows."""

    def get_queryset(self):
        return super().get_queryset().alive()


class SoftDeleteModel(models.Model):
    deleted_at = models.DateTimeField(null=True, blank=True, db_index=True)

    objects = SoftDeleteManager()
    all_objects = models.Manager.from_queryset(SoftDeleteQuerySet)()

    class Meta:
        abstract = True

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    def soft_delete(self):
        """Mark the row deleted without removing it."""
        self.deleted_at = timezone.now()
        self.save(update_fields=['deleted_at'])


class AppendOnlyModel(models.Model):

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise AppendOnlyError(f"{type(self).__name__} records are append-only")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise AppendOnlyError(f"{type(self).__name__} records cannot be deleted")
