from django.contrib import admin
from .models import ARTransaction, AuditLog


class ReadOnlyAdmin(admin.ModelAdmin):
    """Append-only ledgers are browsable but never edited from admin."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(AuditLog)
class AuditLogAdmin(ReadOnlyAdmin):
    list_display = ['created_at', 'action', 'entity', 'entity_id', 'user']
    list_filter = ['action', 'entity', 'created_at']
    search_fields = ['entity_id', 'action', 'user__username']
    date_hierarchy = 'created_at'


@admin.register(ARTransaction)
class ARTransactionAdmin(ReadOnlyAdmin):
    list_display = ['created_at', 'type', 'amount', 'customer', 'service_order', 'ref_type']
    list_filter = ['type', 'created_at']
    search_fields = ['customer__name', 'service_order__code', 'ref_id']
    date_hierarchy = 'created_at'
