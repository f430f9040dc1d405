from django.contrib import admin

from .models import Purchase, PurchaseLine, Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'phone', 'email', 'created_at', 'deleted_at']
    list_filter = ['deleted_at']
    search_fields = ['name', 'code', 'phone', 'email']
    readonly_fields = ['id', 'created_at', 'updated_at']

    def get_queryset(self, request):
        """Include soft-deleted suppliers so admins can inspect them."""
        return Supplier.all_objects.all()


class PurchaseLineInline(admin.TabularInline):
    model = PurchaseLine
    extra = 0
    fields = ['item', 'qty', 'unit_cost', 'line_total']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    """
    Purchases are browsable here; receiving goes through the API so the
    stock ledger stays consistent.
    """

    list_display = ['invoice_no', 'supplier', 'status', 'total', 'purchased_at', 'received_at']
    list_filter = ['status', 'purchased_at']
    search_fields = ['invoice_no', 'supplier__name']
    readonly_fields = [
        'id', 'status', 'received_at', 'sub_total', 'discount', 'total',
        'created_by', 'created_at', 'updated_at',
    ]
    inlines = [PurchaseLineInline]

    def get_queryset(self, request):
        return Purchase.all_objects.select_related('supplier')
