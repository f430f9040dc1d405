from django.contrib import admin
from django.utils.html import format_html

from .models import Payment, ServiceLine, ServiceOrder, ServicePart, ServiceStatusHistory


class ServiceLineInline(admin.TabularInline):
    model = ServiceLine
    extra = 0
    fields = ['description', 'repair_service', 'qty', 'price']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class ServicePartInline(admin.TabularInline):
    model = ServicePart
    extra = 0
    fields = ['item', 'qty', 'unit_price']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class ServiceStatusHistoryInline(admin.TabularInline):
    model = ServiceStatusHistory
    extra = 0
    fields = ['status', 'note', 'changed_by', 'changed_at']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    fields = ['amount', 'method', 'paid_at', 'note', 'received_by']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(ServiceOrder)
class ServiceOrderAdmin(admin.ModelAdmin):
    """
    Orders are browsable here; money and workflow changes go through the
    API so totals, ledgers and audit entries stay consistent.
    """

    list_display = [
        'code', 'customer', 'status_badge', 'payment_status', 'total', 'urgent', 'received_at'
    ]
    list_filter = ['status', 'payment_status', 'urgent', 'received_at']
    search_fields = ['code', 'vet_code', 'customer__name', 'customer__phone']
    date_hierarchy = 'received_at'
    readonly_fields = [
        'id', 'code', 'status', 'payment_status', 'sub_total', 'discount', 'total',
        'created_by', 'created_at', 'updated_at', 'deleted_at',
    ]
    inlines = [ServiceLineInline, ServicePartInline, PaymentInline, ServiceStatusHistoryInline]

    fieldsets = (
        ('Ticket', {
            'fields': ('id', 'code', 'vet_code', 'customer', 'assigned_staff', 'urgent')
        }),
        ('Shoes', {
            'fields': (
                'shoe_brand', 'shoe_color', 'shoe_size', 'shoe_type', 'pair_count',
                'problem_desc', 'before_photo_url', 'after_photo_url',
            )
        }),
        ('Workflow', {
            'fields': ('status', 'received_at', 'promised_at')
        }),
        ('Money', {
            'fields': ('payment_status', 'sub_total', 'discount', 'total')
        }),
        ('Metadata', {
            'fields': ('created_by', 'created_at', 'updated_at', 'deleted_at'),
            'classes': ('collapse',)
        }),
    )

    def status_badge(self, obj):
        colors = {
            'RECEIVED': 'gray',
            'CLEANING': 'teal',
            'REPAIRING': 'orange',
            'READY': 'blue',
            'DELIVERED': 'green',
            'CANCELLED': 'red',
        }
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            colors.get(obj.status, 'black'),
            obj.get_status_display(),
        )
    status_badge.short_description = 'Status'

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['service_order', 'amount', 'method', 'paid_at', 'received_by']
    list_filter = ['method', 'paid_at']
    search_fields = ['service_order__code', 'note']
    readonly_fields = [f.name for f in Payment._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
