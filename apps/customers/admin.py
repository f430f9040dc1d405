from django.contrib import admin
from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'phone', 'email', 'created_at', 'deleted_at']
    list_filter = ['created_at', 'deleted_at']
    search_fields = ['name', 'code', 'phone', 'email']
    readonly_fields = ['id', 'created_at', 'updated_at']
    ordering = ['-created_at']

    def get_queryset(self, request):
        """Include soft-deleted customers so admins can inspect them."""
        return Customer.all_objects.all()
