from django.contrib import admin
from .models import RepairService


@admin.register(RepairService)
class RepairServiceAdmin(admin.ModelAdmin):
    list_display = ['name', 'default_price', 'default_duration_min', 'active']
    list_filter = ['active']
    search_fields = ['name']
    readonly_fields = ['id', 'created_at', 'updated_at']
