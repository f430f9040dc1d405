from django.contrib import admin
from .models import StaffMember


@admin.register(StaffMember)
class StaffMemberAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'position', 'status', 'phone', 'user']
    list_filter = ['status', 'position']
    search_fields = ['name', 'code', 'phone']
    readonly_fields = ['id', 'created_at', 'updated_at']
    raw_id_fields = ['user']
