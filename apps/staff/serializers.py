from rest_framework import serializers

from apps.common.fields import MoneyField
from .models import StaffMember


class StaffMemberSerializer(serializers.ModelSerializer):
    """Staff CRUD serializer."""

    salary = MoneyField(required=False)

    class Meta:
        model = StaffMember
        fields = [
            'id',
            'code',
            'name',
            'phone',
            'position',
            'salary',
            'status',
            'user',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_code(self, value):
        if value is None:
            return None
        return value.strip() or None


class StaffMinimalSerializer(serializers.ModelSerializer):
    """Minimal staff info for nested serialization."""

    class Meta:
        model = StaffMember
        fields = ['id', 'code', 'name']
        read_only_fields = fields
