from rest_framework import serializers

from apps.common.fields import MoneyField
from .models import RepairService


class RepairServiceSerializer(serializers.ModelSerializer):
    """Repair service catalog serializer."""

    default_price = MoneyField(required=False)

    class Meta:
        model = RepairService
        fields = [
            'id',
            'name',
            'default_price',
            'default_duration_min',
            'active',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name is required')
        return value


class RepairServiceMinimalSerializer(serializers.ModelSerializer):
    """Minimal catalog info for nested serialization."""

    class Meta:
        model = RepairService
        fields = ['id', 'name']
        read_only_fields = fields
