from rest_framework import serializers
from .models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    """Customer CRUD serializer."""

    class Meta:
        model = Customer
        fields = [
            'id',
            'code',
            'name',
            'phone',
            'email',
            'address',
            'notes',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name is required')
        return value

    def validate_code(self, value):
        # Blank codes are stored as NULL so the unique constraint ignores them
        if value is None:
            return None
        return value.strip() or None


class CustomerOverviewQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=5, max_value=200, default=50)


class CustomerStatsSerializer(serializers.Serializer):
    tickets = serializers.IntegerField()
    total_spent = serializers.CharField()
    total_paid = serializers.CharField()
    outstanding = serializers.CharField()
    last_visit = serializers.DateTimeField(allow_null=True)
    repeat_customer = serializers.BooleanField()


class CustomerOrderRowSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    code = serializers.CharField()
    status = serializers.CharField()
    payment_status = serializers.CharField()
    received_at = serializers.DateTimeField()
    promised_at = serializers.DateTimeField(allow_null=True)
    total = serializers.CharField()
    paid = serializers.CharField()
    balance = serializers.CharField()


class CustomerOverviewSerializer(serializers.Serializer):
    """Customer with ticket stats and recent orders."""

    customer = CustomerSerializer()
    stats = CustomerStatsSerializer()
    recent_orders = CustomerOrderRowSerializer(many=True)
