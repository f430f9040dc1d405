from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from apps.catalog.serializers import RepairServiceMinimalSerializer
from apps.common.fields import MoneyField
from apps.common.money import MAX_QTY
from apps.customers.serializers import CustomerSerializer
from apps.inventory.serializers import ItemMinimalSerializer
from apps.staff.serializers import StaffMinimalSerializer
from .models import (
    Payment,
    PaymentMethod,
    ServiceLine,
    ServiceOrder,
    ServiceOrderStatus,
    ServicePart,
    ServiceStatusHistory,
)
from .services import get_order_balance


# =============================================================================
# Output serializers
# =============================================================================

class ServiceLineSerializer(serializers.ModelSerializer):
    price = MoneyField(read_only=True)
    line_total = serializers.SerializerMethodField()
    repair_service = RepairServiceMinimalSerializer(read_only=True)

    class Meta:
        model = ServiceLine
        fields = ['id', 'repair_service', 'description', 'qty', 'price', 'line_total', 'created_at']
        read_only_fields = fields

    def get_line_total(self, obj):
        return MoneyField().to_representation(obj.price * obj.qty)


class ServicePartSerializer(serializers.ModelSerializer):
    unit_price = MoneyField(read_only=True)
    line_total = serializers.SerializerMethodField()
    item = ItemMinimalSerializer(read_only=True)

    class Meta:
        model = ServicePart
        fields = ['id', 'item', 'qty', 'unit_price', 'line_total', 'created_at']
        read_only_fields = fields

    def get_line_total(self, obj):
        return MoneyField().to_representation(obj.unit_price * obj.qty)


class ServiceStatusHistorySerializer(serializers.ModelSerializer):
    changed_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = ServiceStatusHistory
        fields = ['id', 'status', 'note', 'changed_by', 'changed_at']
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    amount = MoneyField(read_only=True)
    received_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Payment
        fields = ['id', 'amount', 'method', 'paid_at', 'note', 'received_by', 'is_refund', 'created_at']
        read_only_fields = fields


class ServiceOrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order lists."""

    customer_name = serializers.CharField(source='customer.name', read_only=True)
    customer_phone = serializers.CharField(source='customer.phone', read_only=True)
    assigned_staff_name = serializers.CharField(
        source='assigned_staff.name', read_only=True, default=None
    )
    total = MoneyField(read_only=True)

    class Meta:
        model = ServiceOrder
        fields = [
            'id',
            'code',
            'vet_code',
            'customer',
            'customer_name',
            'customer_phone',
            'assigned_staff_name',
            'shoe_brand',
            'shoe_type',
            'pair_count',
            'urgent',
            'status',
            'payment_status',
            'total',
            'received_at',
            'promised_at',
        ]
        read_only_fields = fields


class ServiceOrderSerializer(serializers.ModelSerializer):
    """Full order with lines, parts, history, payments and balance."""

    customer = CustomerSerializer(read_only=True)
    assigned_staff = StaffMinimalSerializer(read_only=True)
    created_by = UserMinimalSerializer(read_only=True)
    sub_total = MoneyField(read_only=True)
    discount = MoneyField(read_only=True)
    total = MoneyField(read_only=True)
    lines = ServiceLineSerializer(many=True, read_only=True)
    parts = ServicePartSerializer(many=True, read_only=True)
    status_history = ServiceStatusHistorySerializer(many=True, read_only=True)
    payments = PaymentSerializer(many=True, read_only=True)
    balance = serializers.SerializerMethodField()

    class Meta:
        model = ServiceOrder
        fields = [
            'id',
            'code',
            'vet_code',
            'customer',
            'assigned_staff',
            'shoe_brand',
            'shoe_color',
            'shoe_size',
            'shoe_type',
            'pair_count',
            'urgent',
            'before_photo_url',
            'after_photo_url',
            'problem_desc',
            'received_at',
            'promised_at',
            'status',
            'payment_status',
            'sub_total',
            'discount',
            'total',
            'balance',
            'lines',
            'parts',
            'status_history',
            'payments',
            'created_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_balance(self, obj):
        balance = get_order_balance(obj)
        return {
            'paid': balance['paid'],
            'balance': balance['balance'],
        }


# =============================================================================
# Input serializers
# =============================================================================

class ServiceLineInputSerializer(serializers.Serializer):
    repair_service_id = serializers.UUIDField(required=False, allow_null=True)
    description = serializers.CharField(
        max_length=255, required=False, allow_blank=True, allow_null=True
    )
    qty = serializers.IntegerField(min_value=1, max_value=MAX_QTY, default=1)
    price = MoneyField(required=False, allow_null=True)


class ServiceOrderHeaderSerializer(serializers.Serializer):
    """Header fields shared by create and update. All optional on update."""

    customer_id = serializers.UUIDField()
    assigned_staff_id = serializers.UUIDField(required=False, allow_null=True)
    vet_code = serializers.CharField(max_length=64, required=False, allow_blank=True, allow_null=True)
    shoe_brand = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    shoe_color = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    shoe_size = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True)
    shoe_type = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    pair_count = serializers.IntegerField(min_value=1, max_value=10, required=False)
    urgent = serializers.BooleanField(required=False)
    before_photo_url = serializers.URLField(max_length=500, required=False, allow_blank=True, allow_null=True)
    after_photo_url = serializers.URLField(max_length=500, required=False, allow_blank=True, allow_null=True)
    problem_desc = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    received_at = serializers.DateTimeField(required=False)
    promised_at = serializers.DateTimeField(required=False, allow_null=True)


class ServiceOrderCreateSerializer(ServiceOrderHeaderSerializer):
    """Intake: header plus optional initial lines and deposit."""

    code = serializers.CharField(min_length=3, max_length=40, required=False)
    lines = ServiceLineInputSerializer(many=True, required=False, default=list)
    deposit_amount = MoneyField(required=False, default='0')
    deposit_method = serializers.ChoiceField(
        choices=PaymentMethod.choices, default=PaymentMethod.CASH
    )
    deposit_note = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)


class ServicePartInputSerializer(serializers.Serializer):
    item_id = serializers.UUIDField()
    qty = serializers.IntegerField(min_value=1, max_value=MAX_QTY)
    unit_price = MoneyField()


class StatusInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ServiceOrderStatus.choices)
    note = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)


class MarkReadySerializer(serializers.Serializer):
    discount = MoneyField(required=False)


class DeliverSerializer(serializers.Serializer):
    note = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)


class DiscountSerializer(serializers.Serializer):
    discount = MoneyField()


class PaymentInputSerializer(serializers.Serializer):
    amount = MoneyField(positive=True)
    method = serializers.ChoiceField(choices=PaymentMethod.choices, default=PaymentMethod.CASH)
    paid_at = serializers.DateTimeField(required=False)
    note = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)


class RefundInputSerializer(serializers.Serializer):
    amount = MoneyField(required=False, positive=True)
    reason = serializers.CharField(max_length=200)
