from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from apps.common.fields import MoneyField
from apps.common.money import MAX_QTY
from apps.inventory.serializers import ItemMinimalSerializer
from .models import Purchase, PurchaseLine, Supplier


class SupplierSerializer(serializers.ModelSerializer):
    """Supplier CRUD serializer."""

    class Meta:
        model = Supplier
        fields = [
            'id',
            'code',
            'name',
            'phone',
            'email',
            'address',
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


class SupplierMinimalSerializer(serializers.ModelSerializer):

    class Meta:
        model = Supplier
        fields = ['id', 'code', 'name']
        read_only_fields = fields


class PurchaseLineSerializer(serializers.ModelSerializer):
    item = ItemMinimalSerializer(read_only=True)
    unit_cost = MoneyField(read_only=True)
    line_total = MoneyField(read_only=True)

    class Meta:
        model = PurchaseLine
        fields = ['id', 'item', 'qty', 'unit_cost', 'line_total']
        read_only_fields = fields


class PurchaseListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for purchase lists."""

    supplier = SupplierMinimalSerializer(read_only=True)
    total = MoneyField(read_only=True)

    class Meta:
        model = Purchase
        fields = ['id', 'supplier', 'invoice_no', 'purchased_at', 'status', 'received_at', 'total']
        read_only_fields = fields


class PurchaseSerializer(serializers.ModelSerializer):
    """Full purchase with lines and totals."""

    supplier = SupplierMinimalSerializer(read_only=True)
    lines = PurchaseLineSerializer(many=True, read_only=True)
    sub_total = MoneyField(read_only=True)
    discount = MoneyField(read_only=True)
    total = MoneyField(read_only=True)
    created_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Purchase
        fields = [
            'id',
            'supplier',
            'invoice_no',
            'purchased_at',
            'status',
            'received_at',
            'lines',
            'sub_total',
            'discount',
            'total',
            'created_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class PurchaseLineInputSerializer(serializers.Serializer):
    item_id = serializers.UUIDField()
    qty = serializers.IntegerField(min_value=1, max_value=MAX_QTY)
    unit_cost = MoneyField()


class PurchaseUpdateSerializer(serializers.Serializer):
    supplier_id = serializers.UUIDField(required=False)
    invoice_no = serializers.CharField(max_length=64, required=False, allow_blank=True, allow_null=True)
    purchased_at = serializers.DateTimeField(required=False)
    discount = MoneyField(required=False)
    lines = PurchaseLineInputSerializer(many=True, required=False, allow_empty=False)


class PurchaseCreateSerializer(PurchaseUpdateSerializer):
    supplier_id = serializers.UUIDField()
    discount = MoneyField(required=False, default='0')
    lines = PurchaseLineInputSerializer(many=True, allow_empty=False)
