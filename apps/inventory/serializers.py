from rest_framework import serializers

from apps.common.fields import MoneyField
from apps.common.money import MAX_QTY
from .models import Item, StockMovement, StockMovementType
from .services import get_stock_on_hand


class ItemSerializer(serializers.ModelSerializer):
    """Inventory item with computed stock on hand."""

    cost = MoneyField(required=False)
    price = MoneyField(required=False)
    stock_on_hand = serializers.SerializerMethodField()

    class Meta:
        model = Item
        fields = [
            'id',
            'sku',
            'barcode',
            'name',
            'unit',
            'cost',
            'price',
            'reorder_level',
            'active',
            'stock_on_hand',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'stock_on_hand', 'created_at', 'updated_at']

    def get_stock_on_hand(self, obj):
        return get_stock_on_hand(obj)

    def validate_sku(self, value):
        # Blank SKUs are stored as NULL so the unique constraint ignores them
        if value is None:
            return None
        return value.strip() or None


class ItemMinimalSerializer(serializers.ModelSerializer):

    class Meta:
        model = Item
        fields = ['id', 'sku', 'name', 'unit']
        read_only_fields = fields


class StockMovementSerializer(serializers.ModelSerializer):
    unit_cost = MoneyField(read_only=True)

    class Meta:
        model = StockMovement
        fields = [
            'id',
            'item',
            'type',
            'qty',
            'unit_cost',
            'ref_type',
            'ref_id',
            'note',
            'created_by',
            'created_at',
        ]
        read_only_fields = fields


class StockMovementCreateSerializer(serializers.Serializer):
    """Input for manual stock movements (purchases received, adjustments)."""

    type = serializers.ChoiceField(
        choices=[StockMovementType.PURCHASE_IN, StockMovementType.ADJUSTMENT]
    )
    qty = serializers.IntegerField(min_value=-MAX_QTY, max_value=MAX_QTY)
    unit_cost = MoneyField(required=False, allow_null=True)
    note = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')

    def validate(self, attrs):
        if attrs['qty'] == 0:
            raise serializers.ValidationError({'qty': 'Quantity cannot be zero'})
        if attrs['type'] == StockMovementType.PURCHASE_IN and attrs['qty'] < 0:
            raise serializers.ValidationError({'qty': 'Purchased quantity must be positive'})
        return attrs
