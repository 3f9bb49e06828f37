from rest_framework import serializers
from .models import Bill, BillItem


class BillItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = BillItem
        fields = (
            'id', 'product', 'product_name', 'ordered_quantity', 'damaged_quantity',
            'quantity', 'unit', 'price', 'line_total',
        )


class BillSerializer(serializers.ModelSerializer):
    distributor_name = serializers.ReadOnlyField(source='distributor.distributor_name')
    order_number = serializers.ReadOnlyField(source='order.order_number')
    items = BillItemSerializer(many=True, read_only=True)
    has_damage = serializers.BooleanField(read_only=True)

    class Meta:
        model = Bill
        fields = (
            'id', 'bill_number', 'distributor', 'distributor_name', 'order', 'order_number',
            'bill_date', 'subtotal', 'total_damaged_amount', 'total_amount', 'has_damage',
            'locked', 'items', 'updated_by_role', 'updated_by_id', 'updated_by_name',
            'created_at', 'updated_at',
        )
        read_only_fields = fields


class BillFromOrderSerializer(serializers.Serializer):
    order = serializers.IntegerField(min_value=1)
