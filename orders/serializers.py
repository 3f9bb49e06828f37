from rest_framework import serializers
from .models import Order, OrderItem, DamagedProduct


class OrderItemSerializer(serializers.ModelSerializer):
    product_name = serializers.ReadOnlyField(source='product.name')

    class Meta:
        model = OrderItem
        fields = ('id', 'product', 'product_name', 'quantity', 'unit', 'unit_price', 'line_total')


class DamagedProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = DamagedProduct
        fields = ('id', 'product', 'product_name', 'damaged_quantity', 'notes', 'created_at')


class OrderSerializer(serializers.ModelSerializer):
    distributor_name = serializers.ReadOnlyField(source='distributor.distributor_name')
    ordered_by_name = serializers.SerializerMethodField()
    items = OrderItemSerializer(many=True, read_only=True)
    damaged_products = DamagedProductSerializer(many=True, read_only=True)
    bill = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = (
            'id', 'order_number', 'distributor', 'distributor_name', 'order_date', 'delivery_date',
            'status', 'locked', 'total_amount', 'distributor_notes', 'items', 'damaged_products',
            'ordered_by', 'ordered_by_name', 'ordered_by_role',
            'updated_by_role', 'updated_by_id', 'updated_by_name',
            'bill', 'created_at', 'updated_at',
        )
        read_only_fields = fields

    def get_ordered_by_name(self, obj):
        return obj.ordered_by.display_name if obj.ordered_by else None

    def get_bill(self, obj):
        bill = getattr(obj, 'bill', None)
        if bill is None or bill.is_void:
            return None
        return {'id': bill.id, 'bill_number': bill.bill_number, 'total_amount': bill.total_amount, 'locked': bill.locked}


class OrderItemInputSerializer(serializers.Serializer):
    product = serializers.IntegerField(required=False)
    product_id = serializers.IntegerField(required=False, write_only=True)
    quantity = serializers.DecimalField(max_digits=10, decimal_places=3)
    unit = serializers.CharField(max_length=10)

    def validate(self, attrs):
        product = attrs.pop('product_id', None)
        if attrs.get('product') is None:
            if product is None:
                raise serializers.ValidationError({'product': 'This field is required.'})
            attrs['product'] = product
        return attrs


class OrderCreateSerializer(serializers.Serializer):
    distributor = serializers.IntegerField(required=False)
    order_date = serializers.DateField()
    items = OrderItemInputSerializer(many=True)


class OrderUpdateSerializer(serializers.Serializer):
    order_date = serializers.DateField(required=False)
    items = OrderItemInputSerializer(many=True, required=False)


class DamageInputSerializer(serializers.Serializer):
    product = serializers.IntegerField()
    damaged_quantity = serializers.DecimalField(max_digits=10, decimal_places=3, required=False)
    # Older clients send the count of damaged packets.
    damaged_packets = serializers.DecimalField(max_digits=10, decimal_places=3, required=False, write_only=True)
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def validate(self, attrs):
        packets = attrs.pop('damaged_packets', None)
        if attrs.get('damaged_quantity') is None:
            if packets is None:
                raise serializers.ValidationError({'damaged_quantity': 'This field is required.'})
            attrs['damaged_quantity'] = packets
        return attrs


class DeliverSerializer(serializers.Serializer):
    damaged_products = DamageInputSerializer(many=True, required=False)
    delivery_date = serializers.DateField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
