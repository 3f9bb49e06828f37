from rest_framework import serializers
from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    distributor_name = serializers.ReadOnlyField(source='distributor.distributor_name')
    price_per_pack = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'distributor', 'distributor_name', 'name', 'pack_quantity', 'pack_unit',
            'cost_per_pack', 'cost_per_packet', 'packets_per_pack', 'price_per_pack',
            'image_url', 'is_active', 'created_at', 'updated_at',
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_pack_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError('Pack quantity must be greater than 0.')
        return value

    def validate(self, attrs):
        def current(field):
            if field in attrs:
                return attrs[field]
            return getattr(self.instance, field, None)

        for field in ('cost_per_pack', 'cost_per_packet'):
            value = attrs.get(field)
            if value is not None and value < 0:
                raise serializers.ValidationError({field: 'Cost cannot be negative.'})
        price = Product.derive_price_per_pack(
            current('cost_per_pack'), current('cost_per_packet'), current('packets_per_pack')
        )
        if price is None:
            raise serializers.ValidationError(
                'Either cost per pack, or cost per packet with packets per pack, is required.'
            )
        return attrs
