from rest_framework import serializers
from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    distributor_name = serializers.ReadOnlyField(source='distributor.distributor_name')
    created_by_name = serializers.SerializerMethodField()

    class Meta:
        model = Payment
        fields = (
            'id', 'distributor', 'distributor_name', 'amount', 'payment_date', 'payment_method',
            'receipt_image', 'created_by', 'created_by_name', 'created_at',
        )
        read_only_fields = fields

    def get_created_by_name(self, obj):
        return obj.created_by.display_name if obj.created_by else None


class PaymentCreateSerializer(serializers.Serializer):
    distributor = serializers.IntegerField(min_value=1)
    # Validated in the service so a bad amount gets the same message from every caller.
    amount = serializers.CharField()
    payment_method = serializers.CharField(max_length=30)
    payment_date = serializers.DateField(required=False)
    receipt_image = serializers.CharField(max_length=500, required=False, allow_blank=True)
