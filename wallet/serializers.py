from rest_framework import serializers
from .models import LedgerEntry


class LedgerEntrySerializer(serializers.ModelSerializer):
    bill_number = serializers.ReadOnlyField(source='bill.bill_number')

    class Meta:
        model = LedgerEntry
        fields = ('id', 'entry_type', 'amount', 'bill', 'bill_number', 'payment', 'note', 'created_at')
        read_only_fields = fields
