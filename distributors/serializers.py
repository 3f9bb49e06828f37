from rest_framework import serializers
from .models import Distributor


class DistributorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Distributor
        fields = ('id', 'distributor_name', 'company_name', 'contact', 'status', 'created_at', 'updated_at')
        read_only_fields = ('created_at', 'updated_at')
