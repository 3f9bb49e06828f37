from rest_framework import serializers
from .models import ContactDetails


class ContactDetailsSerializer(serializers.ModelSerializer):
    class Meta:
        model = ContactDetails
        fields = (
            'id', 'admin_name', 'admin_contact', 'admin_email', 'admin_address',
            'staff_name', 'staff_contact', 'created_at', 'updated_at',
        )
        read_only_fields = ('created_at', 'updated_at')
