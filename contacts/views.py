import logging

from rest_framework import viewsets, permissions as drf_permissions
from .models import ContactDetails
from .serializers import ContactDetailsSerializer
from accounts.permissions import IsAdminUser

logger = logging.getLogger(__name__)


class ContactDetailsViewSet(viewsets.ModelViewSet):
    queryset = ContactDetails.objects.all().order_by('-created_at', '-id')
    serializer_class = ContactDetailsSerializer
    pagination_class = None

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            permission_classes = [drf_permissions.IsAuthenticated]
        else:
            permission_classes = [IsAdminUser]
        return [permission() for permission in permission_classes]

    def perform_create(self, serializer):
        contact = serializer.save()
        logger.info("Contact details %s added by %s", contact.pk, self.request.user.username)

    def perform_update(self, serializer):
        contact = serializer.save()
        logger.info("Contact details %s updated by %s", contact.pk, self.request.user.username)

    def perform_destroy(self, instance):
        logger.info("Contact details %s deleted by %s", instance.pk, self.request.user.username)
        instance.delete()
