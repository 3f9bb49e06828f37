from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import ContactDetailsViewSet

router = DefaultRouter()
router.register(r'', ContactDetailsViewSet, basename='contact-details')

urlpatterns = [
    path('', include(router.urls)),
]
