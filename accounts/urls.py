from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView
from .views import (
    RegisterDistributorView,
    UserDetailView,
    UserProfileUpdateView,
    ChangePasswordView,
    UserViewSet,
    RoleTokenObtainPairView,
)

router = DefaultRouter()
router.register(r'users', UserViewSet, basename='user')

urlpatterns = [
    path('login/', RoleTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('register-distributor/', RegisterDistributorView.as_view(), name='register_distributor'),
    path('me/', UserDetailView.as_view(), name='user_detail'),
    path('me/profile/', UserProfileUpdateView.as_view(), name='user_profile_update'),
    path('me/password/', ChangePasswordView.as_view(), name='change_password'),
    path('', include(router.urls)),
]
