from rest_framework import permissions


def _has_role(request, *roles):
    user = request.user
    return bool(user and user.is_authenticated and getattr(user, 'role', None) in roles)


class IsAdminUser(permissions.BasePermission):
    """
    Allows access only to users with the 'admin' role.
    """
    def has_permission(self, request, view):
        return _has_role(request, 'admin')

class IsAdminOrStaff(permissions.BasePermission):
    """
    Allows access to users with the 'admin' or 'staff' role.
    """
    def has_permission(self, request, view):
        return _has_role(request, 'admin', 'staff')

class IsDistributorUser(permissions.BasePermission):
    """
    Allows access only to distributor logins linked to a distributor record.
    """
    def has_permission(self, request, view):
        return _has_role(request, 'distributor') and request.user.distributor_id is not None
