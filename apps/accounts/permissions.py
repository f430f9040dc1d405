"""
Role-based permission classes.

Two roles exist: ADMIN may do everything, STAFF may run the shop floor
(intake, repair workflow, payments) but cannot delete records.
"""
from rest_framework.permissions import BasePermission

from .models import UserRole


class IsShopStaff(BasePermission):
    """
    Allows any active user holding the ADMIN or STAFF role.

    Usage:
        class ServiceOrderViewSet(viewsets.ModelViewSet):
            permission_classes = [IsAuthenticated, IsShopStaff]
    """

    message = 'Only shop staff can perform this action.'

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user and user.is_authenticated and
            (user.is_superuser or user.role in (UserRole.ADMIN, UserRole.STAFF))
        )


class IsShopAdmin(BasePermission):
    """
    Allows only ADMIN users (or superusers).

    Usage:
        def get_permissions(self):
            if self.action == 'destroy':
                return [IsAuthenticated(), IsShopAdmin()]
            return super().get_permissions()
    """

    message = 'Only shop administrators can perform this action.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_shop_admin)
