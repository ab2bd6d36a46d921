from rest_framework.permissions import BasePermission


class IsShopAdmin(BasePermission):
    """Users with the ``admin`` role; staff and superusers also qualify"""
    message = 'Administrator access required.'

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.role == 'admin' or user.is_staff or user.is_superuser
