from rest_framework import permissions
from rest_framework.exceptions import NotFound

from .models import User


class RolePermission(permissions.BasePermission):
    role = None

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if user.role != self.role:
            self.message = f"Access denied. {user.role} role is not authorized for this action."
            return False
        return True


class IsCustomer(RolePermission):
    role = User.Role.CUSTOMER


class IsHotel(RolePermission):
    role = User.Role.HOTEL


class IsAdmin(RolePermission):
    role = User.Role.ADMIN


class IsVerifiedHotel(permissions.BasePermission):
    """Reads are open to any hotel account; writes need a verified, active hotel."""

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        hotel = getattr(request.user, 'hotel', None)
        if hotel is None:
            raise NotFound("Hotel profile not found")
        if not hotel.is_verified:
            self.message = "Hotel account is pending verification."
            return False
        if not hotel.is_active:
            self.message = "Hotel account has been deactivated."
            return False
        return True
