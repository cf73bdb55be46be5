"""
Custom permission classes for role based access control.
"""
from rest_framework.permissions import BasePermission, SAFE_METHODS

from core.models import User

CLINICAL_ROLES = {User.ROLE_ADMIN, User.ROLE_DOCTOR, User.ROLE_NURSE}


class IsAdminRole(BasePermission):
    """Allow access only to users with the Admin role (or Django superusers)."""
    message = 'Only administrators can manage user accounts.'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        return user.is_superuser or getattr(user, "role", None) == User.ROLE_ADMIN


class IsClinicalOrReadOnly(BasePermission):
    """Receptionists may read clinical records; clinicians and admins may change them."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return user.is_superuser or getattr(user, "role", None) in CLINICAL_ROLES
