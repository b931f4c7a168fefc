"""Permission classes shared by the TravelEase apps."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


def is_platform_admin(user) -> bool:
    """Back-office operator: role ``admin``, staff or superuser."""
    if not user or not user.is_authenticated:
        return False
    if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
        return True
    return hasattr(user, "is_admin") and user.is_admin()


class IsPlatformAdmin(permissions.BasePermission):
    """Only back-office admins may access the endpoint."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        return is_platform_admin(request.user)


class IsAdminOrReadOnly(permissions.BasePermission):
    """
    Anyone may read; only back-office admins may write.

    Used for the public catalog where inventory is managed from the
    admin panel.
    """

    def has_permission(self, request, view) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return is_platform_admin(request.user)
