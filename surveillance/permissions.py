"""
Custom permission classes for role based access control.
"""
from rest_framework.permissions import BasePermission

REPORT_ROLES = {"doctor", "admin"}


class IsReportViewer(BasePermission):
    """Doctors and administrators may read statistics."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "role", None) in REPORT_ROLES)
