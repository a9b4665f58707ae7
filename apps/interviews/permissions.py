# apps/interviews/permissions.py
"""
Permission classes for interview-related views.

Role checks only; whether an actor may touch a particular interview is
decided by InterviewService.
"""

from rest_framework.permissions import BasePermission


class IsAdmin(BasePermission):
    """
    Platform admin: role 'admin', or is_staff / is_superuser.
    """
    message = "You must be an admin to access this resource."

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.is_platform_admin
        )


class IsCandidate(BasePermission):
    message = "You must be a candidate to access this resource."

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.is_candidate
        )


class IsCompanyMember(BasePermission):
    """
    Company account linked to a company, or the owner of one.
    """
    message = "You must belong to a company to access this resource."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if user.role == user.ROLE_COMPANY and user.company_id is not None:
            return True
        return user.owned_companies.exists()


class IsAdminOrCompanyMember(BasePermission):
    message = "You must be an admin or belong to a company to access this resource."

    def has_permission(self, request, view):
        return (
            IsAdmin().has_permission(request, view) or
            IsCompanyMember().has_permission(request, view)
        )
