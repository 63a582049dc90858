"""
Permission classes shared by the rewards API.

Authorization is a single check: the caller is an authenticated operator
flagged as staff.
"""
from rest_framework.permissions import BasePermission


class IsRewardsAdmin(BasePermission):
    """
    Allow access only to authenticated staff operators.

    Usage:
        class RewardCategoryViewSet(viewsets.ViewSet):
            permission_classes = [IsRewardsAdmin]
    """

    message = 'Only reward administrators can perform this action.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_staff)
