from rest_framework import viewsets
from drf_spectacular.utils import extend_schema, extend_schema_view, OpenApiParameter

from apps.common.permissions import IsRewardsAdmin
from .models import UserAccount
from .serializers import (
    UserAccountFilterSerializer,
    UserAccountSerializer,
)


@extend_schema_view(
    list=extend_schema(
        parameters=[
            OpenApiParameter('user_id', str, description='Exact external user id'),
            OpenApiParameter('username', str, description='Exact username'),
        ],
    ),
)
@extend_schema(tags=['accounts'])
class UserAccountViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only view of player balances.

    Operators use it to check a balance before and after resolving a
    partial refund by hand.

    list: Get balances (filterable by exact user_id / username)
    retrieve: Get a specific balance record
    """

    queryset = UserAccount.objects.all()
    serializer_class = UserAccountSerializer
    permission_classes = [IsRewardsAdmin]

    def get_queryset(self):
        """Filter accounts using input serializer validation."""
        queryset = super().get_queryset()

        filter_serializer = UserAccountFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'user_id' in params:
            queryset = queryset.filter(user_id=params['user_id'])
        if 'username' in params:
            queryset = queryset.filter(username=params['username'])

        return queryset
