from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, extend_schema_view, OpenApiParameter

from apps.common.handlers import error_payload, status_for_error
from apps.common.permissions import IsRewardsAdmin
from .models import RewardPurchase, PurchaseStatus
from .serializers import (
    PurchaseFilterSerializer,
    PurchaseStatusInputSerializer,
    RewardPurchaseSerializer,
    PurchaseStatusChangeSerializer,
    PurchaseSummarySerializer,
)
from .services import (
    RefundNotSettledError,
    get_purchase_by_id,
    list_purchases,
    set_purchase_status,
    settle_refund,
    get_purchase_status_counts,
)


@extend_schema_view(
    list=extend_schema(
        parameters=[
            OpenApiParameter('status', str, enum=PurchaseStatus.values, description='Filter by status'),
        ],
    ),
)
@extend_schema(tags=['purchases'])
class RewardPurchaseViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for reward purchases.

    Purchases are created by the player-facing app; admins only review them.

    list: Get purchases, newest first (filterable by status)
    retrieve: Get a specific purchase
    status: Approve or reject a pending purchase
    approve: Approve a pending purchase
    reject: Reject a pending purchase and refund its price
    settle_refund: Retry crediting an owed refund
    summary: Purchase counts per status
    """

    queryset = RewardPurchase.objects.order_by('-created_at')
    serializer_class = RewardPurchaseSerializer
    permission_classes = [IsRewardsAdmin]

    def get_queryset(self):
        """Filter purchases using input serializer validation."""
        queryset = super().get_queryset()

        if self.action == 'list':
            filter_serializer = PurchaseFilterSerializer(data=self.request.query_params)
            filter_serializer.is_valid(raise_exception=True)
            purchase_status = filter_serializer.validated_data.get('status')
            if purchase_status:
                queryset = queryset.filter(status=purchase_status)

        return queryset

    def _status_change_response(self, purchase_id, extra=None, status_code=status.HTTP_200_OK):
        """Updated purchase plus a fresh read of the purchase list."""
        data = dict(extra or {})
        data['purchase'] = RewardPurchaseSerializer(get_purchase_by_id(purchase_id=purchase_id)).data
        data['purchases'] = RewardPurchaseSerializer(list_purchases(), many=True).data
        return Response(data, status=status_code)

    def _change_status(self, purchase_id, new_status):
        try:
            set_purchase_status(purchase_id=purchase_id, status=new_status)
        except RefundNotSettledError as e:
            return self._status_change_response(
                purchase_id,
                extra=error_payload(e),
                status_code=status_for_error(e),
            )
        return self._status_change_response(purchase_id)

    @extend_schema(request=PurchaseStatusInputSerializer, responses=PurchaseStatusChangeSerializer)
    @action(detail=True, methods=['post'], url_path='status')
    def set_status(self, request, pk=None):
        """Move a pending purchase to approved or rejected."""
        serializer = PurchaseStatusInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return self._change_status(pk, serializer.validated_data['status'])

    @extend_schema(request=None, responses=PurchaseStatusChangeSerializer)
    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        return self._change_status(pk, PurchaseStatus.APPROVED)

    @extend_schema(request=None, responses=PurchaseStatusChangeSerializer)
    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        return self._change_status(pk, PurchaseStatus.REJECTED)

    @extend_schema(request=None, responses=PurchaseStatusChangeSerializer)
    @action(detail=True, methods=['post'], url_path='settle_refund', url_name='settle-refund')
    def settle(self, request, pk=None):
        """Credit an owed refund. Purchases with nothing owed are left as they are."""
        settle_refund(purchase_id=pk)
        return self._status_change_response(pk)

    @extend_schema(responses=PurchaseSummarySerializer)
    @action(detail=False, methods=['get'])
    def summary(self, request):
        serializer = PurchaseSummarySerializer(get_purchase_status_counts())
        return Response(serializer.data)
