from rest_framework import serializers
from .models import RewardPurchase, PurchaseStatus


# =============================================================================
# Input Serializers
# =============================================================================

class PurchaseFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for purchase listing.

    Query Parameters:
        status (str): pending, approved or rejected
    """

    status = serializers.ChoiceField(choices=PurchaseStatus.choices, required=False)


class PurchaseStatusInputSerializer(serializers.Serializer):
    """Validate status change requests."""

    status = serializers.CharField(help_text='approved or rejected')


# =============================================================================
# Output Serializers
# =============================================================================

class RewardPurchaseSerializer(serializers.ModelSerializer):
    """Purchase as shown to admins."""

    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = RewardPurchase
        fields = [
            'id',
            'user_id',
            'username',
            'reward_name',
            'category_name',
            'price',
            'image',
            'status',
            'status_display',
            'refund_state',
            'refunded_account',
            'refunded_at',
            'created_at',
        ]
        read_only_fields = fields


class PurchaseStatusChangeSerializer(serializers.Serializer):
    """Result of a status change: the updated purchase and a fresh list."""

    purchase = RewardPurchaseSerializer()
    purchases = RewardPurchaseSerializer(many=True)


class PurchaseSummarySerializer(serializers.Serializer):
    pending = serializers.IntegerField()
    approved = serializers.IntegerField()
    rejected = serializers.IntegerField()
    refunds_owed = serializers.IntegerField()
