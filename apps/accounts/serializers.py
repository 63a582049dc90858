from rest_framework import serializers
from .models import UserAccount


# =============================================================================
# Input Serializers
# =============================================================================

class UserAccountFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for balance lookups.

    Query Parameters:
        user_id (str): Exact external user id
        username (str): Exact username
    """

    user_id = serializers.CharField(max_length=128, required=False)
    username = serializers.CharField(max_length=150, required=False)


# =============================================================================
# Output Serializers
# =============================================================================

class UserAccountSerializer(serializers.ModelSerializer):
    """Player balance record."""

    amount = serializers.IntegerField(source='balance', read_only=True)

    class Meta:
        model = UserAccount
        fields = [
            'id',
            'user_id',
            'username',
            'amount',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields
