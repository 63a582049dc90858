from django.db import models
from django.utils import timezone
import uuid


class PurchaseStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'


class RefundState(models.TextChoices):
    NONE = 'none', 'None'
    OWED = 'owed', 'Owed'
    CREDITED = 'credited', 'Credited'


class RewardPurchase(models.Model):
    """
    A player's purchase of a reward.

    Everything except the status and refund bookkeeping is copied from the
    product and the player at purchase time and never changes afterwards.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Purchaser, as known to the player-facing app
    user_id = models.CharField(max_length=128, db_index=True)
    username = models.CharField(max_length=150)

    # Product snapshot
    reward_name = models.CharField(max_length=200)
    category_name = models.CharField(max_length=100)
    price = models.PositiveIntegerField()
    image = models.CharField(max_length=255, blank=True, default='')

    status = models.CharField(
        max_length=10,
        choices=PurchaseStatus.choices,
        default=PurchaseStatus.PENDING,
        db_index=True,
    )

    # Refund bookkeeping, only used once rejected
    refund_state = models.CharField(
        max_length=10,
        choices=RefundState.choices,
        default=RefundState.NONE,
        db_index=True,
    )
    refunded_account = models.ForeignKey(
        'accounts.UserAccount',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='refunded_purchases',
    )
    refunded_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'reward_purchases'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.username}: {self.reward_name} ({self.get_status_display()})"

    @property
    def is_pending(self):
        return self.status == PurchaseStatus.PENDING

    @property
    def refund_owed(self):
        return self.refund_state == RefundState.OWED
