from django.contrib import admin, messages
from django.utils.html import format_html

from apps.common.exceptions import RewardsServiceError
from .models import RewardPurchase, PurchaseStatus, RefundState
from .services import (
    RefundNotSettledError,
    approve_purchase,
    reject_purchase,
    settle_refund,
)


BADGE = (
    '<span style="background: {}; color: {}; padding: 3px 8px; '
    'border-radius: 10px; font-size: 11px;">{}</span>'
)


@admin.register(RewardPurchase)
class RewardPurchaseAdmin(admin.ModelAdmin):
    """
    Admin interface for reward purchases.

    Purchases are read-only here; status only changes through the
    approve / reject actions so refunds are always applied.
    """

    list_display = [
        'reward_name',
        'username',
        'category_name',
        'price',
        'status_badge',
        'refund_badge',
        'created_at',
    ]
    list_filter = ['status', 'refund_state', 'category_name', 'created_at']
    search_fields = ['reward_name', 'username', 'user_id']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']
    readonly_fields = [
        'user_id',
        'username',
        'reward_name',
        'category_name',
        'price',
        'image',
        'status',
        'refund_state',
        'refunded_account',
        'refunded_at',
        'created_at',
    ]

    fieldsets = (
        ('Purchase', {
            'fields': ('reward_name', 'category_name', 'price', 'image', 'created_at')
        }),
        ('Player', {
            'fields': ('user_id', 'username'),
        }),
        ('Review', {
            'fields': ('status', 'refund_state', 'refunded_account', 'refunded_at'),
        }),
    )

    actions = ['approve_selected', 'reject_selected', 'settle_owed_refunds']

    def status_badge(self, obj):
        colors = {
            PurchaseStatus.PENDING: ('#E5C49A', '#2C1810'),
            PurchaseStatus.APPROVED: ('#6B8E5E', 'white'),
            PurchaseStatus.REJECTED: ('#B85C5C', 'white'),
        }
        bg, fg = colors.get(obj.status, ('#ccc', '#666'))
        return format_html(BADGE, bg, fg, obj.get_status_display())
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    def refund_badge(self, obj):
        if obj.refund_state == RefundState.NONE:
            return '-'
        colors = {
            RefundState.OWED: ('#B85C5C', 'white'),
            RefundState.CREDITED: ('#A47449', 'white'),
        }
        bg, fg = colors.get(obj.refund_state, ('#ccc', '#666'))
        return format_html(BADGE, bg, fg, obj.get_refund_state_display())
    refund_badge.short_description = 'Refund'
    refund_badge.admin_order_field = 'refund_state'

    def _run(self, request, queryset, operation, verb):
        done = 0
        for purchase in queryset:
            try:
                operation(purchase_id=purchase.id)
            except RefundNotSettledError as e:
                self.message_user(
                    request,
                    f'{purchase.reward_name} for {purchase.username} was rejected '
                    f'but the refund is still owed: {e}',
                    level=messages.ERROR,
                )
            except RewardsServiceError as e:
                self.message_user(
                    request,
                    f'{purchase.reward_name} for {purchase.username}: {e}',
                    level=messages.WARNING,
                )
            else:
                done += 1
        if done:
            self.message_user(request, f'{verb} {done} purchase(s).')

    @admin.action(description='Approve selected purchases')
    def approve_selected(self, request, queryset):
        self._run(request, queryset, approve_purchase, 'Approved')

    @admin.action(description='Reject selected purchases and refund')
    def reject_selected(self, request, queryset):
        self._run(request, queryset, reject_purchase, 'Rejected')

    @admin.action(description='Credit owed refunds')
    def settle_owed_refunds(self, request, queryset):
        self._run(request, queryset.filter(refund_state=RefundState.OWED), settle_refund, 'Refunded')

    def has_add_permission(self, request):
        """Purchases are created by the player-facing app."""
        return False

    def has_delete_permission(self, request, obj=None):
        return False
