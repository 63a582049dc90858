"""
Service layer unit tests for purchases app.

Tests cover:
- Write-once status transitions
- Refund crediting and account lookup fallback
- Partial failure when the refund cannot be credited
- Owed refund settlement and sweeping
"""

from datetime import timedelta
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.utils import timezone

from apps.accounts.models import UserAccount
from apps.common.exceptions import (
    ValidationError,
    NotFoundError,
    ConflictError,
    PartialFailureError,
    TransportError,
)
from apps.purchases.models import RewardPurchase, PurchaseStatus, RefundState
from apps.purchases.services import (
    find_user_account,
    credit_user_balance,
    list_purchases,
    approve_purchase,
    reject_purchase,
    set_purchase_status,
    settle_refund,
    sweep_owed_refunds,
    get_purchase_status_counts,
)
from apps.purchases.services.exceptions import (
    PurchaseNotFoundError,
    PurchaseAlreadyResolvedError,
    UserAccountNotFoundError,
    RefundNotSettledError,
    InvalidRefundAmountError,
)


MISSING_ID = '00000000-0000-0000-0000-000000000000'


# =============================================================================
# Balance Reconciliation Tests
# =============================================================================

@pytest.mark.django_db
class TestBalanceReconciliation:
    """Tests for balance_reconciliation.py service functions."""

    def test_credit_by_user_id(self, player_account):
        account = credit_user_balance(user_id='u-100', username='player', amount=50)

        assert account == player_account
        player_account.refresh_from_db()
        assert player_account.amount == 150

    def test_falls_back_to_username(self, player_account):
        account = credit_user_balance(user_id='unknown', username='player', amount=20)

        assert account == player_account
        player_account.refresh_from_db()
        assert player_account.amount == 120

    def test_user_id_match_wins_over_username(self, player_account):
        other = UserAccount.objects.create(user_id='u-200', username='someone', amount=0)

        credit_user_balance(user_id='u-200', username='player', amount=10)

        other.refresh_from_db()
        player_account.refresh_from_db()
        assert other.amount == 10
        assert player_account.amount == 100

    def test_missing_amount_counts_as_zero(self, db):
        account = UserAccount.objects.create(user_id='u-1', username='legacy', amount=None)

        credit_user_balance(user_id='u-1', username='legacy', amount=40)

        account.refresh_from_db()
        assert account.amount == 40

    def test_no_match_raises_and_changes_nothing(self, player_account):
        with pytest.raises(UserAccountNotFoundError) as exc_info:
            credit_user_balance(user_id='nobody', username='nobody', amount=50)

        assert isinstance(exc_info.value, NotFoundError)
        assert 'cannot process refund' in str(exc_info.value)
        player_account.refresh_from_db()
        assert player_account.amount == 100
        assert UserAccount.objects.count() == 1

    def test_no_partial_matches(self, player_account):
        with pytest.raises(UserAccountNotFoundError):
            credit_user_balance(user_id='u-1', username='play', amount=5)

    def test_empty_identifiers_match_nothing(self, db):
        UserAccount.objects.create(user_id='', username='', amount=0)

        with pytest.raises(UserAccountNotFoundError):
            credit_user_balance(user_id='', username='', amount=5)

    def test_first_match_by_creation_time(self, db):
        older = UserAccount.objects.create(user_id='dup', username='dup', amount=0)
        newer = UserAccount.objects.create(user_id='dup', username='dup', amount=0)
        UserAccount.objects.filter(id=newer.id).update(
            created_at=older.created_at + timedelta(seconds=1),
        )

        assert find_user_account(user_id='dup', username='dup') == older

    def test_zero_credit_is_noop(self, player_account):
        assert credit_user_balance(user_id='nobody', username='nobody', amount=0) is None

        player_account.refresh_from_db()
        assert player_account.amount == 100

    @pytest.mark.parametrize('amount', [-1, 2.5, '5', True])
    def test_rejects_bad_amount(self, player_account, amount):
        with pytest.raises(InvalidRefundAmountError):
            credit_user_balance(user_id='u-100', username='player', amount=amount)


# =============================================================================
# Purchase Ledger Tests
# =============================================================================

@pytest.mark.django_db
class TestPurchaseLedger:
    """Tests for purchase_ledger.py service functions."""

    def test_approve(self, pending_purchase, player_account):
        purchase = approve_purchase(purchase_id=pending_purchase.id)

        assert purchase.status == PurchaseStatus.APPROVED
        assert purchase.refund_state == RefundState.NONE
        player_account.refresh_from_db()
        assert player_account.amount == 100

    def test_reject_refunds_price(self, pending_purchase, player_account):
        purchase = reject_purchase(purchase_id=pending_purchase.id)

        assert purchase.status == PurchaseStatus.REJECTED
        assert purchase.refund_state == RefundState.CREDITED
        assert purchase.refunded_account == player_account
        assert purchase.refunded_at is not None
        player_account.refresh_from_db()
        assert player_account.amount == 150

    def test_reject_credits_by_username(self, make_purchase, player_account):
        purchase = make_purchase(user_id='changed-id', price=30)

        reject_purchase(purchase_id=purchase.id)

        player_account.refresh_from_db()
        assert player_account.amount == 130

    def test_reject_without_account_is_partial_failure(self, make_purchase, player_account):
        purchase = make_purchase(user_id='ghost', username='ghost')

        with pytest.raises(RefundNotSettledError) as exc_info:
            reject_purchase(purchase_id=purchase.id)

        error = exc_info.value
        assert isinstance(error, PartialFailureError)
        assert error.code == 'partial_failure'
        assert error.entity_id == purchase.id
        assert error.completed_steps == ['status_update']
        assert error.failed_step == 'balance_refund'

        purchase.refresh_from_db()
        assert purchase.status == PurchaseStatus.REJECTED
        assert purchase.refund_state == RefundState.OWED
        player_account.refresh_from_db()
        assert player_account.amount == 100

    def test_reject_with_store_failure_on_credit(self, pending_purchase, player_account):
        with patch(
            'apps.purchases.services.purchase_ledger.credit_user_balance',
            side_effect=TransportError('down'),
        ):
            with pytest.raises(RefundNotSettledError):
                reject_purchase(purchase_id=pending_purchase.id)

        pending_purchase.refresh_from_db()
        assert pending_purchase.status == PurchaseStatus.REJECTED
        assert pending_purchase.refund_state == RefundState.OWED

    def test_reject_twice_credits_once(self, pending_purchase, player_account):
        reject_purchase(purchase_id=pending_purchase.id)

        with pytest.raises(PurchaseAlreadyResolvedError) as exc_info:
            reject_purchase(purchase_id=pending_purchase.id)

        assert isinstance(exc_info.value, ConflictError)
        player_account.refresh_from_db()
        assert player_account.amount == 150

    def test_cannot_reject_approved(self, pending_purchase, player_account):
        approve_purchase(purchase_id=pending_purchase.id)

        with pytest.raises(ConflictError):
            reject_purchase(purchase_id=pending_purchase.id)

        pending_purchase.refresh_from_db()
        assert pending_purchase.status == PurchaseStatus.APPROVED
        player_account.refresh_from_db()
        assert player_account.amount == 100

    def test_cannot_approve_rejected(self, pending_purchase, player_account):
        reject_purchase(purchase_id=pending_purchase.id)

        with pytest.raises(PurchaseAlreadyResolvedError):
            approve_purchase(purchase_id=pending_purchase.id)

    def test_missing_purchase(self, db):
        with pytest.raises(PurchaseNotFoundError):
            approve_purchase(purchase_id=MISSING_ID)
        with pytest.raises(NotFoundError):
            reject_purchase(purchase_id=MISSING_ID)
        with pytest.raises(NotFoundError):
            reject_purchase(purchase_id='not-a-uuid')

    def test_set_purchase_status_dispatches(self, make_purchase, player_account):
        first = make_purchase()
        second = make_purchase()

        assert set_purchase_status(purchase_id=first.id, status='approved').status == 'approved'
        assert set_purchase_status(purchase_id=second.id, status='rejected').status == 'rejected'

    @pytest.mark.parametrize('status', ['pending', 'cancelled', ''])
    def test_set_purchase_status_rejects_other_values(self, pending_purchase, status):
        with pytest.raises(ValidationError):
            set_purchase_status(purchase_id=pending_purchase.id, status=status)

        pending_purchase.refresh_from_db()
        assert pending_purchase.status == PurchaseStatus.PENDING

    def test_list_purchases_newest_first(self, make_purchase):
        now = timezone.now()
        old = make_purchase(reward_name='Old', created_at=now - timedelta(days=1))
        new = make_purchase(reward_name='New', created_at=now)

        assert list_purchases() == [new, old]

    def test_list_purchases_by_status(self, make_purchase):
        make_purchase(status=PurchaseStatus.APPROVED)
        pending = make_purchase()

        assert list_purchases(status='pending') == [pending]

    def test_list_purchases_unknown_status(self, db):
        with pytest.raises(ValidationError):
            list_purchases(status='lost')

    def test_store_failure_becomes_transport_error(self, pending_purchase):
        with patch.object(RewardPurchase.objects, 'filter', side_effect=DatabaseError('down')):
            with pytest.raises(TransportError):
                approve_purchase(purchase_id=pending_purchase.id)

    def test_status_counts(self, make_purchase):
        make_purchase()
        make_purchase()
        make_purchase(status=PurchaseStatus.APPROVED)
        make_purchase(status=PurchaseStatus.REJECTED, refund_state=RefundState.OWED)

        assert get_purchase_status_counts() == {
            'pending': 2,
            'approved': 1,
            'rejected': 1,
            'refunds_owed': 1,
        }


# =============================================================================
# Refund Settlement Tests
# =============================================================================

@pytest.mark.django_db
class TestRefundSettlement:
    """Tests for settle_refund and sweep_owed_refunds."""

    def test_owed_refund_settles_once_account_exists(self, make_purchase):
        purchase = make_purchase(user_id='late', username='late', price=25)
        with pytest.raises(RefundNotSettledError):
            reject_purchase(purchase_id=purchase.id)

        account = UserAccount.objects.create(user_id='late', username='late', amount=5)
        result = sweep_owed_refunds()

        assert result == {'settled': [purchase.id], 'failed': []}
        account.refresh_from_db()
        assert account.amount == 30
        purchase.refresh_from_db()
        assert purchase.refund_state == RefundState.CREDITED

    def test_settle_is_idempotent(self, make_purchase, player_account):
        purchase = make_purchase(status=PurchaseStatus.REJECTED, refund_state=RefundState.OWED)

        settle_refund(purchase_id=purchase.id)
        settle_refund(purchase_id=purchase.id)

        player_account.refresh_from_db()
        assert player_account.amount == 150

    def test_settle_ignores_purchases_without_owed_refund(self, pending_purchase, player_account):
        purchase = settle_refund(purchase_id=pending_purchase.id)

        assert purchase.status == PurchaseStatus.PENDING
        assert purchase.refund_state == RefundState.NONE
        player_account.refresh_from_db()
        assert player_account.amount == 100

    def test_settle_zero_price(self, make_purchase):
        purchase = make_purchase(
            user_id='nobody',
            username='nobody',
            price=0,
            status=PurchaseStatus.REJECTED,
            refund_state=RefundState.OWED,
        )

        purchase = settle_refund(purchase_id=purchase.id)

        assert purchase.refund_state == RefundState.CREDITED
        assert purchase.refunded_account is None

    def test_settle_failure_keeps_refund_owed(self, make_purchase):
        purchase = make_purchase(
            user_id='ghost',
            username='ghost',
            status=PurchaseStatus.REJECTED,
            refund_state=RefundState.OWED,
        )

        with pytest.raises(UserAccountNotFoundError):
            settle_refund(purchase_id=purchase.id)

        purchase.refresh_from_db()
        assert purchase.refund_state == RefundState.OWED

    def test_sweep_reports_failures(self, make_purchase, player_account):
        now = timezone.now()
        good = make_purchase(
            status=PurchaseStatus.REJECTED,
            refund_state=RefundState.OWED,
            created_at=now - timedelta(minutes=1),
        )
        bad = make_purchase(
            created_at=now,
            user_id='ghost',
            username='ghost',
            status=PurchaseStatus.REJECTED,
            refund_state=RefundState.OWED,
        )

        result = sweep_owed_refunds()

        assert result == {'settled': [good.id], 'failed': [bad.id]}
        player_account.refresh_from_db()
        assert player_account.amount == 150
