"""
Purchase ledger service.

Drives purchases from pending to approved or rejected. The status check and
the status write are a single conditional UPDATE, so a purchase can only be
resolved once even when two admins act on it at the same time.

Rejecting is two steps against two tables:

1. ``status = rejected`` and ``refund_state = owed`` in one UPDATE
2. credit the balance and mark the refund ``credited`` in one transaction

If step 2 fails the rejection stands and the refund stays owed until
``settle_refund`` (or ``manage.py sweep_refunds``) succeeds.
"""

import logging
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Count
from django.utils import timezone

from apps.common.exceptions import RewardsServiceError, store_errors
from apps.purchases.models import RewardPurchase, PurchaseStatus, RefundState

from .balance_reconciliation import credit_user_balance
from .exceptions import (
    InvalidPurchaseInputError,
    PurchaseNotFoundError,
    PurchaseAlreadyResolvedError,
    RefundNotSettledError,
)

logger = logging.getLogger(__name__)


def _validate_status(status: str) -> str:
    if status not in PurchaseStatus.values:
        raise InvalidPurchaseInputError(
            f"Unknown purchase status {status!r}; expected one of {', '.join(PurchaseStatus.values)}"
        )
    return status


def _resolve(purchase: RewardPurchase, **changes) -> None:
    """Apply changes only while the purchase is still pending."""
    updated = (
        RewardPurchase.objects
        .filter(id=purchase.id, status=PurchaseStatus.PENDING)
        .update(**changes)
    )
    if not updated:
        current = (
            RewardPurchase.objects
            .filter(id=purchase.id)
            .values_list('status', flat=True)
            .first()
        )
        raise PurchaseAlreadyResolvedError(
            f"Purchase {purchase.id} is already {current or 'gone'}"
        )


@store_errors('list purchases')
def list_purchases(*, status: Optional[str] = None):
    """
    Return purchases newest first, optionally limited to one status.

    Raises:
        InvalidPurchaseInputError: If status is not a known value
    """
    queryset = RewardPurchase.objects.order_by('-created_at')
    if status:
        queryset = queryset.filter(status=_validate_status(status))
    return list(queryset)


@store_errors('get purchase')
def get_purchase_by_id(*, purchase_id: UUID) -> RewardPurchase:
    """
    Get a purchase by ID.

    Raises:
        PurchaseNotFoundError: If purchase doesn't exist
    """
    try:
        return RewardPurchase.objects.get(id=purchase_id)
    except (RewardPurchase.DoesNotExist, DjangoValidationError, ValueError):
        raise PurchaseNotFoundError(f"Purchase with ID {purchase_id} not found")


@store_errors('approve purchase')
def approve_purchase(*, purchase_id: UUID) -> RewardPurchase:
    """
    Approve a pending purchase. Balances are not touched.

    Raises:
        PurchaseNotFoundError: If purchase doesn't exist
        PurchaseAlreadyResolvedError: If purchase is not pending
    """
    purchase = get_purchase_by_id(purchase_id=purchase_id)
    _resolve(purchase, status=PurchaseStatus.APPROVED)

    purchase.refresh_from_db()
    logger.info("Approved purchase %s (%s, %s)", purchase.id, purchase.username, purchase.reward_name)
    return purchase


@store_errors('reject purchase')
def reject_purchase(*, purchase_id: UUID) -> RewardPurchase:
    """
    Reject a pending purchase and refund its price to the purchaser.

    Raises:
        PurchaseNotFoundError: If purchase doesn't exist
        PurchaseAlreadyResolvedError: If purchase is not pending
        RefundNotSettledError: If the purchase was rejected but the refund
            could not be credited; the refund stays owed
    """
    purchase = get_purchase_by_id(purchase_id=purchase_id)
    _resolve(purchase, status=PurchaseStatus.REJECTED, refund_state=RefundState.OWED)
    logger.info("Rejected purchase %s (%s, %s)", purchase.id, purchase.username, purchase.reward_name)

    try:
        return settle_refund(purchase_id=purchase.id)
    except RewardsServiceError as e:
        logger.warning("Refund for rejected purchase %s not credited: %s", purchase.id, e)
        raise RefundNotSettledError(
            f"Purchase {purchase.id} was rejected but its refund is still owed: {e}",
            completed_steps=['status_update'],
            failed_step='balance_refund',
            entity_id=purchase.id,
        ) from e


@store_errors('set purchase status')
def set_purchase_status(*, purchase_id: UUID, status: str) -> RewardPurchase:
    """
    Move a pending purchase to ``approved`` or ``rejected``.

    Raises:
        InvalidPurchaseInputError: If status is neither approved nor rejected
        (and everything approve_purchase / reject_purchase raise)
    """
    if status == PurchaseStatus.APPROVED:
        return approve_purchase(purchase_id=purchase_id)
    if status == PurchaseStatus.REJECTED:
        return reject_purchase(purchase_id=purchase_id)
    raise InvalidPurchaseInputError(
        f"Cannot set purchase status to {status!r}; use approved or rejected"
    )


@store_errors('settle refund')
def settle_refund(*, purchase_id: UUID) -> RewardPurchase:
    """
    Credit an owed refund and mark it credited.

    The purchase row is locked for the duration, so a refund is credited at
    most once. Purchases with no owed refund are returned unchanged.

    Raises:
        PurchaseNotFoundError: If purchase doesn't exist
        UserAccountNotFoundError: If no account matches the purchaser
    """
    with transaction.atomic():
        try:
            purchase = RewardPurchase.objects.select_for_update().get(id=purchase_id)
        except (RewardPurchase.DoesNotExist, DjangoValidationError, ValueError):
            raise PurchaseNotFoundError(f"Purchase with ID {purchase_id} not found")

        if purchase.refund_state != RefundState.OWED:
            return purchase

        account = credit_user_balance(
            user_id=purchase.user_id,
            username=purchase.username,
            amount=purchase.price,
        )

        purchase.refund_state = RefundState.CREDITED
        purchase.refunded_account = account
        purchase.refunded_at = timezone.now()
        purchase.save(update_fields=['refund_state', 'refunded_account', 'refunded_at'])

    logger.info("Settled refund of %d points for purchase %s", purchase.price, purchase.id)
    return purchase


def sweep_owed_refunds() -> dict:
    """
    Try to settle every owed refund, oldest first.

    Failures are logged and skipped; the refund stays owed.

    Returns:
        dict with ``settled`` and ``failed`` lists of purchase ids
    """
    with store_errors('list owed refunds'):
        owed_ids = list(
            RewardPurchase.objects
            .filter(refund_state=RefundState.OWED)
            .order_by('created_at')
            .values_list('id', flat=True)
        )

    settled, failed = [], []
    for purchase_id in owed_ids:
        try:
            settle_refund(purchase_id=purchase_id)
        except RewardsServiceError as e:
            logger.warning("Owed refund for purchase %s still unsettled: %s", purchase_id, e)
            failed.append(purchase_id)
        else:
            settled.append(purchase_id)

    logger.info("Refund sweep settled %d, failed %d", len(settled), len(failed))
    return {'settled': settled, 'failed': failed}


@store_errors('count purchases')
def get_purchase_status_counts() -> dict:
    """Number of purchases per status plus the number of owed refunds."""
    counts = {value: 0 for value in PurchaseStatus.values}
    rows = (
        RewardPurchase.objects
        .order_by()
        .values('status')
        .annotate(total=Count('id'))
        .values_list('status', 'total')
    )
    counts.update(dict(rows))
    counts['refunds_owed'] = RewardPurchase.objects.filter(refund_state=RefundState.OWED).count()
    return counts
