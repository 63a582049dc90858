"""
Balance reconciliation service.

Credits a refund back to the player who made a purchase. The player is
identified by the ``user_id`` and ``username`` copied onto the purchase.
"""

import logging
from typing import Optional

from django.db.models import F, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from apps.accounts.models import UserAccount
from apps.common.exceptions import store_errors

from .exceptions import InvalidRefundAmountError, UserAccountNotFoundError

logger = logging.getLogger(__name__)


def find_user_account(*, user_id: str, username: str) -> Optional[UserAccount]:
    """
    Locate a player's account.

    Tries an exact user_id match first and falls back to an exact username
    match. Empty identifiers are skipped. When several accounts match, the
    oldest wins.
    """
    if user_id:
        account = UserAccount.objects.filter(user_id=user_id).order_by('created_at').first()
        if account is not None:
            return account

    if username:
        return UserAccount.objects.filter(username=username).order_by('created_at').first()

    return None


@store_errors('credit balance')
def credit_user_balance(*, user_id: str, username: str, amount: int) -> Optional[UserAccount]:
    """
    Add ``amount`` to the matching account's balance.

    A missing balance counts as 0. A zero credit changes nothing and returns
    None without looking up the account. Accounts are never created here.

    Args:
        user_id: Purchaser's external user id
        username: Purchaser's username, used when user_id matches nothing
        amount: Points to credit (>= 0)

    Returns:
        The credited account, refreshed, or None for a zero credit

    Raises:
        InvalidRefundAmountError: If amount is negative or not an int
        UserAccountNotFoundError: If no account matches
    """
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise InvalidRefundAmountError(f"Cannot credit {amount!r} points")

    if amount == 0:
        return None

    account = find_user_account(user_id=user_id, username=username)
    if account is None:
        raise UserAccountNotFoundError(
            f"No account for user_id={user_id!r} or username={username!r}; "
            f"cannot process refund"
        )

    UserAccount.objects.filter(id=account.id).update(
        amount=Coalesce(F('amount'), Value(0)) + amount,
        updated_at=timezone.now(),
    )
    account.refresh_from_db(fields=['amount', 'updated_at'])

    logger.info(
        "Credited %d points to account %s (%s); balance now %d",
        amount, account.id, account.username, account.balance,
    )
    return account
