"""
Purchases app services layer.

The ledger resolves pending purchases; the reconciler credits refunds back
to player balances.
"""

from .exceptions import (
    PurchaseServiceError,
    InvalidPurchaseInputError,
    InvalidRefundAmountError,
    PurchaseNotFoundError,
    PurchaseAlreadyResolvedError,
    UserAccountNotFoundError,
    RefundNotSettledError,
)

from .balance_reconciliation import (
    find_user_account,
    credit_user_balance,
)

from .purchase_ledger import (
    list_purchases,
    get_purchase_by_id,
    approve_purchase,
    reject_purchase,
    set_purchase_status,
    settle_refund,
    sweep_owed_refunds,
    get_purchase_status_counts,
)


__all__ = [
    # Exceptions
    'PurchaseServiceError',
    'InvalidPurchaseInputError',
    'InvalidRefundAmountError',
    'PurchaseNotFoundError',
    'PurchaseAlreadyResolvedError',
    'UserAccountNotFoundError',
    'RefundNotSettledError',

    # Balance Reconciliation
    'find_user_account',
    'credit_user_balance',

    # Purchase Ledger
    'list_purchases',
    'get_purchase_by_id',
    'approve_purchase',
    'reject_purchase',
    'set_purchase_status',
    'settle_refund',
    'sweep_owed_refunds',
    'get_purchase_status_counts',
]
