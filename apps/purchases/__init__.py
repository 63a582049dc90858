"""
Purchases App - Reward Purchase Approval

Purchases arrive pending from the player-facing purchase flow. Admins approve
or reject them here. A rejection refunds the price to the player's balance.

Key rules:
- Status changes exactly once: pending -> approved or pending -> rejected
- A refund is recorded as owed together with the rejection and credited
  at most once
- Owed refunds left behind by a failed credit are settled by
  ``manage.py sweep_refunds``
"""
