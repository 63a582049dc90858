"""
Accounts App - Operators and player balances

- User: operator login for the admin API and Django admin
- UserAccount: player balance record credited by purchase refunds
"""
