"""
Shared building blocks for the rewards apps.

- Error taxonomy used by every service layer (exceptions)
- DRF exception handler rendering that taxonomy (handlers)
- Admin-only API permission (permissions)
"""
