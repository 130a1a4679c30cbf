"""Service layer: token lifecycle, reconciliation and the synchronizers."""

from .auth_service import AuthService
from .booking_sync_service import BookingSyncService
from .calendar_sync_service import CalendarSyncService
from .passthrough_service import PassthroughService
from .reconciliation import ReconcileResult, reconcile
from .token_service import TokenRefresher, TokenService, is_token_stale, utc_clock

__all__ = [
    "AuthService",
    "BookingSyncService",
    "CalendarSyncService",
    "PassthroughService",
    "ReconcileResult",
    "reconcile",
    "TokenRefresher",
    "TokenService",
    "is_token_stale",
    "utc_clock",
]
