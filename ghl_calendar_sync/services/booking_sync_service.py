"""
Booking synchronizer.

Fetches every event of a calendar from now until the same moment N years
later and reconciles each one into calendar_booked_slots, keyed by the
remote event id. A single bad event is logged and skipped.
"""

from datetime import datetime
from typing import Any, Callable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..clients.ghl_client import LeadConnectorClient
from ..config import SyncConfig, get_config
from ..context.account_context import account_aware
from ..db.db_booking_models import BookedSlotEvent
from ..exceptions import (
    BaseError,
    CredentialNotFoundError,
    ErrorCode,
    TokenUnavailableError,
)
from ..repositories.sync_repository import SyncRepository
from ..schemas.booking_schemas import BookedSlotData, RemoteEvent, event_id_of
from ..schemas.sync_result import SyncResult
from ..utils.logger import get_logger
from ..utils.time_utils import booking_window
from .reconciliation import reconcile
from .token_service import TokenService, utc_clock


class BookingSyncService:
    def __init__(
        self,
        repository: SyncRepository,
        token_service: TokenService,
        client: Optional[LeadConnectorClient] = None,
        config: Optional[SyncConfig] = None,
        clock: Callable[[], datetime] = utc_clock,
    ):
        self.repository = repository
        self.token_service = token_service
        self.client = client or LeadConnectorClient()
        self.config = config or get_config().sync
        self.clock = clock
        self.logger = get_logger()

    @account_aware
    def sync_booked_slots(self, calendar_id: str, account_id: str) -> SyncResult:
        """
        Mirror the calendar's upcoming events into the booked-slot table.

        The result carries every fetched event in ``events`` and the local ids
        of the rows that were written in ``persisted_ids``. Zero events is a
        failure, matching what the CRM integration expects.
        """
        if not calendar_id or not account_id:
            return SyncResult.failure_result(
                "Missing calendarId or locationId", error_code=ErrorCode.MISSING_REQUIRED.name
            )

        try:
            access_token = self.token_service.get_usable_token(account_id)
        except (CredentialNotFoundError, TokenUnavailableError) as e:
            return SyncResult.failure_result(
                e.message,
                error_code=ErrorCode.TOKEN_UNAVAILABLE.name,
                details=e.to_dict(),
            )

        start_ms, end_ms = booking_window(self.clock(), self.config.booking_window_years)
        try:
            events = self.client.get_calendar_events(
                account_id, calendar_id, start_ms, end_ms, access_token
            )
        except BaseError as e:
            return SyncResult.from_error(e)

        if not events:
            self.logger.info(
                "No events in booking window",
                extra={"calendar_id": calendar_id, "start_ms": start_ms, "end_ms": end_ms},
            )
            return SyncResult.failure_result(
                "no events", error_code=ErrorCode.NOT_FOUND.name, data={"calendar_id": calendar_id}
            )

        persisted_ids: List[str] = []
        failed_ids: List[str] = []
        for index, raw_event in enumerate(events):
            record_id = self._save_event(raw_event)
            if record_id:
                persisted_ids.append(record_id)
            else:
                failed_ids.append(event_id_of(raw_event) or f"index:{index}")

        self.logger.info(
            "Booked slots synced",
            extra={
                "calendar_id": calendar_id,
                "fetched": len(events),
                "persisted": len(persisted_ids),
                "failed": len(failed_ids),
            },
        )
        return SyncResult.success_result(
            message="Booked slots synced",
            events=events,
            persisted_ids=persisted_ids,
            failed_record_ids=failed_ids,
        )

    def _save_event(self, raw_event: Any) -> Optional[str]:
        try:
            event = RemoteEvent.model_validate(raw_event)
            data = BookedSlotData.from_remote(event)
            result = reconcile(
                self.repository,
                BookedSlotEvent,
                {"ghl_event_id": data.ghl_event_id},
                data.model_dump(),
            )
        except (BaseError, PydanticValidationError) as e:
            self.logger.error(
                "Error saving booked slot",
                extra={"event_id": event_id_of(raw_event), "error": str(e)},
            )
            return None
        return result.id
