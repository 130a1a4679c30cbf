"""
Calendar metadata synchronizer.

Pulls one calendar's configuration, stores it as a CalendarRecord and then
reconciles its open hours (converted to UTC) and team members. Failures on a
single open-hours day or team member are logged and skipped; failures that
leave no calendar row abort the sync and come back as a failure result.
"""

from datetime import datetime
from typing import Any, Callable, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from ..clients.ghl_client import LeadConnectorClient
from ..config import SyncConfig, get_config
from ..constants import UTC_ZONE
from ..context.account_context import account_aware
from ..db.db_calendar_models import CalendarRecord, OpenHoursEntry, TeamMemberAssignment
from ..exceptions import (
    BaseError,
    CalendarPersistFailedError,
    CredentialNotFoundError,
    ErrorCode,
    PersistFailedError,
    RemoteCalendarNotFoundError,
    RepositoryError,
    TokenUnavailableError,
)
from ..repositories.sync_repository import SyncRepository
from ..schemas.calendar_schemas import (
    CalendarRecordData,
    OpenHoursData,
    RemoteCalendar,
    RemoteHourBlock,
    RemoteOpenHours,
    RemoteTeamMember,
    TeamMemberData,
)
from ..schemas.sync_result import SyncResult
from ..utils.logger import get_logger
from ..utils.time_utils import resolve_timezone, wall_clock_to_utc
from .reconciliation import reconcile
from .token_service import TokenService, utc_clock


class CalendarSyncService:
    """Mirrors one remote calendar and its child collections into the store."""

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
    def sync_calendar(self, calendar_id: str, account_id: str) -> SyncResult:
        """
        Fetch a calendar and reconcile it with its open hours and team members.

        Args:
            calendar_id: Remote calendar id
            account_id: Location that owns the calendar

        Returns:
            SyncResult with ``saved_id`` set on success
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

        try:
            payload = self.client.get_calendar(calendar_id, access_token)
            if not payload:
                raise RemoteCalendarNotFoundError(
                    f"Calendar '{calendar_id}' not found", calendar_id=calendar_id
                )
            calendar = RemoteCalendar.model_validate(payload)
            record = CalendarRecordData.from_remote(
                calendar, always_active=self.config.preserve_always_active
            )
        except BaseError as e:
            # RemoteFetchFailed, RemoteCalendarNotFound or a bad duration unit
            return SyncResult.from_error(e)
        except PydanticValidationError as e:
            self.logger.error(
                "Calendar payload failed validation",
                extra={"calendar_id": calendar_id, "error": str(e)},
            )
            return SyncResult.failure_result(
                "Calendar payload failed validation",
                error_code=ErrorCode.VALIDATION_FAILED.name,
                details=e.errors(include_url=False),
            )

        try:
            saved = reconcile(
                self.repository,
                CalendarRecord,
                {"ghl_calendar_id": calendar.id},
                record.model_dump(),
            )
        except PersistFailedError as e:
            return SyncResult.from_error(
                CalendarPersistFailedError(calendar_id=calendar.id, cause=e)
            )

        timezone_name = self._location_timezone(account_id)

        # Open hours and team members share no state; both always run to completion
        open_hours_ids, failed_open_hours = self._save_open_hours(calendar, saved.id, timezone_name)
        team_member_ids, failed_members = self._save_team_members(calendar, saved.id)

        failed = failed_open_hours + failed_members
        self.logger.info(
            "Calendar synced",
            extra={
                "calendar_id": calendar.id,
                "saved_id": saved.id,
                "created": saved.created,
                "timezone": timezone_name,
                "open_hours": len(open_hours_ids),
                "team_members": len(team_member_ids),
                "failed_records": len(failed),
            },
        )

        return SyncResult.success_result(
            message="Calendar synced",
            saved_id=saved.id,
            open_hours_ids=open_hours_ids,
            team_member_ids=team_member_ids,
            failed_record_ids=failed,
            data=record.model_dump(),
        )

    def _location_timezone(self, account_id: str) -> str:
        default = self.config.default_timezone
        try:
            stored = self.repository.get_account_timezone(account_id, default)
        except RepositoryError as e:
            self.logger.warning(
                f"Timezone lookup failed, using {default}",
                extra={"account_id": account_id, "error": str(e)},
            )
            return resolve_timezone(default)
        return resolve_timezone(stored, default)

    def _save_open_hours(
        self, calendar: RemoteCalendar, calendar_uuid: str, timezone_name: str
    ) -> Tuple[List[str], List[str]]:
        saved_ids: List[str] = []
        failed: List[str] = []
        on_date = self.clock().date()

        for index, raw_entry in enumerate(calendar.open_hours or []):
            try:
                entry = RemoteOpenHours.model_validate(raw_entry)
            except PydanticValidationError as e:
                self.logger.error(
                    "Skipping malformed open hours entry",
                    extra={"calendar_id": calendar.id, "index": index, "error": str(e)},
                )
                failed.append(f"open_hours:{index}")
                continue

            for day in entry.days_of_the_week:
                for raw_block in entry.hours:
                    try:
                        block = RemoteHourBlock.model_validate(raw_block)
                        open_hour, open_minute = block.open_hour, block.open_minute
                        close_hour, close_minute = block.close_hour, block.close_minute
                        if timezone_name != UTC_ZONE:
                            open_hour, open_minute = wall_clock_to_utc(
                                open_hour, open_minute, timezone_name, on_date
                            )
                            close_hour, close_minute = wall_clock_to_utc(
                                close_hour, close_minute, timezone_name, on_date
                            )

                        data = OpenHoursData(
                            calendar_id=calendar_uuid,
                            day_of_week=day,
                            open_hour=open_hour,
                            open_minute=open_minute,
                            close_hour=close_hour,
                            close_minute=close_minute,
                            ghl_calendar_id=calendar.id,
                        )
                        result = reconcile(
                            self.repository,
                            OpenHoursEntry,
                            {"calendar_id": calendar_uuid, "day_of_week": data.day_of_week},
                            data.model_dump(),
                        )
                    except (BaseError, PydanticValidationError) as e:
                        self.logger.error(
                            f"Error saving open hours for day {day}",
                            extra={"calendar_id": calendar.id, "day_of_week": day, "error": str(e)},
                        )
                        failed.append(f"day:{day}")
                        continue

                    if result.id not in saved_ids:
                        saved_ids.append(result.id)

        return saved_ids, failed

    def _save_team_members(
        self, calendar: RemoteCalendar, calendar_uuid: str
    ) -> Tuple[List[str], List[str]]:
        saved_ids: List[str] = []
        failed: List[str] = []

        for index, raw_member in enumerate(calendar.team_members or []):
            try:
                member = RemoteTeamMember.model_validate(raw_member)
                data = TeamMemberData(
                    calendar_id=calendar_uuid,
                    user_id=member.user_id,
                    priority=member.priority,
                    is_primary=member.is_primary,
                    ghl_calendar_id=calendar.id,
                )
                result = reconcile(
                    self.repository,
                    TeamMemberAssignment,
                    {"calendar_id": calendar_uuid, "user_id": data.user_id},
                    data.model_dump(),
                )
            except (BaseError, PydanticValidationError) as e:
                label = _member_label(raw_member, index)
                self.logger.error(
                    "Error saving team member",
                    extra={"calendar_id": calendar.id, "member": label, "error": str(e)},
                )
                failed.append(label)
                continue

            saved_ids.append(result.id)

        return saved_ids, failed


def _member_label(raw_member: Any, index: int) -> str:
    """``user:<id>`` when the payload names a user, else its position."""
    if isinstance(raw_member, dict) and raw_member.get("userId"):
        return f"user:{raw_member['userId']}"
    return f"team_member:{index}"
