"""
Thin pass-through calls to the LeadConnector API.

These do not reconcile anything except the account profile: fetching a
location or company stores its name, email and timezone so later calendar
syncs convert open hours in the right zone.
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from ..clients.ghl_client import LeadConnectorClient
from ..config import GHLApiConfig, get_config
from ..constants import AccountKind
from ..exceptions import BaseError, ErrorCode
from ..repositories.sync_repository import SyncRepository
from ..schemas.calendar_schemas import CalendarSummary
from ..schemas.sync_result import SyncResult
from ..utils.account_utils import store_account_details
from ..utils.logger import get_logger
from .token_service import TokenService


class PassthroughService:
    """Calendar listing, booking, contact and profile calls for one store."""

    def __init__(
        self,
        repository: SyncRepository,
        token_service: TokenService,
        client: Optional[LeadConnectorClient] = None,
        config: Optional[GHLApiConfig] = None,
    ):
        self.repository = repository
        self.token_service = token_service
        self.config = config or get_config().ghl
        self.client = client or LeadConnectorClient(self.config)
        self.logger = get_logger()

    def _missing(self, name: str) -> SyncResult:
        return SyncResult.failure_result(
            f"Missing {name}", error_code=ErrorCode.MISSING_REQUIRED.name
        )

    def _failed(self, operation: str, error: BaseError) -> SyncResult:
        self.logger.error(
            f"{operation} failed",
            extra={"operation": operation, "error_code": error.error_code.name},
        )
        return SyncResult.from_error(error)

    # ==================== CALENDARS ====================

    def list_active_calendars(self, location_id: str) -> SyncResult:
        """Active calendars of a location as ``[{id, name}]``."""
        if not location_id:
            return self._missing("locationId")

        try:
            token = self.token_service.get_usable_token(location_id)
            calendars = self.client.list_calendars(location_id, token)
            summaries = [CalendarSummary.model_validate(c) for c in calendars]
        except BaseError as e:
            return self._failed("list_active_calendars", e)
        except PydanticValidationError as e:
            return SyncResult.failure_result(
                "Calendar list failed validation",
                error_code=ErrorCode.VALIDATION_FAILED.name,
                details=e.errors(include_url=False),
            )

        active = [s.to_dict() for s in summaries if s.is_active]
        return SyncResult.success_result(data=active)

    def fetch_available_slots(
        self,
        calendar_id: str,
        location_id: str,
        start_date: int,
        end_date: int,
        timezone: Optional[str] = None,
    ) -> SyncResult:
        if not calendar_id or not location_id:
            return self._missing("calendarId or locationId")

        try:
            token = self.token_service.get_usable_token(location_id)
            slots = self.client.get_free_slots(calendar_id, token, start_date, end_date, timezone)
        except BaseError as e:
            return self._failed("fetch_available_slots", e)
        return SyncResult.success_result(data=slots)

    def create_appointment(self, appointment: Dict[str, Any], access_token: str) -> SyncResult:
        try:
            body = self.client.create_appointment(appointment, access_token)
        except BaseError as e:
            return self._failed("create_appointment", e)
        return SyncResult.success_result(data=body)

    # ==================== CONTACTS ====================

    def upsert_contact(self, contact: Dict[str, Any], access_token: str) -> SyncResult:
        try:
            body = self.client.upsert_contact(contact, access_token)
        except BaseError as e:
            return self._failed("upsert_contact", e)
        return SyncResult.success_result(data=body.get("contact"))

    def create_custom_field(self, location_id: str, access_token: str) -> SyncResult:
        """Create the app's UTM text field on a location."""
        if not location_id:
            return self._missing("locationId")

        try:
            body = self.client.create_custom_field(
                location_id, f"{self.config.app_name} UTM", access_token
            )
        except BaseError as e:
            return self._failed("create_custom_field", e)
        return SyncResult.success_result(data=body.get("customField"))

    # ==================== ACCOUNTS ====================

    def fetch_location_information(self, location_id: str) -> SyncResult:
        if not location_id:
            return self._missing("locationId")
        return self._fetch_account(location_id, AccountKind.LOCATION)

    def fetch_company_information(self, company_id: str) -> SyncResult:
        if not company_id:
            return self._missing("companyId")
        return self._fetch_account(company_id, AccountKind.COMPANY)

    def _fetch_account(self, account_id: str, kind: AccountKind) -> SyncResult:
        operation = f"fetch_{kind.value.lower()}_information"
        try:
            token = self.token_service.get_usable_token(account_id, kind)
            if kind == AccountKind.COMPANY:
                body = self.client.get_company(account_id, token)
                profile = body.get("company") or {}
            else:
                body = self.client.get_location(account_id, token)
                profile = body.get("location") or {}

            if profile:
                store_account_details(self.repository.session, account_id, profile, kind.value)
        except BaseError as e:
            return self._failed(operation, e)

        return SyncResult.success_result(data=body)
