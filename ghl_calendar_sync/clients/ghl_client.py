"""
HTTP client for the LeadConnector (HighLevel) API.

Every call carries an explicit timeout. Read calls retry with exponential
backoff on connection errors, 429 and 5xx; writes are never retried because
the API gives no idempotency guarantee for them. Failures surface as
RemoteFetchFailedError carrying the status code and response body.
"""

from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config import GHLApiConfig, get_config
from ..constants import Limits
from ..exceptions import RemoteFetchFailedError
from ..utils.logger import get_logger


class LeadConnectorClient:
    """Thin wrapper over the LeadConnector REST endpoints the engine uses."""

    service_name = "leadconnector"

    def __init__(
        self,
        config: Optional[GHLApiConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config or get_config().ghl
        self.session = session or self._create_session()
        self.logger = get_logger()

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        adapter = HTTPAdapter(
            max_retries=Retry(
                total=self.config.max_retries,
                backoff_factor=self.config.backoff_factor,
                status_forcelist=list(Limits.RETRY_STATUS_CODES),
                allowed_methods=["GET"],
                raise_on_status=False,
            )
        )
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        session.headers.update({"Accept": "application/json"})
        return session

    def _headers(self, access_token: Optional[str]) -> Dict[str, str]:
        headers = {"Accept": "application/json", "Version": self.config.api_version}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        access_token: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        url: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        target = url or f"{self.config.base_url}{path}"
        headers = self._headers(access_token)
        if json is not None:
            headers["Content-Type"] = "application/json"

        try:
            response = self.session.request(
                method,
                target,
                headers=headers,
                params=params,
                json=json,
                data=data,
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise RemoteFetchFailedError(
                f"{method} {path or target} failed: {str(e)}",
                service_name=self.service_name,
                cause=e,
                path=path or target,
            )

        if not response.ok:
            raise RemoteFetchFailedError(
                f"{method} {path or target} returned HTTP {response.status_code}",
                service_name=self.service_name,
                path=path or target,
                http_status=response.status_code,
                response_body=_safe_body(response),
            )

        body = _safe_body(response)
        if body is None:
            return {}
        if not isinstance(body, dict):
            raise RemoteFetchFailedError(
                f"{method} {path or target} returned a non-object body",
                service_name=self.service_name,
                path=path or target,
            )
        return body

    # ==================== CALENDARS ====================

    def get_calendar(self, calendar_id: str, access_token: str) -> Optional[Dict[str, Any]]:
        """Calendar configuration, or None when the response carries no calendar."""
        body = self._request("GET", f"/calendars/{calendar_id}", access_token)
        return body.get("calendar") or None

    def list_calendars(self, location_id: str, access_token: str) -> List[Dict[str, Any]]:
        body = self._request(
            "GET", "/calendars/", access_token, params={"locationId": location_id}
        )
        return body.get("calendars") or []

    def get_calendar_events(
        self,
        location_id: str,
        calendar_id: str,
        start_time_ms: int,
        end_time_ms: int,
        access_token: str,
    ) -> List[Dict[str, Any]]:
        """Events of one calendar between two epoch-millisecond bounds."""
        body = self._request(
            "GET",
            "/calendars/events",
            access_token,
            params={
                "locationId": location_id,
                "calendarId": calendar_id,
                "startTime": start_time_ms,
                "endTime": end_time_ms,
            },
        )
        return body.get("events") or []

    def get_free_slots(
        self,
        calendar_id: str,
        access_token: str,
        start_date: int,
        end_date: int,
        timezone: Optional[str] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"startDate": start_date, "endDate": end_date}
        if timezone:
            params["timezone"] = timezone
        return self._request(
            "GET", f"/calendars/{calendar_id}/free-slots", access_token, params=params
        )

    def create_appointment(self, appointment: Dict[str, Any], access_token: str) -> Dict[str, Any]:
        return self._request(
            "POST", "/calendars/events/appointments", access_token, json=appointment
        )

    # ==================== CONTACTS & LOCATIONS ====================

    def upsert_contact(self, contact: Dict[str, Any], access_token: str) -> Dict[str, Any]:
        return self._request("POST", "/contacts/upsert", access_token, json=contact)

    def create_custom_field(
        self, location_id: str, name: str, access_token: str, data_type: str = "TEXT"
    ) -> Dict[str, Any]:
        return self._request(
            "POST",
            f"/locations/{location_id}/customFields",
            access_token,
            json={"name": name, "dataType": data_type},
        )

    def get_location(self, location_id: str, access_token: str) -> Dict[str, Any]:
        return self._request("GET", f"/locations/{location_id}", access_token)

    def get_company(self, company_id: str, access_token: str) -> Dict[str, Any]:
        return self._request("GET", f"/companies/{company_id}", access_token)

    # ==================== OAUTH ====================

    def request_token(self, form: Dict[str, Any]) -> Dict[str, Any]:
        """POST a form-encoded grant to the OAuth token endpoint."""
        return self._request("POST", "", url=self.config.oauth_url, data=form)


def _safe_body(response: requests.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
