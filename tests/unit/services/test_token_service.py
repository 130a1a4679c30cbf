"""
Tests for the token lifecycle manager.

Covers the staleness boundary, refresh on staleness, the stale fallback and
the missing-credential contract.
"""

from datetime import datetime, timedelta, timezone

import pytest

from ghl_calendar_sync.constants import AccountKind
from ghl_calendar_sync.exceptions import (
    CredentialNotFoundError,
    ExternalServiceError,
    TokenUnavailableError,
)
from ghl_calendar_sync.services import TokenService, is_token_stale
from tests.fixtures.factories import AccountCredentialFactory, CompanyCredentialFactory
from tests.fixtures.fake_client import FakeRefresher

ISSUED_AT = datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc)
LIFETIME = 3600


def clock_at(moment):
    return lambda: moment


class TestIsTokenStale:
    def test_fresh_one_second_before_expiry(self):
        now = ISSUED_AT + timedelta(seconds=LIFETIME - 1)
        assert is_token_stale(ISSUED_AT, LIFETIME, now) is False

    def test_stale_exactly_at_expiry(self):
        now = ISSUED_AT + timedelta(seconds=LIFETIME)
        assert is_token_stale(ISSUED_AT, LIFETIME, now) is True

    def test_zero_lifetime_is_stale(self):
        assert is_token_stale(ISSUED_AT, 0, ISSUED_AT) is True

    def test_missing_issue_time_is_stale(self):
        assert is_token_stale(None, LIFETIME, ISSUED_AT) is True

    def test_naive_issue_time_treated_as_utc(self):
        naive = ISSUED_AT.replace(tzinfo=None)
        now = ISSUED_AT + timedelta(seconds=LIFETIME - 1)
        assert is_token_stale(naive, LIFETIME, now) is False


class TestGetUsableToken:
    """TokenService.get_usable_token against the real store."""

    def _credential(self, location_id):
        return AccountCredentialFactory(
            account_id=location_id,
            access_token="stored-token",
            expires_in=LIFETIME,
            created_at=ISSUED_AT,
            updated_at=ISSUED_AT,
        )

    def test_fresh_token_returned_without_refresh(self, repository, location_id):
        self._credential(location_id)
        refresher = FakeRefresher()
        service = TokenService(
            repository, refresher, clock=clock_at(ISSUED_AT + timedelta(seconds=LIFETIME - 1))
        )

        assert service.get_usable_token(location_id) == "stored-token"
        assert refresher.calls == []

    def test_stale_token_refreshed(self, repository, location_id):
        self._credential(location_id)
        refresher = FakeRefresher(token="new-token")
        service = TokenService(
            repository, refresher, clock=clock_at(ISSUED_AT + timedelta(seconds=LIFETIME))
        )

        assert service.get_usable_token(location_id) == "new-token"
        assert refresher.calls == [(location_id, AccountKind.LOCATION)]

    def test_refresh_failure_raises_token_unavailable(self, repository, location_id):
        self._credential(location_id)
        service = TokenService(
            repository,
            FakeRefresher(token=None),
            clock=clock_at(ISSUED_AT + timedelta(days=2)),
        )

        with pytest.raises(TokenUnavailableError) as exc_info:
            service.get_usable_token(location_id)

        assert exc_info.value.context["account_id"] == location_id

    def test_refresh_exception_is_contained(self, repository, location_id):
        self._credential(location_id)
        service = TokenService(
            repository,
            FakeRefresher(raises=ExternalServiceError("OAuth endpoint down")),
            clock=clock_at(ISSUED_AT + timedelta(days=2)),
        )

        with pytest.raises(TokenUnavailableError):
            service.get_usable_token(location_id)

    def test_allow_stale_returns_last_known_token(self, repository, location_id):
        self._credential(location_id)
        service = TokenService(
            repository,
            FakeRefresher(token=None),
            clock=clock_at(ISSUED_AT + timedelta(days=2)),
        )

        assert service.get_usable_token(location_id, allow_stale=True) == "stored-token"

    def test_missing_credential(self, repository):
        refresher = FakeRefresher()
        service = TokenService(repository, refresher, clock=clock_at(ISSUED_AT))

        with pytest.raises(CredentialNotFoundError):
            service.get_usable_token("unknown-location")
        assert refresher.calls == []

    def test_company_credential_lookup_by_kind(self, repository):
        CompanyCredentialFactory(
            account_id="company-1",
            access_token="company-token",
            expires_in=LIFETIME,
            created_at=ISSUED_AT,
            updated_at=ISSUED_AT,
        )
        service = TokenService(repository, FakeRefresher(), clock=clock_at(ISSUED_AT))

        assert service.get_usable_token("company-1", AccountKind.COMPANY) == "company-token"
        with pytest.raises(CredentialNotFoundError):
            service.get_usable_token("company-1", AccountKind.LOCATION)

    def test_stale_company_token_refreshed_with_company_kind(self, repository):
        CompanyCredentialFactory(
            account_id="company-1",
            expires_in=LIFETIME,
            created_at=ISSUED_AT,
            updated_at=ISSUED_AT,
        )
        refresher = FakeRefresher(token="company-new")
        service = TokenService(
            repository, refresher, clock=clock_at(ISSUED_AT + timedelta(hours=5))
        )

        assert service.get_usable_token("company-1", AccountKind.COMPANY) == "company-new"
        assert refresher.calls == [("company-1", AccountKind.COMPANY)]
