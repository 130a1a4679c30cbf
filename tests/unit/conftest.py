"""
Unit test conftest.py - Component-specific fixtures.

Services run against the real in-memory store; the remote API and the
refresh collaborator are replaced by the in-process fakes.
"""

import pytest

from ghl_calendar_sync.config import get_config
from ghl_calendar_sync.services import (
    BookingSyncService,
    CalendarSyncService,
    PassthroughService,
    TokenService,
)
from tests.fixtures.factories import AccountCredentialFactory
from tests.fixtures.fake_client import (
    FIXED_NOW,
    FakeLeadConnectorClient,
    FakeRefresher,
    fixed_clock,
)


@pytest.fixture(scope="function")
def fake_client():
    return FakeLeadConnectorClient()


@pytest.fixture(scope="function")
def refresher():
    return FakeRefresher()


@pytest.fixture(scope="function")
def token_service(repository, refresher):
    return TokenService(repository, refresher, clock=fixed_clock)


@pytest.fixture(scope="function")
def credential(db_session, location_id):
    """Fresh credential for the standard location."""
    return AccountCredentialFactory(
        account_id=location_id,
        access_token="live-token",
        updated_at=FIXED_NOW,
        created_at=FIXED_NOW,
    )


@pytest.fixture(scope="function")
def calendar_sync_service(repository, token_service, fake_client):
    return CalendarSyncService(
        repository, token_service, client=fake_client, config=get_config().sync, clock=fixed_clock
    )


@pytest.fixture(scope="function")
def booking_sync_service(repository, token_service, fake_client):
    return BookingSyncService(
        repository, token_service, client=fake_client, config=get_config().sync, clock=fixed_clock
    )


@pytest.fixture(scope="function")
def passthrough_service(repository, token_service, fake_client):
    return PassthroughService(repository, token_service, client=fake_client)
