"""
Test fixtures for the calendar sync engine.

This module provides shared test fixtures including database setup,
the storage capability, and model factories bound to the test session.
"""

import pytest
from sqlalchemy.orm import Session

from ghl_calendar_sync.config import AppConfig, reset_config, set_config
from ghl_calendar_sync.db import IN_MEMORY_URL, DatabaseConfig, DatabaseManager, init_db
from ghl_calendar_sync.repositories import SyncRepository
from tests.fixtures.factories import bind_factories


@pytest.fixture(scope="session")
def db_config() -> DatabaseConfig:
    """Create SQLite in-memory database configuration for testing."""
    return DatabaseConfig(url=IN_MEMORY_URL, development_mode=True)


@pytest.fixture(scope="session")
def db_manager(db_config: DatabaseConfig) -> DatabaseManager:
    """Create database manager with all models registered."""
    manager = DatabaseManager(db_config)
    init_db(manager)
    return manager


@pytest.fixture(scope="function")
def db_session(db_manager: DatabaseManager) -> Session:
    """
    Create a database session for each test.

    Tables are created before and dropped after every test so each test
    starts from an empty store.
    """
    db_manager.create_tables()
    session = db_manager.get_session()
    bind_factories(session)

    yield session

    session.rollback()
    session.close()
    db_manager.drop_tables()


@pytest.fixture(scope="function")
def repository(db_session: Session) -> SyncRepository:
    """Storage capability on the test session."""
    return SyncRepository(db_session)


@pytest.fixture(autouse=True)
def app_config():
    """Deterministic global configuration, independent of the environment."""
    config = AppConfig(environment="test")
    config.ghl.base_url = "https://api.test.local"
    config.ghl.oauth_url = "https://api.test.local/oauth/token"
    config.ghl.client_id = "test-client"
    config.ghl.client_secret = "test-secret"
    config.ghl.app_name = "Test App"
    config.ghl.max_retries = 0
    config.sync.default_timezone = "UTC"
    set_config(config)
    yield config
    reset_config()


@pytest.fixture
def location_id() -> str:
    """Standard location (sub-account) id for testing."""
    return "loc-123"


@pytest.fixture
def calendar_id() -> str:
    """Standard remote calendar id for testing."""
    return "cal-456"
