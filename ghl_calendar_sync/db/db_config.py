"""
Engine and session management for the local calendar mirror.

The connection URL is the one AppConfig reads from DATABASE_URL, so the
engine, alembic and the tests all agree on a single setting. SQLite and
PostgreSQL are the only supported backends.
"""

from typing import Any, Optional

from pydantic import BaseModel
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import DatabaseSettings, get_config
from ..exceptions import ErrorCode, ServiceError, ValidationError

# Base class for all SQLAlchemy models
Base: Any = declarative_base()

SUPPORTED_BACKENDS = ("sqlite", "postgresql")
IN_MEMORY_URL = "sqlite:///:memory:"


class DatabaseConfig(BaseModel):
    url: str
    echo: bool = False
    pool_size: int = 5
    development_mode: bool = False

    @classmethod
    def from_settings(
        cls, settings: Optional[DatabaseSettings] = None, development_mode: bool = False
    ) -> "DatabaseConfig":
        """Build from AppConfig.database (the global config when omitted)."""
        settings = settings or get_config().database
        return cls(
            url=settings.connection_string,
            echo=settings.echo,
            development_mode=development_mode,
        )

    def parsed_url(self) -> URL:
        """
        Parse and check the URL.

        Raises:
            ValidationError: If the URL is malformed or names an unsupported backend
        """
        try:
            url = make_url(self.url)
        except ArgumentError as e:
            raise ValidationError(
                "Malformed database URL",
                field="url",
                error_code=ErrorCode.INVALID_FORMAT,
                cause=e,
            )
        if url.get_backend_name() not in SUPPORTED_BACKENDS:
            raise ValidationError(
                f"Unsupported database backend: {url.get_backend_name()}",
                field="url",
                error_code=ErrorCode.INVALID_FORMAT,
                value=url.get_backend_name(),
            )
        return url

    def __repr__(self) -> str:
        try:
            masked = make_url(self.url).render_as_string(hide_password=True)
        except ArgumentError:
            masked = "<malformed>"
        return f"DatabaseConfig(url='{masked}', development_mode={self.development_mode})"


class DatabaseManager:
    """
    Owns the engine and session factory for one DatabaseConfig.

    Services never reach for a process-wide client; they receive a session
    (or a SyncRepository built on one) from the caller.
    """

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self.engine = self._create_engine()
        self.session_factory = sessionmaker(bind=self.engine)

    def _create_engine(self):
        url = self.config.parsed_url()
        if url.get_backend_name() == "sqlite":
            if url.database in (None, "", ":memory:"):
                # One shared connection, otherwise every session sees an empty database
                return create_engine(
                    url,
                    echo=self.config.echo,
                    connect_args={"check_same_thread": False},
                    poolclass=StaticPool,
                )
            return create_engine(url, echo=self.config.echo)
        return create_engine(url, echo=self.config.echo, pool_size=self.config.pool_size)

    def create_tables(self) -> None:
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        if not self.config.development_mode:
            raise ServiceError(
                "Cannot drop tables: not in development mode",
                error_code=ErrorCode.CONFIGURATION_ERROR,
                operation="drop_tables",
            )
        Base.metadata.drop_all(self.engine)

    def get_session(self) -> Session:
        return self.session_factory()

    def close(self) -> None:
        self.engine.dispose()


def import_all_models():
    """Import all models to ensure they're registered with SQLAlchemy metadata."""
    from sqlalchemy.orm import configure_mappers

    from .db_account_models import AccountDetails  # noqa
    from .db_booking_models import BookedSlotEvent  # noqa
    from .db_calendar_models import CalendarRecord, OpenHoursEntry, TeamMemberAssignment  # noqa
    from .db_credential_models import AccountCredential  # noqa

    configure_mappers()


def init_db(db_manager: DatabaseManager) -> None:
    """Register every model and create the tables."""
    from ..utils.logger import get_logger

    get_logger().info(
        "Initializing DB", extra={"backend": db_manager.engine.url.get_backend_name()}
    )
    import_all_models()
    db_manager.create_tables()
