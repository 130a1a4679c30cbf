"""
Generic CRUD helpers that work with any SQLAlchemy model.

Each write commits on success and rolls back on failure so one bad row never
leaves the session unusable for the rows that follow it.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from ..exceptions import ErrorCode, RepositoryError, not_found
from ..utils.logger import get_logger

T = TypeVar("T")


def _apply_filters(query, model_class, filters: Dict[str, Any]):
    for key, value in filters.items():
        if not hasattr(model_class, key):
            raise RepositoryError(
                f"{model_class.__name__} has no column '{key}'",
                error_code=ErrorCode.VALIDATION_FAILED,
                status_code=400,
                model=model_class.__name__,
                column=key,
            )
        query = query.filter(getattr(model_class, key) == value)
    return query


def create_record(session: Session, model_class: Type[T], data: Dict[str, Any]) -> T:
    """
    Generic create operation for any model.

    Args:
        session: Database session
        model_class: SQLAlchemy model class
        data: Column values

    Returns:
        Created record instance

    Raises:
        RepositoryError: If creation fails
    """
    logger = get_logger()

    try:
        now = datetime.now(timezone.utc)
        values = dict(data)
        if hasattr(model_class, "created_at"):
            values["created_at"] = now
        if hasattr(model_class, "updated_at"):
            values["updated_at"] = now

        record = model_class(**values)
        session.add(record)
        session.commit()

        logger.debug(
            f"Created {model_class.__name__}",
            extra={"model": model_class.__name__, "record_id": getattr(record, "id", None)},
        )

        return record

    except Exception as e:
        session.rollback()
        raise RepositoryError(
            f"Failed to create {model_class.__name__}: {str(e)}",
            error_code=ErrorCode.DATABASE_ERROR,
            cause=e,
            model=model_class.__name__,
        )


def get_record(session: Session, model_class: Type[T], filters: Dict[str, Any]) -> Optional[T]:
    """
    Return the first record matching every filter exactly, or None.

    A None filter value matches NULL, it is never ignored.
    """
    query = _apply_filters(session.query(model_class), model_class, filters)
    return query.first()


def get_record_by_id(session: Session, model_class: Type[T], record_id: str) -> Optional[T]:
    return get_record(session, model_class, {"id": record_id})


def update_record(
    session: Session,
    model_class: Type[T],
    record_id: str,
    data: Dict[str, Any],
) -> T:
    """
    Generic update operation for any model.

    Every key in ``data`` is written, including None values, so the stored
    row always mirrors the data it was given.

    Raises:
        RepositoryError: If the record does not exist or the update fails
    """
    logger = get_logger()

    record = get_record_by_id(session, model_class, record_id)
    if not record:
        raise not_found(model_class.__name__, record_id=record_id)

    try:
        for key, value in data.items():
            if hasattr(record, key):
                setattr(record, key, value)

        if hasattr(record, "updated_at"):
            record.updated_at = datetime.now(timezone.utc)

        session.commit()

        logger.debug(
            f"Updated {model_class.__name__}",
            extra={"model": model_class.__name__, "record_id": record_id},
        )

        return record

    except Exception as e:
        session.rollback()
        raise RepositoryError(
            f"Failed to update {model_class.__name__}: {str(e)}",
            error_code=ErrorCode.DATABASE_ERROR,
            cause=e,
            model=model_class.__name__,
            record_id=record_id,
        )


def list_records(
    session: Session,
    model_class: Type[T],
    filters: Optional[Dict[str, Any]] = None,
    limit: Optional[int] = None,
    order_by: Optional[str] = None,
) -> List[T]:
    """
    Generic list operation for any model.

    Args:
        session: Database session
        model_class: SQLAlchemy model class
        filters: Optional exact-match filter conditions
        limit: Optional limit
        order_by: Optional order by column (defaults to created_at)

    Returns:
        List of record instances
    """
    query = _apply_filters(session.query(model_class), model_class, filters or {})

    if order_by and hasattr(model_class, order_by):
        query = query.order_by(getattr(model_class, order_by))
    elif hasattr(model_class, "created_at"):
        query = query.order_by(model_class.created_at)  # type: ignore[attr-defined]

    if limit:
        query = query.limit(limit)

    return query.all()


def count_records(
    session: Session,
    model_class: Type[T],
    filters: Optional[Dict[str, Any]] = None,
) -> int:
    """Count records matching the filters."""
    query = _apply_filters(session.query(model_class), model_class, filters or {})
    return query.count()
