"""
Match-or-create write used by every synchronizer.

reconcile() looks a row up by a uniquely meaningful external key (a single
column or a composite such as calendar id + day), updates it in place when
found and inserts it otherwise. Running it twice with the same input leaves
exactly one row.
"""

from typing import Any, Dict, Optional, Type

from pydantic import BaseModel

from ..exceptions import BaseError, PersistFailedError
from ..repositories.sync_repository import SyncRepository
from ..utils.logger import get_logger


class ReconcileResult(BaseModel):
    """Outcome of one reconcile call."""

    success: bool
    id: Optional[str] = None
    created: bool = False


def reconcile(
    repository: SyncRepository,
    model_class: Type[Any],
    lookup: Dict[str, Any],
    record: Dict[str, Any],
) -> ReconcileResult:
    """
    Update the row matching ``lookup`` with ``record``, or insert ``record``.

    Args:
        repository: Storage capability
        model_class: SQLAlchemy model of the target table
        lookup: Column/value pairs forming a unique key; no value may be None
        record: Column values to write

    Returns:
        ReconcileResult with the stable row id

    Raises:
        PersistFailedError: If the lookup or the write fails
    """
    table = getattr(model_class, "__tablename__", model_class.__name__)

    missing = [column for column, value in lookup.items() if value is None or value == ""]
    if not lookup or missing:
        raise PersistFailedError(
            f"Cannot reconcile {table} without a key",
            table=table,
            lookup=lookup,
            missing_columns=missing,
        )

    try:
        existing = repository.find_one(model_class, lookup)
        if existing is not None:
            record_id = repository.update_row(model_class, existing.id, record)
            created = False
        else:
            record_id = repository.insert_row(model_class, record)
            created = True
    except BaseError as e:
        raise PersistFailedError(
            f"Failed to reconcile {table}: {e.message}",
            cause=e,
            table=table,
            lookup=lookup,
        )
    except Exception as e:
        raise PersistFailedError(
            f"Failed to reconcile {table}: {str(e)}",
            cause=e,
            table=table,
            lookup=lookup,
        )

    if not record_id:
        raise PersistFailedError(
            f"Write to {table} returned no id",
            table=table,
            lookup=lookup,
        )

    get_logger().debug(
        "Reconciled record",
        extra={"table": table, "record_id": record_id, "created": created},
    )
    return ReconcileResult(success=True, id=record_id, created=created)

