"""
Period Record Service - loading and saving period records.

Engine operations in costing_service work on records in memory. This module
is the persistence side callers use around them: fetch the previous period's
record before opening a new one, and save the record after each operation.

All functions accept an optional session; without one they run in their own
session_scope().
"""

from contextlib import nullcontext
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from ..models import PeriodRecord
from .database import session_scope
from .exceptions import DatabaseError, PeriodRecordNotFound
from .logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)


def _with_entries(query):
    # Load both collections up front so records stay usable after the session closes
    return query.options(
        selectinload(PeriodRecord.consumption_entries),
        selectinload(PeriodRecord.cost_allocations),
    )


def save_period_record(period_record: PeriodRecord, *, session=None) -> PeriodRecord:
    """
    Persist a period record with its ledger and cost allocation entries.

    Args:
        period_record: Record returned or mutated by a costing operation
        session: Optional database session (uses session_scope if not provided)

    Returns:
        The persisted record (merged into the session)

    Raises:
        DatabaseError: If the flush fails
    """
    cm = nullcontext(session) if session is not None else session_scope()
    try:
        with cm as session:
            merged = session.merge(period_record)
            session.flush()
            log_operation(
                logger,
                operation="save_period_record",
                outcome="success",
                period_record_id=merged.id,
                warehouse_id=merged.warehouse_id,
                work_period_id=merged.work_period_id,
            )
            return merged
    except SQLAlchemyError as e:
        log_operation(
            logger,
            operation="save_period_record",
            outcome="error",
            warehouse_id=period_record.warehouse_id,
            work_period_id=period_record.work_period_id,
            error=str(e),
        )
        raise DatabaseError("Failed to save period record", original_error=e) from e


def get_period_record(work_period_id: int, warehouse_id: int, *, session=None) -> PeriodRecord:
    """
    Load the record of a work period for a warehouse.

    Args:
        work_period_id: Work period id
        warehouse_id: Warehouse id
        session: Optional database session (uses session_scope if not provided)

    Returns:
        PeriodRecord with entries loaded

    Raises:
        PeriodRecordNotFound: If no record exists
    """
    cm = nullcontext(session) if session is not None else session_scope()
    with cm as session:
        record = (
            _with_entries(session.query(PeriodRecord))
            .filter(PeriodRecord.work_period_id == work_period_id)
            .filter(PeriodRecord.warehouse_id == warehouse_id)
            .first()
        )
        if record is None:
            raise PeriodRecordNotFound(work_period_id, warehouse_id)
        return record


def get_previous_period_record(
    warehouse_id: int,
    before: datetime,
    *,
    session=None,
) -> Optional[PeriodRecord]:
    """
    Load the most recent record of a warehouse that ended by a given time.

    This is the record a new period carries stock and cost forward from.

    Args:
        warehouse_id: Warehouse id
        before: Start of the period being opened
        session: Optional database session (uses session_scope if not provided)

    Returns:
        The latest PeriodRecord with end_date <= before, or None for the first period
    """
    cm = nullcontext(session) if session is not None else session_scope()
    with cm as session:
        return (
            _with_entries(session.query(PeriodRecord))
            .filter(PeriodRecord.warehouse_id == warehouse_id)
            .filter(PeriodRecord.end_date <= before)
            .order_by(PeriodRecord.end_date.desc(), PeriodRecord.id.desc())
            .first()
        )
