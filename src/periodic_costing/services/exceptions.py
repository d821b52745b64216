"""Service layer exception classes for Periodic Costing.

Exception Hierarchy:
    ServiceError (base)
    ├── LedgerEntryNotFound
    ├── PeriodRecordNotFound
    ├── ValidationError
    └── DatabaseError

Division guards (empty stock, zero predicted consumption) are not errors:
the affected cost term is defined as zero and nothing is raised.
"""

from typing import Optional


class ServiceError(Exception):
    """Base exception for all service layer errors.

    All service-specific exceptions should inherit from this class.
    """

    pass


class LedgerEntryNotFound(ServiceError):
    """Raised when a recipe item references an inventory item with no ledger entry.

    This means the inventory catalog and the period record are out of sync.
    The triggering operation is aborted and the period record is left as it was.

    Args:
        inventory_item_id: Inventory item with no consumption ledger entry
        warehouse_id: Warehouse of the period record searched
        work_period_id: Work period of the period record searched

    Example:
        >>> raise LedgerEntryNotFound(7, warehouse_id=1, work_period_id=3)
        LedgerEntryNotFound: No consumption ledger entry for inventory item 7
        (warehouse 1, work period 3)
    """

    def __init__(
        self,
        inventory_item_id: int,
        warehouse_id: Optional[int] = None,
        work_period_id: Optional[int] = None,
    ):
        self.inventory_item_id = inventory_item_id
        self.warehouse_id = warehouse_id
        self.work_period_id = work_period_id
        super().__init__(
            f"No consumption ledger entry for inventory item {inventory_item_id} "
            f"(warehouse {warehouse_id}, work period {work_period_id})"
        )


class PeriodRecordNotFound(ServiceError):
    """Raised when no period record exists for a work period and warehouse."""

    def __init__(self, work_period_id: int, warehouse_id: int):
        self.work_period_id = work_period_id
        self.warehouse_id = warehouse_id
        super().__init__(
            f"Period record for work period {work_period_id} "
            f"and warehouse {warehouse_id} not found"
        )


class ValidationError(ServiceError):
    """Raised when input validation fails.

    Args:
        errors: List of validation error messages
    """

    def __init__(self, errors: list):
        self.errors = errors
        error_msg = "; ".join(errors)
        super().__init__(f"Validation failed: {error_msg}")


class DatabaseError(ServiceError):
    """Raised when a database operation fails."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
