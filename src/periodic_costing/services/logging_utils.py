"""Service layer logging utilities.

Provides structured logging functions for service operations, enabling
consistent log format and context across period opening, sale recording
and cost settlement.

Usage:
    from periodic_costing.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)

    log_operation(
        logger,
        operation="settle_final_costs",
        outcome="success",
        work_period_id=12,
        settled_count=8,
    )
"""

import logging
from typing import Any


def get_service_logger(name: str) -> logging.Logger:
    """
    Get a logger configured for service operations.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Logger instance with the 'periodic_costing.services' prefix.

    Example:
        >>> logger = get_service_logger(__name__)
        >>> logger.name
        'periodic_costing.services.costing_service'
    """
    # Extract just the module name if full path is provided
    if "." in name:
        name = name.split(".")[-1]
    return logging.getLogger(f"periodic_costing.services.{name}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Log a service operation with structured context.

    The context is passed via the 'extra' parameter for structured logging.

    Args:
        logger: Logger instance to use
        operation: Operation name (e.g., "record_sale", "settle_final_costs")
        outcome: Outcome description (e.g., "success", "entry_not_found")
        level: Log level (default: INFO). Use DEBUG for per-entry logs.
        **context: Additional context fields (warehouse_id, work_period_id,
            inventory_item_id, portion_id, ...)
    """
    extra = {
        "operation": operation,
        "outcome": outcome,
        **context,
    }
    logger.log(level, f"{operation}: {outcome}", extra=extra)
