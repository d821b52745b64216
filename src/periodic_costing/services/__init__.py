"""Services package - costing engine and supporting infrastructure.

Architecture:
- Services: Stateless functions operating on explicitly passed records
- Transactions: Managed by the caller via session_scope() context manager
- Exceptions: Consistent error handling via ServiceError hierarchy

Service Modules:
- costing_service: Period opening, sale recording and final cost settlement
- variance_service: Predicted vs actual consumption summaries
- period_record_service: Loading and saving period records

Infrastructure:
- exceptions: Custom exception classes for service layer errors
- database: Session management and database utilities
- logging_utils: Structured operation logging
- dto_utils: Decimal coercion and cost rounding
"""

from . import (
    costing_service,
    database,
    dto_utils,
    exceptions,
    logging_utils,
    period_record_service,
    variance_service,
)

__all__ = [
    "costing_service",
    "database",
    "dto_utils",
    "exceptions",
    "logging_utils",
    "period_record_service",
    "variance_service",
]
