"""
Models package.

This package contains the SQLAlchemy ORM models owned by the costing engine
and the read-only catalog value types it consumes.
"""

from .base import Base, BaseModel
from .catalog import (
    InventoryItem,
    InventoryTransactionData,
    Portion,
    Recipe,
    RecipeItem,
    WorkPeriod,
)
from .consumption_ledger_entry import ConsumptionLedgerEntry
from .cost_allocation_entry import CostAllocationEntry
from .period_record import PeriodRecord

__all__ = [
    "Base",
    "BaseModel",
    # Catalog inputs
    "InventoryItem",
    "InventoryTransactionData",
    "Portion",
    "Recipe",
    "RecipeItem",
    "WorkPeriod",
    # Owned entities
    "ConsumptionLedgerEntry",
    "CostAllocationEntry",
    "PeriodRecord",
]
