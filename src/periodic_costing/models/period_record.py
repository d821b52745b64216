"""
PeriodRecord model - consumption and cost tracking for one work period.

A period record exists once per (work period, warehouse) pair. It owns the
consumption ledger entries (one per inventory item) and the cost allocation
entries (one per sold portion). Once the next period opens the record is
history; nothing enforces that beyond convention.
"""

from typing import Optional

from sqlalchemy import Column, DateTime, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import BaseModel
from .catalog import WorkPeriod
from .consumption_ledger_entry import ConsumptionLedgerEntry
from .cost_allocation_entry import CostAllocationEntry
from ..utils.datetime_utils import format_period_timestamp, utc_now


class PeriodRecord(BaseModel):
    """
    Consumption and costing state of one warehouse over one work period.

    Attributes:
        work_period_id: Catalog id of the work period
        warehouse_id: Catalog id of the warehouse
        name: Display name built from the date range
        start_date: Work period start
        end_date: Work period end
        last_update_time: Last time an engine operation changed the record
        consumption_entries: Ledger entries, one per inventory item
        cost_allocations: Cost allocation entries, one per sold portion
    """

    __tablename__ = "period_records"

    work_period_id = Column(Integer, nullable=False, index=True)
    warehouse_id = Column(Integer, nullable=False, index=True)
    name = Column(String(100), nullable=False, default="")
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    last_update_time = Column(DateTime, nullable=False, default=utc_now)

    consumption_entries = relationship(
        "ConsumptionLedgerEntry",
        back_populates="period_record",
        cascade="all, delete-orphan",
        order_by="ConsumptionLedgerEntry.id",
    )
    cost_allocations = relationship(
        "CostAllocationEntry",
        back_populates="period_record",
        cascade="all, delete-orphan",
        order_by="CostAllocationEntry.id",
    )

    __table_args__ = (
        UniqueConstraint("work_period_id", "warehouse_id", name="uq_period_record_period_warehouse"),
        Index("idx_period_record_warehouse_end", "warehouse_id", "end_date"),
    )

    @classmethod
    def create(cls, work_period: WorkPeriod, warehouse_id: int) -> "PeriodRecord":
        """
        Create an empty period record bound to a work period's date range.

        Args:
            work_period: Work period being opened
            warehouse_id: Warehouse the record tracks

        Returns:
            New PeriodRecord with no entries
        """
        return cls(
            work_period_id=work_period.id,
            warehouse_id=warehouse_id,
            name=(
                f"{format_period_timestamp(work_period.start_date)} - "
                f"{format_period_timestamp(work_period.end_date)}"
            ),
            start_date=work_period.start_date,
            end_date=work_period.end_date,
            last_update_time=utc_now(),
        )

    def get_consumption_entry(self, inventory_item_id: int) -> Optional[ConsumptionLedgerEntry]:
        """
        Find the ledger entry for an inventory item.

        Args:
            inventory_item_id: Catalog id of the inventory item

        Returns:
            Matching ConsumptionLedgerEntry, or None if the item has no entry
        """
        for entry in self.consumption_entries:
            if entry.inventory_item_id == inventory_item_id:
                return entry
        return None

    def get_cost_allocation(self, portion_id: int) -> Optional[CostAllocationEntry]:
        """
        Find the cost allocation entry for a portion.

        Args:
            portion_id: Catalog id of the portion

        Returns:
            Matching CostAllocationEntry, or None if the portion was not sold
        """
        for allocation in self.cost_allocations:
            if allocation.portion_id == portion_id:
                return allocation
        return None

    def touch(self) -> None:
        """Record that the period record was just changed."""
        self.last_update_time = utc_now()

    def __repr__(self) -> str:
        """String representation of period record."""
        return (
            f"PeriodRecord(id={self.id}, "
            f"work_period_id={self.work_period_id}, "
            f"warehouse_id={self.warehouse_id}, "
            f"name='{self.name}')"
        )
