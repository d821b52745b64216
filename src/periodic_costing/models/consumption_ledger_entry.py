"""
ConsumptionLedgerEntry model for per-period inventory consumption.

Each row tracks one inventory item in one period record: what was on hand
when the period opened, what came in or went out through purchases and
transfers, how much sales say was used, how much was really used, and the
weighted-average unit cost the period carries.

All quantities are in the item's stock unit. Recipe quantities are divided
by unit_multiplier before they are added here.
"""

from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import BaseModel
from .catalog import InventoryItem


class ConsumptionLedgerEntry(BaseModel):
    """
    Consumption ledger entry for one inventory item in one period.

    Attributes:
        period_record_id: Foreign key to parent PeriodRecord
        inventory_item_id: Catalog id of the inventory item (not a foreign key,
            the catalog lives outside this schema)
        inventory_item_name: Item name at the time the period opened
        unit_name: Stock unit name
        unit_multiplier: Recipe units per stock unit
        in_stock: Opening stock carried from the previous period
        purchase: Net purchases and transfers for this warehouse
        predicted_consumption: Accumulated consumption implied by recipes
        actual_consumption: Accumulated real depletion (sales plus wastage)
        physical_inventory: Closing physical count, if one was taken
        cost: Weighted-average unit cost, rounded to 2 places

    Quantities are kept to 6 decimal places, the precision of their columns.
    """

    __tablename__ = "consumption_ledger_entries"

    period_record_id = Column(
        Integer,
        ForeignKey("period_records.id", ondelete="CASCADE"),
        nullable=False,
    )

    inventory_item_id = Column(Integer, nullable=False)
    inventory_item_name = Column(String(200), nullable=False, default="")
    unit_name = Column(String(50), nullable=False, default="")
    unit_multiplier = Column(Numeric(18, 6), nullable=False, default=Decimal("1"))

    in_stock = Column(Numeric(18, 6), nullable=False, default=Decimal("0"))
    purchase = Column(Numeric(18, 6), nullable=False, default=Decimal("0"))
    predicted_consumption = Column(Numeric(18, 6), nullable=False, default=Decimal("0"))
    actual_consumption = Column(Numeric(18, 6), nullable=False, default=Decimal("0"))
    physical_inventory = Column(Numeric(18, 6), nullable=True)

    cost = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))

    period_record = relationship("PeriodRecord", back_populates="consumption_entries")

    __table_args__ = (
        Index("idx_consumption_entry_period", "period_record_id"),
        Index("idx_consumption_entry_item", "inventory_item_id"),
        UniqueConstraint(
            "period_record_id", "inventory_item_id", name="uq_consumption_entry_period_item"
        ),
        CheckConstraint("cost >= 0", name="ck_consumption_entry_cost_non_negative"),
        CheckConstraint("unit_multiplier > 0", name="ck_consumption_entry_multiplier_positive"),
    )

    @classmethod
    def create(cls, inventory_item: InventoryItem) -> "ConsumptionLedgerEntry":
        """
        Create an empty entry for an inventory item.

        The stock unit is the item's transaction unit when it has a positive
        multiplier, otherwise its base unit with multiplier 1.

        Args:
            inventory_item: Catalog item the entry tracks

        Returns:
            New ConsumptionLedgerEntry with all quantities and cost at zero
        """
        return cls(
            inventory_item_id=inventory_item.id,
            inventory_item_name=inventory_item.name,
            unit_name=inventory_item.stock_unit_name,
            unit_multiplier=inventory_item.stock_unit_multiplier,
            in_stock=Decimal("0"),
            purchase=Decimal("0"),
            predicted_consumption=Decimal("0"),
            actual_consumption=Decimal("0"),
            physical_inventory=None,
            cost=Decimal("0"),
        )

    def __repr__(self) -> str:
        """String representation of consumption ledger entry."""
        return (
            f"ConsumptionLedgerEntry(id={self.id}, "
            f"inventory_item_id={self.inventory_item_id}, "
            f"in_stock={self.in_stock}, purchase={self.purchase}, "
            f"cost={self.cost})"
        )

    @property
    def has_physical_count(self) -> bool:
        """True when a closing physical count has been recorded."""
        return self.physical_inventory is not None

    def get_predicted_ending_stock(self) -> Decimal:
        """Opening stock plus purchases minus recipe-predicted consumption."""
        return self.in_stock + self.purchase - self.predicted_consumption

    def get_predicted_consumption(self) -> Decimal:
        """Consumption implied by recorded sales."""
        return self.predicted_consumption

    def get_actual_consumption(self) -> Decimal:
        """
        Consumption that really happened.

        With a physical count this is what disappeared from the shelf
        (opening + purchases - count); without one it is the accumulated
        actual consumption.
        """
        if self.physical_inventory is not None:
            return self.in_stock + self.purchase - self.physical_inventory
        return self.actual_consumption

    def get_closing_stock(self) -> Decimal:
        """Stock carried into the next period: the physical count if taken."""
        if self.physical_inventory is not None:
            return self.physical_inventory
        return self.get_predicted_ending_stock()

    def get_stock_value(self) -> Decimal:
        """Closing stock valued at this period's unit cost (unrounded)."""
        return self.cost * self.get_closing_stock()

    def to_dict(self, include_relationships: bool = False) -> dict:
        """
        Convert entry to dictionary, including derived quantities.

        Args:
            include_relationships: If True, include the parent period record

        Returns:
            Dictionary representation with Decimals as strings
        """
        result = super().to_dict(include_relationships)
        result["predicted_ending_stock"] = str(self.get_predicted_ending_stock())
        result["actual_consumption_total"] = str(self.get_actual_consumption())
        result["closing_stock"] = str(self.get_closing_stock())
        return result
