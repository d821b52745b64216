"""
CostAllocationEntry model for portion cost attribution.

One row per sold portion within a period record. The predicted cost is
fixed when the sale is recorded; the settled cost is written once when the
period closes.
"""

from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import relationship

from .base import BaseModel


class CostAllocationEntry(BaseModel):
    """
    Predicted and settled cost of one portion sold in a period.

    Costs are per portion; multiply by quantity for the period total.

    Attributes:
        period_record_id: Foreign key to parent PeriodRecord
        name: Menu item display name
        portion_id: Catalog id of the sold portion
        menu_item_id: Catalog id of the menu item owning the portion
        portion_name: Portion display name
        cost_prediction: Per-portion cost from recipe quantities and unit costs
        cost: Settled per-portion cost (equals the prediction until settled)
        quantity: Number of portions sold
        settled_at: When settlement wrote the final cost
    """

    __tablename__ = "cost_allocation_entries"

    period_record_id = Column(
        Integer,
        ForeignKey("period_records.id", ondelete="CASCADE"),
        nullable=False,
    )

    name = Column(String(200), nullable=False, default="")
    portion_id = Column(Integer, nullable=False)
    menu_item_id = Column(Integer, nullable=True)
    portion_name = Column(String(100), nullable=False, default="")

    cost_prediction = Column(Numeric(18, 6), nullable=False, default=Decimal("0"))
    cost = Column(Numeric(18, 6), nullable=False, default=Decimal("0"))
    quantity = Column(Numeric(18, 6), nullable=False, default=Decimal("0"))

    settled_at = Column(DateTime, nullable=True)

    period_record = relationship("PeriodRecord", back_populates="cost_allocations")

    __table_args__ = (
        Index("idx_cost_allocation_period", "period_record_id"),
        Index("idx_cost_allocation_portion", "portion_id"),
    )

    def __repr__(self) -> str:
        """String representation of cost allocation entry."""
        return (
            f"CostAllocationEntry(id={self.id}, "
            f"portion_id={self.portion_id}, "
            f"name='{self.name}', quantity={self.quantity}, "
            f"cost_prediction={self.cost_prediction}, cost={self.cost})"
        )

    @property
    def is_settled(self) -> bool:
        """True once period close has written the settled cost."""
        return self.settled_at is not None

    @property
    def total_cost_prediction(self) -> Decimal:
        """Predicted cost of all portions sold."""
        return self.cost_prediction * self.quantity

    @property
    def total_cost(self) -> Decimal:
        """Settled cost of all portions sold."""
        return self.cost * self.quantity

    def to_dict(self, include_relationships: bool = False) -> dict:
        """
        Convert entry to dictionary with period totals.

        Args:
            include_relationships: If True, include the parent period record

        Returns:
            Dictionary representation with Decimals as strings
        """
        result = super().to_dict(include_relationships)
        result["is_settled"] = self.is_settled
        result["total_cost_prediction"] = str(self.total_cost_prediction)
        result["total_cost"] = str(self.total_cost)
        return result
