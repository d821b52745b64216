"""Variance Service - predicted vs actual consumption for a period.

Summaries are plain dicts with Decimal values rendered as strings, following
the service DTO convention. Nothing here mutates the period record.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..models import ConsumptionLedgerEntry, PeriodRecord
from .dto_utils import cost_to_string, quantity_to_string


def _consumption_ratio(entry: ConsumptionLedgerEntry) -> Optional[Decimal]:
    predicted = entry.get_predicted_consumption()
    if predicted > 0:
        return entry.get_actual_consumption() / predicted
    return None


def get_entry_variance(entry: ConsumptionLedgerEntry) -> Dict[str, Any]:
    """
    Describe how far actual consumption of one item strayed from prediction.

    Args:
        entry: Ledger entry to describe

    Returns:
        Dict with keys:
            - "inventory_item_id": int
            - "inventory_item_name": str
            - "unit_name": str
            - "predicted_consumption": str
            - "actual_consumption": str
            - "variance_quantity": str - actual minus predicted
            - "variance_cost": str - variance_quantity at the unit cost, 2 places
            - "ratio": Optional[str] - actual / predicted, None when nothing was predicted
            - "has_physical_count": bool
    """
    predicted = entry.get_predicted_consumption()
    actual = entry.get_actual_consumption()
    variance = actual - predicted
    ratio = _consumption_ratio(entry)

    return {
        "inventory_item_id": entry.inventory_item_id,
        "inventory_item_name": entry.inventory_item_name,
        "unit_name": entry.unit_name,
        "predicted_consumption": quantity_to_string(predicted),
        "actual_consumption": quantity_to_string(actual),
        "variance_quantity": quantity_to_string(variance),
        "variance_cost": cost_to_string(variance * entry.cost),
        "ratio": str(ratio) if ratio is not None else None,
        "has_physical_count": entry.has_physical_count,
    }


def get_consumption_variance(
    period_record: PeriodRecord,
    only_with_variance: bool = False,
) -> List[Dict[str, Any]]:
    """
    Variance of every ledger entry in a period record.

    Args:
        period_record: Record to summarize
        only_with_variance: If True, leave out items where actual equals predicted

    Returns:
        List of get_entry_variance() dicts in ledger order
    """
    results = []
    for entry in period_record.consumption_entries:
        if only_with_variance and entry.get_actual_consumption() == entry.get_predicted_consumption():
            continue
        results.append(get_entry_variance(entry))
    return results


def get_period_cost_summary(period_record: PeriodRecord) -> Dict[str, Any]:
    """
    Totals of predicted and settled portion cost for a period record.

    Returns:
        Dict with keys:
            - "period_name": str
            - "warehouse_id": int
            - "portion_count": int - number of cost allocation entries
            - "settled_count": int
            - "total_cost_prediction": str
            - "total_cost": str
            - "stock_value": str - closing stock at unit cost
    """
    allocations = period_record.cost_allocations
    total_prediction = sum((a.total_cost_prediction for a in allocations), Decimal("0"))
    total_cost = sum((a.total_cost for a in allocations), Decimal("0"))
    stock_value = sum(
        (entry.get_stock_value() for entry in period_record.consumption_entries), Decimal("0")
    )

    return {
        "period_name": period_record.name,
        "warehouse_id": period_record.warehouse_id,
        "portion_count": len(allocations),
        "settled_count": sum(1 for a in allocations if a.is_settled),
        "total_cost_prediction": cost_to_string(total_prediction),
        "total_cost": cost_to_string(total_cost),
        "stock_value": cost_to_string(stock_value),
    }
