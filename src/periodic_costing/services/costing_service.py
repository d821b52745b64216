"""
Costing Service - periodic consumption tracking and portion costing.

This module provides functions for:
- Opening a period: one consumption ledger entry per inventory item, with
  stock carried forward and a weighted-average unit cost
- Recording sales: accumulating recipe-driven consumption
- Recording cost allocations: predicted per-portion cost at sale time
- Settling final costs at period close from actual vs predicted consumption
- Recording physical counts and wastage supplied by stock-taking

Every function works on a PeriodRecord passed in by the caller and never
touches a database session. Persisting the mutated record is the caller's
job (see period_record_service).

Division guards:
- A ledger entry with no opening stock and no net purchase keeps cost 0
- An inventory item with no predicted consumption contributes 0 to settlement
"""

import logging
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from ..models import (
    ConsumptionLedgerEntry,
    CostAllocationEntry,
    InventoryItem,
    InventoryTransactionData,
    PeriodRecord,
    Recipe,
    RecipeItem,
    WorkPeriod,
)
from ..utils.datetime_utils import utc_now
from .dto_utils import Number, round_cost, round_quantity, to_decimal
from .exceptions import LedgerEntryNotFound, ValidationError
from .logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)

ZERO = Decimal("0")


# =============================================================================
# Ledger Entry Lookup
# =============================================================================


def find_consumption_entry(
    period_record: PeriodRecord,
    inventory_item_id: int,
) -> ConsumptionLedgerEntry:
    """
    Get the ledger entry for an inventory item or fail.

    Args:
        period_record: Period record to search
        inventory_item_id: Catalog id of the inventory item

    Returns:
        The matching ConsumptionLedgerEntry

    Raises:
        LedgerEntryNotFound: If the period record has no entry for the item
    """
    entry = period_record.get_consumption_entry(inventory_item_id)
    if entry is None:
        log_operation(
            logger,
            operation="find_consumption_entry",
            outcome="entry_not_found",
            level=logging.WARNING,
            inventory_item_id=inventory_item_id,
            warehouse_id=period_record.warehouse_id,
            work_period_id=period_record.work_period_id,
        )
        raise LedgerEntryNotFound(
            inventory_item_id,
            warehouse_id=period_record.warehouse_id,
            work_period_id=period_record.work_period_id,
        )
    return entry


def _resolve_recipe_entries(
    period_record: PeriodRecord,
    recipe: Recipe,
) -> List[Tuple[RecipeItem, ConsumptionLedgerEntry]]:
    """Pair each valid recipe item with its ledger entry, failing before any mutation."""
    return [
        (recipe_item, find_consumption_entry(period_record, recipe_item.inventory_item.id))
        for recipe_item in recipe.get_valid_recipe_items()
    ]


# =============================================================================
# Period Opening
# =============================================================================


def create_period_record(work_period: WorkPeriod, warehouse_id: int) -> PeriodRecord:
    """
    Create an empty period record for a work period and warehouse.

    Args:
        work_period: Work period being opened
        warehouse_id: Warehouse the record tracks

    Returns:
        New PeriodRecord named after the work period's date range
    """
    period_record = PeriodRecord.create(work_period, warehouse_id)
    log_operation(
        logger,
        operation="create_period_record",
        outcome="success",
        work_period_id=work_period.id,
        warehouse_id=warehouse_id,
    )
    return period_record


def open_consumption_entry(
    period_record: PeriodRecord,
    inventory_item: InventoryItem,
    previous_record: Optional[PeriodRecord],
    transactions: Iterable[InventoryTransactionData],
) -> ConsumptionLedgerEntry:
    """
    Create the ledger entry for one inventory item at period open.

    Opening stock comes from the previous period's entry for the item: its
    physical count when one was taken, otherwise its predicted ending stock.
    With no previous entry the item opens at zero.

    Net purchase is what arrived at this warehouse minus what left it, over
    the transactions referencing this item, converted to the stock unit.

    Unit cost is the weighted average of the carried-forward stock value and
    the period's transaction value:

        (sum(price * quantity) + previous_cost * in_stock) / (in_stock + purchase)

    rounded to 2 places. When in_stock + purchase is not positive the cost
    stays at 0.

    Args:
        period_record: Record being opened (the entry is appended to it)
        inventory_item: Catalog item to open
        previous_record: Record of the preceding period for this warehouse, or None
        transactions: The period's transaction lines; other items are ignored

    Returns:
        The new ConsumptionLedgerEntry

    Raises:
        ValidationError: If the record already has an entry for the item
    """
    if period_record.get_consumption_entry(inventory_item.id) is not None:
        raise ValidationError(
            [f"Inventory item {inventory_item.id} already has a ledger entry in this period"]
        )

    entry = ConsumptionLedgerEntry.create(inventory_item)

    previous_value = ZERO
    if previous_record is not None:
        previous_entry = previous_record.get_consumption_entry(inventory_item.id)
        if previous_entry is not None:
            entry.in_stock = previous_entry.get_closing_stock()
            previous_value = previous_entry.cost * entry.in_stock

    warehouse_id = period_record.warehouse_id
    item_transactions = [t for t in transactions if t.inventory_item_id == inventory_item.id]

    incoming = sum(
        (
            to_decimal(t.quantity) * to_decimal(t.multiplier)
            for t in item_transactions
            if t.target_warehouse_id == warehouse_id
        ),
        ZERO,
    )
    outgoing = sum(
        (
            to_decimal(t.quantity) * to_decimal(t.multiplier)
            for t in item_transactions
            if t.source_warehouse_id == warehouse_id
        ),
        ZERO,
    )
    entry.purchase = round_quantity(
        incoming / entry.unit_multiplier - outgoing / entry.unit_multiplier
    )

    total_price = sum(
        (to_decimal(t.price) * to_decimal(t.quantity) for t in item_transactions),
        ZERO,
    )

    available = entry.in_stock + entry.purchase
    if available > 0:
        entry.cost = max(round_cost((total_price + previous_value) / available), ZERO)

    period_record.consumption_entries.append(entry)

    log_operation(
        logger,
        operation="open_consumption_entry",
        outcome="success" if available > 0 else "no_stock",
        level=logging.DEBUG,
        inventory_item_id=inventory_item.id,
        warehouse_id=warehouse_id,
        in_stock=str(entry.in_stock),
        purchase=str(entry.purchase),
        cost=str(entry.cost),
    )
    return entry


def open_consumption_entries(
    period_record: PeriodRecord,
    inventory_items: Iterable[InventoryItem],
    previous_record: Optional[PeriodRecord],
    transactions: Iterable[InventoryTransactionData],
) -> List[ConsumptionLedgerEntry]:
    """
    Open a ledger entry for every item in the inventory catalog.

    Args:
        period_record: Record being opened
        inventory_items: Full inventory catalog
        previous_record: Record of the preceding period, or None
        transactions: The period's transaction lines

    Returns:
        New entries in catalog order
    """
    transactions = list(transactions)
    entries = [
        open_consumption_entry(period_record, inventory_item, previous_record, transactions)
        for inventory_item in inventory_items
    ]
    period_record.touch()

    log_operation(
        logger,
        operation="open_consumption_entries",
        outcome="success",
        warehouse_id=period_record.warehouse_id,
        work_period_id=period_record.work_period_id,
        entry_count=len(entries),
        transaction_count=len(transactions),
        carried_forward=previous_record is not None,
    )
    return entries


def open_period(
    work_period: WorkPeriod,
    warehouse_id: int,
    inventory_items: Iterable[InventoryItem],
    previous_record: Optional[PeriodRecord],
    transactions: Iterable[InventoryTransactionData],
) -> PeriodRecord:
    """
    Create a period record and open every catalog item in it.

    Args:
        work_period: Work period being opened
        warehouse_id: Warehouse the record tracks
        inventory_items: Full inventory catalog
        previous_record: Record of the preceding period, or None
        transactions: The period's transaction lines

    Returns:
        New PeriodRecord with one ledger entry per inventory item
    """
    period_record = create_period_record(work_period, warehouse_id)
    open_consumption_entries(period_record, inventory_items, previous_record, transactions)
    return period_record


# =============================================================================
# Sale Recording
# =============================================================================


def record_sale(
    period_record: PeriodRecord,
    recipe: Optional[Recipe],
    sale_total: Number,
) -> None:
    """
    Add the consumption implied by a sale to the period's ledger entries.

    Each valid recipe item adds quantity * sale_total / unit_multiplier to its
    entry's predicted and actual consumption, kept to the ledger's 6 decimal
    places.

    Args:
        period_record: Record of the current period
        recipe: Recipe of the sold portion; None is a no-op
        sale_total: Number of portions sold

    Raises:
        LedgerEntryNotFound: If a recipe item has no ledger entry. No entry
            is changed in that case.
    """
    if recipe is None:
        return

    sale_total = to_decimal(sale_total)
    for recipe_item, entry in _resolve_recipe_entries(period_record, recipe):
        consumed = round_quantity(
            (to_decimal(recipe_item.quantity) * sale_total) / entry.unit_multiplier
        )
        entry.predicted_consumption += consumed
        entry.actual_consumption += consumed

    period_record.touch()

    log_operation(
        logger,
        operation="record_sale",
        outcome="success",
        level=logging.DEBUG,
        warehouse_id=period_record.warehouse_id,
        recipe_id=recipe.id,
        portion_id=recipe.portion.id,
        sale_total=str(sale_total),
    )


def _predicted_item_cost(recipe_item: RecipeItem, entry: ConsumptionLedgerEntry) -> Decimal:
    """Cost of one portion's use of an item at the period's unit cost."""
    return to_decimal(recipe_item.quantity) * (entry.cost / entry.unit_multiplier)


def calculate_predicted_cost(period_record: PeriodRecord, recipe: Recipe) -> Decimal:
    """
    Predicted per-portion cost of a recipe at this period's unit costs.

    Fixed cost is not part of the prediction.

    Raises:
        LedgerEntryNotFound: If a recipe item has no ledger entry
    """
    return sum(
        (
            _predicted_item_cost(recipe_item, entry)
            for recipe_item, entry in _resolve_recipe_entries(period_record, recipe)
        ),
        ZERO,
    )


def record_cost_allocation(
    period_record: PeriodRecord,
    recipe: Optional[Recipe],
    menu_item_name: str,
    sale_total: Number,
) -> Optional[CostAllocationEntry]:
    """
    Attach a predicted cost to portions sold.

    The first sale of a portion in a period creates its cost allocation entry
    with the predicted cost; later sales of the same portion add to its
    quantity. Unit costs are fixed at period open, so the prediction does not
    change within a period. The entry keeps the menu item name of the first
    sale; names passed with later sales are ignored.

    Args:
        period_record: Record of the current period
        recipe: Recipe of the sold portion; None is a no-op
        menu_item_name: Display name stored on the entry
        sale_total: Number of portions sold

    Returns:
        The created or updated CostAllocationEntry, or None if recipe is None

    Raises:
        LedgerEntryNotFound: If a recipe item has no ledger entry
    """
    if recipe is None:
        return None

    sale_total = to_decimal(sale_total)
    predicted_cost = calculate_predicted_cost(period_record, recipe)

    allocation = period_record.get_cost_allocation(recipe.portion.id)
    if allocation is None:
        allocation = CostAllocationEntry(
            name=menu_item_name,
            portion_id=recipe.portion.id,
            menu_item_id=recipe.portion.menu_item_id,
            portion_name=recipe.portion.name,
            cost_prediction=predicted_cost,
            cost=predicted_cost,
            quantity=sale_total,
        )
        period_record.cost_allocations.append(allocation)
        outcome = "created"
    else:
        allocation.quantity += sale_total
        outcome = "aggregated"

    period_record.touch()

    log_operation(
        logger,
        operation="record_cost_allocation",
        outcome=outcome,
        level=logging.DEBUG,
        warehouse_id=period_record.warehouse_id,
        portion_id=recipe.portion.id,
        cost_prediction=str(predicted_cost),
        sale_total=str(sale_total),
    )
    return allocation


# =============================================================================
# Settlement
# =============================================================================


def _final_item_cost(recipe_item: RecipeItem, entry: ConsumptionLedgerEntry) -> Decimal:
    """
    Predicted item cost scaled by actual / predicted consumption.

    Items with no predicted consumption contribute nothing.
    """
    predicted = entry.get_predicted_consumption()
    if predicted > 0:
        cost = _predicted_item_cost(recipe_item, entry)
        return (entry.get_actual_consumption() * cost) / predicted
    return ZERO


def calculate_final_cost(period_record: PeriodRecord, recipe: Recipe) -> Decimal:
    """
    Settled per-portion cost of a recipe, rounded to 2 places.

    fixed_cost plus each item's predicted cost scaled by the ratio of actual
    to predicted consumption of that item over the whole period. Wastage and
    over-use therefore spread across every portion that used the item.

    Raises:
        LedgerEntryNotFound: If a recipe item has no ledger entry
    """
    item_costs = sum(
        (
            _final_item_cost(recipe_item, entry)
            for recipe_item, entry in _resolve_recipe_entries(period_record, recipe)
        ),
        ZERO,
    )
    return round_cost(to_decimal(recipe.fixed_cost) + item_costs)


def settle_final_costs(
    period_record: PeriodRecord,
    recipes: Iterable[Optional[Recipe]],
) -> int:
    """
    Write the settled cost on every sold portion at period close.

    Recipes without a cost allocation entry in the period (nothing sold) are
    skipped, as are None recipes and entries already settled. A portion listed
    more than once is settled once. All costs are computed before any entry
    is written, so a lookup failure leaves the record unchanged.

    Args:
        period_record: Record of the period being closed
        recipes: Recipes to settle

    Returns:
        Number of cost allocation entries settled

    Raises:
        LedgerEntryNotFound: If a recipe item has no ledger entry
    """
    pending = []
    seen = set()
    skipped = 0
    for recipe in recipes:
        if recipe is None:
            continue
        allocation = period_record.get_cost_allocation(recipe.portion.id)
        if allocation is None or recipe.portion.id in seen:
            continue
        if allocation.is_settled:
            skipped += 1
            continue
        seen.add(recipe.portion.id)
        pending.append((allocation, calculate_final_cost(period_record, recipe)))

    settled_at = utc_now()
    for allocation, final_cost in pending:
        allocation.cost = final_cost
        allocation.settled_at = settled_at

    if pending:
        period_record.touch()

    log_operation(
        logger,
        operation="settle_final_costs",
        outcome="success",
        warehouse_id=period_record.warehouse_id,
        work_period_id=period_record.work_period_id,
        settled_count=len(pending),
        already_settled=skipped,
    )
    return len(pending)


# =============================================================================
# Stock-taking Inputs
# =============================================================================


def record_physical_count(
    period_record: PeriodRecord,
    inventory_item_id: int,
    quantity: Number,
) -> ConsumptionLedgerEntry:
    """
    Store a closing physical count supplied by stock-taking.

    Once recorded, actual consumption and the stock carried into the next
    period come from the count.

    Args:
        period_record: Record of the current period
        inventory_item_id: Item counted
        quantity: Counted quantity in the stock unit

    Returns:
        The updated ConsumptionLedgerEntry

    Raises:
        ValidationError: If quantity is negative
        LedgerEntryNotFound: If the item has no ledger entry
    """
    quantity = round_quantity(quantity)
    if quantity < 0:
        raise ValidationError([f"Physical count cannot be negative (got {quantity})"])

    entry = find_consumption_entry(period_record, inventory_item_id)
    entry.physical_inventory = quantity
    period_record.touch()

    log_operation(
        logger,
        operation="record_physical_count",
        outcome="success",
        warehouse_id=period_record.warehouse_id,
        inventory_item_id=inventory_item_id,
        physical_inventory=str(quantity),
    )
    return entry


def record_wastage(
    period_record: PeriodRecord,
    inventory_item_id: int,
    quantity: Number,
) -> ConsumptionLedgerEntry:
    """
    Add depletion no recipe accounts for (spillage, spoilage, staff use).

    Only actual consumption grows; predicted consumption is unchanged.

    Args:
        period_record: Record of the current period
        inventory_item_id: Item wasted
        quantity: Wasted quantity in the stock unit

    Returns:
        The updated ConsumptionLedgerEntry

    Raises:
        ValidationError: If quantity is negative
        LedgerEntryNotFound: If the item has no ledger entry
    """
    quantity = round_quantity(quantity)
    if quantity < 0:
        raise ValidationError([f"Wastage cannot be negative (got {quantity})"])

    entry = find_consumption_entry(period_record, inventory_item_id)
    entry.actual_consumption += quantity
    period_record.touch()

    log_operation(
        logger,
        operation="record_wastage",
        outcome="success",
        warehouse_id=period_record.warehouse_id,
        inventory_item_id=inventory_item_id,
        quantity=str(quantity),
    )
    return entry
