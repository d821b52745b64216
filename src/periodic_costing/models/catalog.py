"""
Catalog value types supplied by the surrounding point of sale.

The costing engine reads these and never mutates them. They are plain frozen
dataclasses so callers can build them from whatever store holds the catalog
(ORM rows, import files, test fixtures).

This module contains:
- WorkPeriod: Bounds of the period being costed
- InventoryItem: Stock-keeping item with its unit conversion
- Portion: Sellable portion of a menu item
- RecipeItem / Recipe: What one portion consumes
- InventoryTransactionData: One purchase or transfer line
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Iterator, Optional, Tuple

from ..utils.constants import DEFAULT_UNIT_MULTIPLIER


@dataclass(frozen=True)
class WorkPeriod:
    """A bounded operating window (a shift or a day).

    Attributes:
        id: Work period identifier
        start_date: When the period opened
        end_date: When the period closed (equal to start_date while still open)
    """

    id: int
    start_date: datetime
    end_date: datetime


@dataclass(frozen=True)
class InventoryItem:
    """An inventory item as the catalog describes it.

    Recipes measure in the base unit. Purchases and counts may use a larger
    transaction unit (a 1000 g "bag" for flour measured in grams); the
    multiplier says how many base units make one transaction unit.

    Attributes:
        id: Inventory item identifier
        name: Display name
        base_unit: Recipe measurement unit (e.g., "g")
        transaction_unit: Stock-keeping unit (e.g., "bag"), optional
        transaction_unit_multiplier: Base units per transaction unit, 0 if unused
        is_active: False for deleted/retired items
    """

    id: int
    name: str
    base_unit: str = ""
    transaction_unit: Optional[str] = None
    transaction_unit_multiplier: Decimal = Decimal("0")
    is_active: bool = True

    @property
    def stock_unit_name(self) -> str:
        """Unit the period ledger counts this item in."""
        if self.transaction_unit_multiplier > 0:
            return self.transaction_unit or self.base_unit
        return self.base_unit

    @property
    def stock_unit_multiplier(self) -> Decimal:
        """Recipe units per stock unit."""
        if self.transaction_unit_multiplier > 0:
            return Decimal(str(self.transaction_unit_multiplier))
        return DEFAULT_UNIT_MULTIPLIER


@dataclass(frozen=True)
class Portion:
    """A sellable portion of a menu item (e.g., "Large" espresso)."""

    id: int
    name: str
    menu_item_id: int


@dataclass(frozen=True)
class RecipeItem:
    """Quantity of one inventory item consumed per portion sold, in recipe units."""

    inventory_item: InventoryItem
    quantity: Decimal


@dataclass(frozen=True)
class Recipe:
    """Recipe for one portion.

    Attributes:
        id: Recipe identifier
        name: Recipe name
        portion: Portion this recipe produces
        fixed_cost: Overhead added to every settled portion cost
        recipe_items: Ingredients with per-portion quantities
    """

    id: int
    name: str
    portion: Portion
    fixed_cost: Decimal = Decimal("0")
    recipe_items: Tuple[RecipeItem, ...] = field(default_factory=tuple)

    def get_valid_recipe_items(self) -> Iterator[RecipeItem]:
        """
        Yield the recipe items that take part in costing.

        Items without a positive quantity, or whose inventory item is missing
        or inactive, are skipped.
        """
        for recipe_item in self.recipe_items:
            if recipe_item.inventory_item is None or not recipe_item.inventory_item.is_active:
                continue
            if recipe_item.quantity <= 0:
                continue
            yield recipe_item


@dataclass(frozen=True)
class InventoryTransactionData:
    """One inventory movement line for the period.

    A purchase has no source warehouse; a transfer has both. Quantity is in
    the transaction's own unit, and multiplier converts it to recipe units.

    Attributes:
        inventory_item_id: Item moved
        source_warehouse_id: Warehouse stock left, if any
        target_warehouse_id: Warehouse stock arrived at, if any
        quantity: Quantity in the transaction unit
        multiplier: Recipe units per transaction unit
        price: Price per transaction unit
    """

    inventory_item_id: int
    source_warehouse_id: Optional[int]
    target_warehouse_id: Optional[int]
    quantity: Decimal
    multiplier: Decimal = Decimal("1")
    price: Decimal = Decimal("0")
