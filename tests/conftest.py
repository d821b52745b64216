"""Pytest configuration and fixtures for the costing engine tests."""

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, scoped_session
from sqlalchemy.pool import StaticPool

from periodic_costing.models import (
    Base,
    InventoryItem,
    InventoryTransactionData,
    Portion,
    Recipe,
    RecipeItem,
    WorkPeriod,
)

WAREHOUSE_ID = 1
OTHER_WAREHOUSE_ID = 2


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean test database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database
    2. Creates all tables
    3. Provides the session factory to the test
    4. Drops all tables after the test completes
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    Session = scoped_session(session_factory)

    # Monkey-patch the global session factory for tests
    import periodic_costing.services.database as db_module

    original_get_session_factory = db_module.get_session_factory
    db_module.get_session_factory = lambda: Session

    yield Session

    Session.remove()
    Base.metadata.drop_all(engine)
    engine.dispose()

    db_module.get_session_factory = original_get_session_factory


@pytest.fixture
def work_period():
    """First work period: one business day."""
    return WorkPeriod(
        id=1,
        start_date=datetime(2024, 3, 1, 8, 0),
        end_date=datetime(2024, 3, 1, 23, 0),
    )


@pytest.fixture
def next_work_period():
    """Work period following work_period."""
    return WorkPeriod(
        id=2,
        start_date=datetime(2024, 3, 2, 8, 0),
        end_date=datetime(2024, 3, 2, 23, 0),
    )


@pytest.fixture
def coffee():
    """Coffee beans counted in grams."""
    return InventoryItem(id=10, name="Coffee Beans", base_unit="g")


@pytest.fixture
def milk():
    """Milk used in ml, stocked in 1000 ml cartons."""
    return InventoryItem(
        id=11,
        name="Milk",
        base_unit="ml",
        transaction_unit="carton",
        transaction_unit_multiplier=Decimal("1000"),
    )


@pytest.fixture
def retired_syrup():
    """Inactive inventory item still referenced by an old recipe."""
    return InventoryItem(id=12, name="Hazelnut Syrup", base_unit="ml", is_active=False)


@pytest.fixture
def inventory_items(coffee, milk):
    """Inventory catalog with coffee and milk."""
    return [coffee, milk]


@pytest.fixture
def espresso_recipe(coffee):
    """Espresso: 18 g of coffee, no fixed cost."""
    return Recipe(
        id=100,
        name="Espresso",
        portion=Portion(id=200, name="Single", menu_item_id=300),
        recipe_items=(RecipeItem(inventory_item=coffee, quantity=Decimal("18")),),
    )


@pytest.fixture
def latte_recipe(coffee, milk, retired_syrup):
    """Latte: 18 g coffee, 250 ml milk, 0.50 fixed cost (cup and lid)."""
    return Recipe(
        id=101,
        name="Latte",
        portion=Portion(id=201, name="Regular", menu_item_id=301),
        fixed_cost=Decimal("0.50"),
        recipe_items=(
            RecipeItem(inventory_item=coffee, quantity=Decimal("18")),
            RecipeItem(inventory_item=milk, quantity=Decimal("250")),
            RecipeItem(inventory_item=retired_syrup, quantity=Decimal("10")),
        ),
    )


@pytest.fixture
def purchases(coffee, milk):
    """Opening purchases for the warehouse.

    1000 g coffee at 0.03 per g and 20 cartons of milk at 1.20 each.
    """
    return [
        InventoryTransactionData(
            inventory_item_id=coffee.id,
            source_warehouse_id=None,
            target_warehouse_id=WAREHOUSE_ID,
            quantity=Decimal("1000"),
            multiplier=Decimal("1"),
            price=Decimal("0.03"),
        ),
        InventoryTransactionData(
            inventory_item_id=milk.id,
            source_warehouse_id=None,
            target_warehouse_id=WAREHOUSE_ID,
            quantity=Decimal("20"),
            multiplier=Decimal("1000"),
            price=Decimal("1.20"),
        ),
    ]
