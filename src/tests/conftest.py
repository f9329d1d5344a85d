"""Pytest configuration and fixtures for service layer tests."""

from datetime import date, datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, scoped_session

import src.models  # noqa: F401  (registers all tables on Base.metadata)
from src.models.base import Base


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean test database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database
    2. Creates all tables
    3. Provides the database to the test
    4. Drops all tables after the test completes
    """
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)

    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    Session = scoped_session(session_factory)

    # Monkey-patch the global session factory for tests
    import src.services.database as db_module

    original_get_session_factory = db_module.get_session_factory
    db_module.get_session_factory = lambda: Session

    yield Session

    Session.remove()
    Base.metadata.drop_all(engine)
    engine.dispose()

    db_module.get_session_factory = original_get_session_factory


# ============================================================================
# Plain record fixtures
# ============================================================================


@pytest.fixture
def vodka_product():
    """A 750 ml bottle of vodka at $20 per bottle."""
    return {
        "id": 1,
        "name": "House Vodka",
        "uom_purchase": "bottle",
        "size_value": 750,
        "size_unit": "ml",
        "cost_per_unit": 20.0,
        "current_stock": 6,
    }


@pytest.fixture
def sugar_product():
    """Granulated sugar bought by the kilogram at $8."""
    return {
        "id": 2,
        "name": "Granulated Sugar",
        "uom_purchase": "kg",
        "size_value": None,
        "size_unit": None,
        "cost_per_unit": 8.0,
        "current_stock": 10,
    }


@pytest.fixture
def hourly_employee():
    """Hourly employee at $15.00/hr."""
    return {
        "id": 1,
        "name": "Alex Line",
        "status": "active",
        "compensation_type": "hourly",
        "hourly_rate": 1500,
    }


@pytest.fixture
def salary_employee():
    """Salaried employee paid $1,000.00 weekly."""
    return {
        "id": 2,
        "name": "Sam Manager",
        "status": "active",
        "compensation_type": "salary",
        "hourly_rate": 0,
        "salary_amount": 100000,
        "pay_period_type": "weekly",
    }


@pytest.fixture
def contractor_employee():
    """Contractor paid $500.00 weekly."""
    return {
        "id": 3,
        "name": "Jo Cleaning",
        "status": "active",
        "compensation_type": "contractor",
        "hourly_rate": 0,
        "contractor_payment_amount": 50000,
        "contractor_payment_interval": "weekly",
    }


@pytest.fixture
def per_job_contractor():
    """Contractor paid $300.00 per job."""
    return {
        "id": 4,
        "name": "Pat Repairs",
        "status": "active",
        "compensation_type": "contractor",
        "hourly_rate": 0,
        "contractor_payment_amount": 30000,
        "contractor_payment_interval": "per-job",
    }


# ============================================================================
# Database fixtures
# ============================================================================


@pytest.fixture
def sample_recipe(test_db):
    """A stored cocktail-prep recipe with three priced products."""
    from src.models import Product, Recipe, RecipeIngredient

    session = test_db()
    vodka = Product(
        name="House Vodka",
        uom_purchase="bottle",
        size_value=750,
        size_unit="ml",
        cost_per_unit=20.0,
    )
    sugar = Product(name="Granulated Sugar", uom_purchase="kg", cost_per_unit=8.0)
    tortillas = Product(
        name="Flour Tortillas",
        uom_purchase="bag",
        size_value=50,
        size_unit="each",
        cost_per_unit=10.0,
    )
    session.add_all([vodka, sugar, tortillas])
    session.flush()

    recipe = Recipe(name="Prep Batch")
    recipe.ingredients = [
        RecipeIngredient(product_id=vodka.id, quantity=1.5, unit="fl oz"),
        RecipeIngredient(product_id=sugar.id, quantity=2, unit="kg"),
        RecipeIngredient(product_id=tortillas.id, quantity=2, unit="each"),
    ]
    session.add(recipe)
    session.commit()
    return recipe


@pytest.fixture
def sample_staff(test_db):
    """Stored hourly and salaried employees with one shift and one punch pair each."""
    from src.models import Employee, Shift, TimePunch

    session = test_db()
    cook = Employee(
        name="Alex Line",
        status="active",
        compensation_type="hourly",
        hourly_rate=1500,
        hire_date=date(2023, 6, 1),
    )
    manager = Employee(
        name="Sam Manager",
        status="active",
        compensation_type="salary",
        hourly_rate=0,
        salary_amount=100000,
        pay_period_type="weekly",
    )
    session.add_all([cook, manager])
    session.flush()

    session.add_all(
        [
            Shift(
                employee_id=cook.id,
                start_time=datetime(2024, 1, 15, 9, 0),
                end_time=datetime(2024, 1, 15, 17, 30),
                break_duration=30,
            ),
            TimePunch(
                employee_id=cook.id,
                punch_time=datetime(2024, 1, 15, 9, 0),
                punch_type="clock_in",
            ),
            TimePunch(
                employee_id=cook.id,
                punch_time=datetime(2024, 1, 15, 17, 0),
                punch_type="clock_out",
            ),
            TimePunch(
                employee_id=manager.id,
                punch_time=datetime(2024, 1, 16, 8, 0),
                punch_type="clock_in",
            ),
            TimePunch(
                employee_id=manager.id,
                punch_time=datetime(2024, 1, 16, 16, 0),
                punch_type="clock_out",
            ),
        ]
    )
    session.commit()
    return {"cook": cook, "manager": manager}
