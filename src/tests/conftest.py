"""Pytest configuration and fixtures for service layer tests."""

import pytest
from sqlalchemy.orm import sessionmaker, scoped_session

from film_recipes.models.base import Base
from film_recipes.services.database import create_database_engine
from film_recipes.services.reference_data_service import seed_reference_data
from film_recipes.services.recipe_import_service import RecipeRow


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean test database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database with the production listeners
    2. Creates all tables and seeds setting definitions
    3. Provides the database to the test
    4. Drops all tables after the test completes
    """
    engine = create_database_engine("sqlite:///:memory:")

    Base.metadata.create_all(engine)

    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    Session = scoped_session(session_factory)

    # Monkey-patch the global session factory for tests
    import film_recipes.services.database as db_module

    original_get_session = db_module.get_session_factory
    db_module.get_session_factory = lambda: Session

    seed_reference_data()

    yield Session

    # Cleanup
    Session.remove()
    Base.metadata.drop_all(engine)
    engine.dispose()

    # Restore original session factory
    db_module.get_session_factory = original_get_session


def make_row(line: int = 2, **overrides) -> RecipeRow:
    """Build a complete recipe row; keyword arguments replace fields."""
    values = {
        "creator": "Ritchie Roesch",
        "name": "Kodachrome 64",
        "system": "X-Trans IV",
        "style": "Color",
        "camera": "X-T4",
        "sensor": "X-Trans IV",
        "film_simulation": "Classic Chrome",
        "settings": [
            ("Dynamic Range", "DR200"),
            ("Highlight", "+0.5"),
            ("Shadow", "-1"),
            ("Grain", "Weak, Small"),
            ("WB Shift", "R:2 B:-5"),
            ("ISO", "Auto, up to ISO 6400"),
            ("Exposure Compensation", "0 to +2/3"),
        ],
        "published": "2021-03-14",
        "source_url": "https://fujixweekly.com/kodachrome-64",
        "tags": ["Vintage", "Daylight"],
        "images": ["https://example.com/k64-1.jpg", "https://example.com/k64-2.jpg"],
    }
    values.update(overrides)
    return RecipeRow(line=line, **values)


@pytest.fixture
def recipe_row_factory():
    """Factory fixture building complete recipe rows."""
    return make_row
