"""API test fixtures — FastAPI app over SQL repositories on the test database.

Invariants:
    - get_repositories dependency overridden to use the test session factory
    - db_manager patched for the readiness probe, restored afterwards
"""

import pytest
from httpx import ASGITransport, AsyncClient

from donor_privacy.api.routes.collectives import get_repositories
from donor_privacy.infrastructure.database import DatabaseSessionManager
from donor_privacy.infrastructure.repositories import build_sql_repositories
import donor_privacy.infrastructure.database as db_module
from donor_privacy.main import app
from tests.scenarios import build_donation_scenario, persist_scenario


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with repositories bound to the test DB."""
    app.dependency_overrides[get_repositories] = (
        lambda: build_sql_repositories(test_session_factory)
    )

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def seeded(test_db):
    scenario = build_donation_scenario()
    await persist_scenario(test_db, scenario)
    return scenario
