"""
Shared pytest fixtures: an in-memory stand-in for the async database session,
an API client wired to it, and bearer tokens for the settings endpoints.
"""

import os

# Must be set before locai.config is imported
os.environ.setdefault("CACHE_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "development")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from locai.database import get_db
from locai.dependencies import create_access_token
from locai.main import app
from locai.models.tenant_settings import NEGOTIATION_SECTION, TenantSettings
from locai.services.negotiation.rule_evaluator import DiscountCriteria

TENANT_ID = "tenant-abc-123"


class FakeResult:
    def __init__(self, row):
        self._row = row

    def scalar_one_or_none(self):
        return self._row


class FakeSession:
    """Minimal AsyncSession double holding one settings row per tenant."""

    def __init__(self, rows: dict[str, TenantSettings] | None = None):
        self.rows = dict(rows or {})
        self.fail = False
        self.commits = 0
        self.rollbacks = 0

    async def execute(self, statement):
        if self.fail:
            raise OperationalError("SELECT tenant_settings", {}, Exception("connection refused"))
        params = statement.compile(dialect=postgresql.dialect()).params
        tenant_id = next(v for k, v in params.items() if k.startswith("tenant_id"))
        return FakeResult(self.rows.get(tenant_id))

    def add(self, row: TenantSettings):
        self.rows[row.tenant_id] = row

    async def commit(self):
        self.commits += 1

    async def rollback(self):
        self.rollbacks += 1

    def store(self, tenant_id: str, data: dict):
        self.rows[tenant_id] = TenantSettings(tenant_id=tenant_id, section=NEGOTIATION_SECTION, data=data)


@pytest.fixture
def fake_db():
    return FakeSession()


@pytest.fixture
def client(fake_db):
    async def override_get_db():
        yield fake_db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    token = create_access_token(TENANT_ID, user_id="user-42")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_criteria():
    """Factory for a 3-night, R$ 1.000 booking; override any field."""

    def _make(**overrides) -> DiscountCriteria:
        values = {
            "property_name": "Casa da Praia",
            "check_in": date(2026, 12, 10),
            "check_out": date(2026, 12, 13),
            "total_price": 1000.0,
            "client_phone": "+5511999999999",
        }
        values.update(overrides)
        return DiscountCriteria(**values)

    return _make
