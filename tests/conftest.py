"""
Shared test fixtures.

The store is never contacted: services get a chainable in-memory mock of
the Supabase client instead.
"""

import os
import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Settings are read at import time
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import pytest
from datetime import date
from typing import Generator
from unittest.mock import patch

from tests.factories import MachineFactory, WorkItemFactory


# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: list = None, count: int = None):
        self.data = data or []
        self.count = count if count is not None else len(self.data)


class MockSupabaseQuery:
    """Mock Supabase query builder with chainable methods."""

    def __init__(self, data: list = None, count: int = None, calls: list = None):
        self._data = data or []
        self._count = count
        self._is_single = False
        self._calls = calls if calls is not None else []

    def select(self, *args, **kwargs):
        return self

    def insert(self, data):
        # Simulate insert - add id
        if isinstance(data, dict):
            data = [data]
        rows = []
        for item in data:
            row = dict(item)
            row.setdefault("id", "test-uuid-123")
            rows.append(row)
        self._calls.append(("insert", data))
        self._data = rows
        return self

    def update(self, data):
        # Simulate update - merge with existing data
        self._calls.append(("update", data))
        self._data = [{**item, **data} for item in self._data]
        return self

    def delete(self):
        return self

    def eq(self, column, value):
        return self

    def neq(self, column, value):
        return self

    def single(self):
        self._is_single = True
        return self

    def order(self, column, **kwargs):
        return self

    def range(self, start, end):
        return self

    def limit(self, count):
        return self

    def execute(self) -> MockSupabaseResponse:
        if self._is_single:
            # Return first item or empty for single()
            data = self._data[0] if self._data else None
            return MockSupabaseResponse(
                data=data,
                count=1 if data else 0
            )
        return MockSupabaseResponse(
            data=self._data,
            count=self._count if self._count is not None else len(self._data)
        )


class MockSupabaseTable:
    """Mock Supabase table with configurable responses."""

    def __init__(self, data: list = None, count: int = None, calls: list = None):
        self._data = data or []
        self._count = count
        self._calls = calls if calls is not None else []

    def _query(self) -> MockSupabaseQuery:
        return MockSupabaseQuery(list(self._data), self._count, self._calls)

    def select(self, *args, **kwargs):
        return self._query()

    def insert(self, data):
        return self._query().insert(data)

    def update(self, data):
        # For update, pass the existing data so it can be merged
        return self._query().update(data)

    def delete(self):
        return self._query()


class MockSupabaseClient:
    """Mock Supabase client that records writes per table."""

    def __init__(self):
        self._tables = {}
        self.calls = {}

    def set_table_data(self, table_name: str, data: list, count: int = None):
        """Configure mock data for a table."""
        self._tables[table_name] = {"data": data, "count": count}

    def writes(self, table_name: str, operation: str) -> list:
        """Payloads of every insert/update sent to a table."""
        return [payload for op, payload in self.calls.get(table_name, []) if op == operation]

    def table(self, name: str) -> MockSupabaseTable:
        """Get mock table."""
        config = self._tables.get(name, {"data": [], "count": None})
        return MockSupabaseTable(config["data"], config["count"], self.calls.setdefault(name, []))


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("machines", [
                {"id": "1", "name": "M-01", ...}
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """
    Patch the database client with mock.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("machines", [...])
            # Now any service using get_supabase_client() gets the mock
    """
    with patch("config.database.get_supabase_client", return_value=mock_supabase), \
         patch("services.machine_service.get_supabase_client", return_value=mock_supabase), \
         patch("services.fabric_service.get_supabase_client", return_value=mock_supabase), \
         patch("services.settings_service.get_supabase_client", return_value=mock_supabase):
        yield mock_supabase


@pytest.fixture
def active_day() -> date:
    """Fixed planning clock."""
    return date(2025, 3, 1)


@pytest.fixture
def idle_machine():
    """Single-knit machine with nothing running."""
    return MachineFactory.create_model(
        id="m-1",
        name="M-01",
        machine_type="Single Jersey",
        daily_rate=150,
    )


@pytest.fixture
def busy_machine():
    """Single-knit machine finishing 300 kg of OR / Single Jersey at 150 kg/day."""
    return MachineFactory.create_model(
        id="m-2",
        name="M-02",
        machine_type="Single Jersey",
        status="Working",
        client="OR",
        fabric="Single Jersey",
        daily_rate=150,
        remaining_mfg=300,
    )


@pytest.fixture
def sample_machine_row() -> dict:
    """Machine row as stored, with a two-item plan."""
    return MachineFactory.create(
        id="m-1",
        name="M-01",
        machine_type="Single Jersey",
        daily_rate=150,
        future_plans=[
            WorkItemFactory.create(fabric="Single Jersey", client="OR", quantity=1000, rate=150),
            WorkItemFactory.create(fabric="Rib", client="Zara", quantity=300, rate=150),
        ],
    )


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client():
    """
    Create FastAPI test client.

    Usage:
        def test_endpoint(test_client):
            response = test_client.get("/api/machines")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)