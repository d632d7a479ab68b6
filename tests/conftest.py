from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from app.constants import procedures
from app.core.config import Settings
from app.core.procedures import ExpectedReturn, get_procedures
from main import create_app

PREFIX = "/api/v1/internal"


@dataclass
class Call:
    procedure: str
    params: Dict[str, Any]
    expected: ExpectedReturn
    result_sets: Optional[List[str]] = None


@dataclass
class FakeProcedures:
    """In-memory stand-in for StoredProcedureClient.

    ``responses`` maps a procedure name to a canned result, an exception to
    raise, or a callable receiving the call parameters.
    """

    responses: Dict[str, Any] = field(default_factory=dict)
    calls: List[Call] = field(default_factory=list)
    allowed: bool = True

    def respond(self, procedure: str, value: Any) -> None:
        self.responses[procedure] = value

    @property
    def service_calls(self) -> List[Call]:
        return [c for c in self.calls if c.procedure != procedures.PERMISSION_CHECK]

    def last(self, procedure: str) -> Call:
        return [c for c in self.calls if c.procedure == procedure][-1]

    async def call(self, procedure, params, expected=ExpectedReturn.MULTI, result_sets=None):
        self.calls.append(Call(procedure, dict(params), expected, result_sets))

        if procedure == procedures.PERMISSION_CHECK:
            return {"allowed": self.allowed}

        value = self.responses.get(procedure)
        if isinstance(value, Exception):
            raise value
        if callable(value):
            return value(params)
        if value is None:
            if result_sets:
                return {name: [] for name in result_sets}
            if expected == ExpectedReturn.MULTI:
                return []
        return value


NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def product_row(**overrides) -> Dict[str, Any]:
    row = {
        "id_product": 1,
        "code": "PRD001",
        "description": "Steel bolts M8",
        "id_category": 2,
        "category_name": "Hardware",
        "category_description": "Hardware items",
        "id_unit_of_measure": 3,
        "unit_of_measure_code": "UN",
        "unit_of_measure_name": "Unit",
        "minimum_stock": 5,
        "active": 1,
        "date_created": NOW,
        "date_modified": None,
    }
    row.update(overrides)
    return row


def stock_movement_row(**overrides) -> Dict[str, Any]:
    row = {
        "id_stock_movement": 10,
        "id_product": 7,
        "product_code": "PRD007",
        "product_description": "Copper wire 2mm",
        "movement_type": "ENTRY",
        "quantity": 4,
        "movement_date": NOW,
        "date_created": NOW,
    }
    row.update(overrides)
    return row


@pytest.fixture
def settings():
    return Settings(app_env="test", api_prefix=PREFIX, enforce_permissions=True)


@pytest.fixture
def fake_procedures():
    return FakeProcedures()


@pytest.fixture
def app(settings, fake_procedures):
    application = create_app(settings)
    application.dependency_overrides[get_procedures] = lambda: fake_procedures
    return application


@pytest.fixture
def client(app):
    # No context manager: lifespan (engine creation) is not needed
    return TestClient(app)


@pytest.fixture
def headers():
    return {"x-account-id": "1", "x-user-id": "1"}
