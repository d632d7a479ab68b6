import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from app.constants import procedures
from app.core.config import Settings
from app.core.exceptions import AppException
from app.core.procedures import get_procedures
from app.routers.inventory.stock_movement_router import operation as movement_operation
from app.schemas.inventory.stock_movement_schemas import StockMovementIdParams
from conftest import PREFIX, product_row
from main import create_app


VALID_PRODUCT = {
    "code": "PRD001",
    "description": "Steel bolts M8",
    "idCategory": 2,
    "idUnitOfMeasure": 3,
}


# ---------------- IDENTITY ----------------
@pytest.mark.parametrize(
    "bad_headers",
    [
        {},
        {"x-account-id": "1"},
        {"x-user-id": "1"},
        {"x-account-id": "abc", "x-user-id": "1"},
        {"x-account-id": "1", "x-user-id": ""},
        {"x-account-id": "0", "x-user-id": "1"},
        {"x-account-id": "1", "x-user-id": "-4"},
        {"x-account-id": "1.5", "x-user-id": "1"},
        {"x-account-id": "9" * 5000, "x-user-id": "1"},
        {"x-account-id": "1", "x-user-id": "99999999999999999999"},
        {"x-account-id": "2147483648", "x-user-id": "1"},
    ],
)
def test_invalid_identity_headers_are_rejected(client, fake_procedures, bad_headers):
    response = client.get(f"{PREFIX}/product", headers=bad_headers)

    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "UNAUTHORIZED"
    assert "timestamp" in body
    assert fake_procedures.calls == []


def test_identity_is_checked_before_validation(client, fake_procedures):
    response = client.post(f"{PREFIX}/product", json={"code": "ab"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"
    assert fake_procedures.calls == []


def test_credential_is_forwarded_to_the_procedure(client, fake_procedures):
    fake_procedures.respond(procedures.PRODUCT_CREATE, {"id_product": 12})

    response = client.post(
        f"{PREFIX}/product",
        json=VALID_PRODUCT,
        headers={"x-account-id": "4", "x-user-id": "9"},
    )

    assert response.status_code == 200
    params = fake_procedures.last(procedures.PRODUCT_CREATE).params
    assert params["id_account"] == 4
    assert params["id_user"] == 9


# ---------------- PERMISSIONS ----------------
def test_permission_is_checked_for_the_declared_rule(client, fake_procedures, headers):
    fake_procedures.respond(procedures.PRODUCT_GET, product_row())

    client.get(f"{PREFIX}/product/1", headers=headers)

    check = fake_procedures.last(procedures.PERMISSION_CHECK)
    assert check.params == {
        "id_account": 1,
        "id_user": 1,
        "securable": "PRODUCT",
        "permission": "READ",
    }


def test_denied_permission_returns_403(client, fake_procedures, headers):
    fake_procedures.allowed = False

    response = client.post(f"{PREFIX}/product", json=VALID_PRODUCT, headers=headers)

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "PERMISSION_DENIED"
    assert fake_procedures.service_calls == []


def test_denied_permission_wins_over_validation(client, fake_procedures, headers):
    fake_procedures.allowed = False

    response = client.post(f"{PREFIX}/product", json={"code": "ab"}, headers=headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_operation_without_rule_is_denied(app, fake_procedures):
    request = Request(
        {
            "type": "http",
            "method": "PUT",
            "path": f"{PREFIX}/stock-movement/1",
            "headers": [(b"x-account-id", b"1"), (b"x-user-id", b"1")],
            "query_string": b"",
            "path_params": {"id": "1"},
            "app": app,
        }
    )

    # Movements are append-only: the controller declares no UPDATE rule
    with pytest.raises(AppException) as exc_info:
        await movement_operation.update(request, fake_procedures, StockMovementIdParams)

    assert exc_info.value.status_code == 403
    assert fake_procedures.calls == []


def test_enforcement_can_be_disabled(fake_procedures, headers):
    app = create_app(Settings(app_env="test", api_prefix=PREFIX, enforce_permissions=False))
    app.dependency_overrides[get_procedures] = lambda: fake_procedures
    fake_procedures.allowed = False
    fake_procedures.respond(procedures.PRODUCT_GET, product_row())

    response = TestClient(app).get(f"{PREFIX}/product/1", headers=headers)

    assert response.status_code == 200
    assert all(c.procedure != procedures.PERMISSION_CHECK for c in fake_procedures.calls)


# ---------------- PARAMETERS ----------------
def test_body_overrides_query_parameters(client, fake_procedures, headers):
    fake_procedures.respond(
        procedures.PRODUCT_UPDATE_MINIMUM_STOCK,
        {
            "id_product": 5,
            "minimum_stock": 9,
            "previous_minimum_stock": 5,
            "is_critical": False,
            "was_revaluated": False,
        },
    )

    response = client.patch(
        f"{PREFIX}/product/5/minimum-stock?minimumStock=1",
        json={"minimumStock": 9},
        headers=headers,
    )

    assert response.status_code == 200
    params = fake_procedures.last(procedures.PRODUCT_UPDATE_MINIMUM_STOCK).params
    assert params["minimum_stock"] == 9
    assert params["id_product"] == 5


def test_malformed_json_body_is_a_validation_error(client, fake_procedures, headers):
    response = client.post(
        f"{PREFIX}/product",
        content=b"{not json",
        headers={**headers, "content-type": "application/json"},
    )

    assert response.status_code == 422
    assert response.json()["error"]["details"][0]["field"] == "body"
    assert fake_procedures.service_calls == []


def test_non_object_body_is_a_validation_error(client, fake_procedures, headers):
    response = client.post(f"{PREFIX}/product", json=[1, 2], headers=headers)

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_unknown_keys_are_ignored(client, fake_procedures, headers):
    fake_procedures.respond(procedures.PRODUCT_CREATE, {"id_product": 1})

    response = client.post(
        f"{PREFIX}/product",
        json={**VALID_PRODUCT, "unexpected": "value"},
        headers=headers,
    )

    assert response.status_code == 200
    assert "unexpected" not in fake_procedures.last(procedures.PRODUCT_CREATE).params


def test_largest_database_id_is_accepted(client, fake_procedures):
    fake_procedures.respond(procedures.PRODUCT_GET, product_row())

    response = client.get(
        f"{PREFIX}/product/1",
        headers={"x-account-id": "2147483647", "x-user-id": "1"},
    )

    assert response.status_code == 200
    assert fake_procedures.last(procedures.PRODUCT_GET).params["id_account"] == 2147483647
