import pytest
from sqlalchemy.exc import DBAPIError, TimeoutError as PoolTimeoutError

from app.core.exceptions import BusinessRuleViolation, InfrastructureFailure
from app.core.procedures import ExpectedReturn, StoredProcedureClient


class FakeResult:
    def __init__(self, rows):
        self._rows = rows

    def mappings(self):
        return self

    def all(self):
        return self._rows


class FakeSession:
    def __init__(self, results=None, error=None):
        self.results = list(results or [])
        self.error = error
        self.executed = []
        self.commits = 0
        self.rollbacks = 0

    async def execute(self, statement, params=None):
        self.executed.append((str(statement), params))
        if self.error is not None:
            raise self.error
        return FakeResult(self.results.pop(0))

    async def commit(self):
        self.commits += 1

    async def rollback(self):
        self.rollbacks += 1


class FakePgError(Exception):
    def __init__(self, message, sqlstate):
        super().__init__(message)
        self.message = message
        self.sqlstate = sqlstate


def db_error(message, sqlstate):
    return DBAPIError("SELECT 1", {}, FakePgError(message, sqlstate))


@pytest.mark.asyncio
async def test_single_returns_first_row():
    session = FakeSession([[{"id_product": 4}, {"id_product": 5}]])
    client = StoredProcedureClient(session)

    row = await client.call(
        "functional.sp_product_get",
        {"id_account": 1, "id_product": 4},
        ExpectedReturn.SINGLE,
    )

    assert row == {"id_product": 4}
    sql, params = session.executed[0]
    assert sql == (
        "SELECT * FROM functional.sp_product_get("
        "id_account => :id_account, id_product => :id_product)"
    )
    assert params == {"id_account": 1, "id_product": 4}
    assert session.commits == 1


@pytest.mark.asyncio
async def test_single_without_rows_returns_none():
    client = StoredProcedureClient(FakeSession([[]]))

    row = await client.call("functional.sp_product_get", {"id_product": 4}, ExpectedReturn.SINGLE)

    assert row is None


@pytest.mark.asyncio
async def test_multi_returns_all_rows():
    rows = [{"id_product": 1, "total_count": 2}, {"id_product": 2, "total_count": 2}]
    client = StoredProcedureClient(FakeSession([rows]))

    result = await client.call("functional.sp_product_list", {"id_account": 1}, ExpectedReturn.MULTI)

    assert result == rows


@pytest.mark.asyncio
async def test_named_result_sets_fetch_each_cursor():
    session = FakeSession(
        [
            [("<unnamed portal 1>",), ("<unnamed portal 2>",)],
            [{"id_product": 3, "code": "PRD003"}],
            [{"id_critical_stock_history": 1}, {"id_critical_stock_history": 2}],
        ]
    )
    client = StoredProcedureClient(session)

    result = await client.call(
        "functional.sp_product_critical_history_get",
        {"id_account": 1, "id_product": 3},
        ExpectedReturn.MULTI,
        result_sets=["product_info", "critical_history"],
    )

    assert result == {
        "product_info": [{"id_product": 3, "code": "PRD003"}],
        "critical_history": [
            {"id_critical_stock_history": 1},
            {"id_critical_stock_history": 2},
        ],
    }
    assert session.executed[1][0] == 'FETCH ALL FROM "<unnamed portal 1>"'
    assert session.executed[2][0] == 'FETCH ALL FROM "<unnamed portal 2>"'
    assert session.commits == 1


@pytest.mark.asyncio
async def test_missing_cursor_yields_empty_result_set():
    session = FakeSession([[("c1",)], [{"id_product": 3}]])
    client = StoredProcedureClient(session)

    result = await client.call(
        "functional.sp_product_critical_history_get",
        {"id_product": 3},
        result_sets=["product_info", "critical_history"],
    )

    assert result["critical_history"] == []


@pytest.mark.asyncio
async def test_business_rule_sqlstate_becomes_business_rule_violation():
    session = FakeSession(error=db_error("Product code already exists", "51000"))
    client = StoredProcedureClient(session, business_rule_sqlstate="51000")

    with pytest.raises(BusinessRuleViolation) as exc_info:
        await client.call("functional.sp_product_create", {"code": "PRD001"}, ExpectedReturn.SINGLE)

    assert exc_info.value.message == "Product code already exists"
    assert exc_info.value.procedure == "functional.sp_product_create"
    assert session.rollbacks == 1
    assert session.commits == 0


@pytest.mark.asyncio
async def test_other_sqlstate_becomes_infrastructure_failure():
    session = FakeSession(error=db_error("relation does not exist", "42P01"))
    client = StoredProcedureClient(session)

    with pytest.raises(InfrastructureFailure) as exc_info:
        await client.call("functional.sp_product_get", {"id_product": 1}, ExpectedReturn.SINGLE)

    assert "relation" not in exc_info.value.message
    assert isinstance(exc_info.value.__cause__, DBAPIError)
    assert session.rollbacks == 1


@pytest.mark.asyncio
async def test_pool_timeout_becomes_infrastructure_failure():
    session = FakeSession(error=PoolTimeoutError("QueuePool limit reached"))
    client = StoredProcedureClient(session)

    with pytest.raises(InfrastructureFailure):
        await client.call("functional.sp_product_get", {"id_product": 1}, ExpectedReturn.SINGLE)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "procedure, params",
    [
        ("functional.sp_product_get; DROP TABLE product", {}),
        ("functional.sp_product_get", {"id) ; --": 1}),
    ],
)
async def test_unsafe_names_are_refused(procedure, params):
    session = FakeSession([[]])
    client = StoredProcedureClient(session)

    with pytest.raises(ValueError):
        await client.call(procedure, params)

    assert session.executed == []
