from types import SimpleNamespace

import pytest

from app.utils.pagination import build_pagination, total_from_rows


@pytest.mark.parametrize(
    "page, page_size, total, has_next, has_previous",
    [
        (1, 25, 0, False, False),
        (1, 25, 25, False, False),
        (1, 25, 26, True, False),
        (2, 10, 30, True, True),
        (3, 10, 30, False, True),
        (5, 10, 30, False, True),
    ],
)
def test_navigation_flags(page, page_size, total, has_next, has_previous):
    meta = build_pagination(page, page_size, total)

    assert meta == {
        "page": page,
        "pageSize": page_size,
        "total": total,
        "hasNext": has_next,
        "hasPrevious": has_previous,
    }


def test_total_is_read_from_the_first_row():
    rows = [{"id": 1, "total_count": 42}, {"id": 2, "total_count": 42}]

    assert total_from_rows(rows) == 42


def test_total_of_empty_result_is_zero():
    assert total_from_rows([]) == 0


def test_total_from_attribute_rows():
    rows = [SimpleNamespace(total=7)]

    assert total_from_rows(rows, key="total") == 7


def test_missing_total_column_counts_as_zero():
    assert total_from_rows([{"id": 1}]) == 0
