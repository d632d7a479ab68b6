# app/utils/pagination.py

from typing import Any, Mapping, Sequence

from pydantic import BaseModel, Field


class PaginationMeta(BaseModel):
    page: int
    page_size: int = Field(serialization_alias="pageSize")
    total: int
    has_next: bool = Field(serialization_alias="hasNext")
    has_previous: bool = Field(serialization_alias="hasPrevious")


def total_from_rows(rows: Sequence[Any], key: str = "total_count") -> int:
    """Grand total replicated on every row of a list result; 0 when empty."""
    if not rows:
        return 0

    first = rows[0]
    if isinstance(first, Mapping):
        value = first.get(key)
    else:
        value = getattr(first, key, None)

    return int(value or 0)


def build_pagination(page: int, page_size: int, total: int) -> dict:
    meta = PaginationMeta(
        page=page,
        page_size=page_size,
        total=total,
        has_next=page * page_size < total,
        has_previous=page > 1,
    )
    return meta.model_dump(by_alias=True)
