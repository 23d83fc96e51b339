from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

from pydantic.alias_generators import to_camel

from patient_service.domain.exceptions import MalformedInputError

SortDirection = Literal["asc", "desc"]

DEFAULT_SORT = "name"

# Accepted `sort` names (wire and snake_case spellings) -> entity attribute.
SORTABLE_FIELDS = {
    "name": "name",
    "email": "email",
    "dateOfBirth": "date_of_birth",
    "date_of_birth": "date_of_birth",
    "registeredDate": "registered_date",
    "registered_date": "registered_date",
}

T = TypeVar("T")

# Largest OFFSET the databases accept (signed 64-bit).
MAX_OFFSET = 2**63 - 1


@dataclass(frozen=True)
class PageRequest:
    page: int
    size: int
    sort: str = DEFAULT_SORT
    direction: SortDirection = "asc"

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def sort_label(self) -> str:
        return f"{to_camel(self.sort)},{self.direction}"


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    request: PageRequest
    total_items: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.request.size) if self.total_items else 0


def parse_page_request(*, page: int, size: int, sort: str | None) -> PageRequest:
    """
    Build a PageRequest from query parameters.

    `sort` is either `field` or `field,direction` (e.g. `dateOfBirth,desc`).
    """

    if page * size > MAX_OFFSET:
        raise MalformedInputError("Page index is too large for the requested page size.")

    if not sort or not sort.strip():
        return PageRequest(page=page, size=size)

    field, _, direction = (part.strip() for part in sort.partition(","))
    attribute = SORTABLE_FIELDS.get(field)
    if attribute is None:
        allowed = ", ".join(sorted({k for k in SORTABLE_FIELDS if "_" not in k}))
        raise MalformedInputError(f"Unsupported sort field '{field}'. Supported: {allowed}.")

    direction = (direction or "asc").lower()
    if direction not in ("asc", "desc"):
        raise MalformedInputError("Sort direction must be 'asc' or 'desc'.")

    return PageRequest(page=page, size=size, sort=attribute, direction=direction)
