# touristlog/utils/table.py
import math
from dataclasses import dataclass

SORTABLE = ("control_number", "name", "purpose", "created_at")
DEFAULT_SORT = ("created_at", "desc")


def normalize_sort(column: str | None, direction: str | None) -> tuple[str, str]:
    column = (column or "").strip().lower()
    direction = (direction or "").strip().lower()
    if column not in SORTABLE:
        return DEFAULT_SORT
    if direction not in ("asc", "desc"):
        direction = "asc"
    return column, direction


def sort_rows(rows: list, column: str, direction: str = "asc") -> list:
    column, direction = normalize_sort(column, direction)

    def _key(row):
        value = getattr(row, column)
        return value.lower() if isinstance(value, str) else value

    # blanks go last in both directions
    present = [r for r in rows if getattr(r, column, None) is not None]
    missing = [r for r in rows if getattr(r, column, None) is None]
    present.sort(key=_key, reverse=(direction == "desc"))
    return present + missing


@dataclass
class Page:
    items: list
    page: int
    per_page: int
    total: int

    @property
    def pages(self) -> int:
        return max(1, math.ceil(self.total / self.per_page)) if self.per_page else 1

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    @property
    def first_index(self) -> int:
        return (self.page - 1) * self.per_page + 1 if self.total else 0

    @property
    def last_index(self) -> int:
        return min(self.page * self.per_page, self.total)


def paginate(rows: list, page: int | str | None, per_page: int = 10) -> Page:
    try:
        page = int(page or 1)
    except (TypeError, ValueError):
        page = 1
    per_page = max(1, int(per_page or 10))
    total = len(rows)
    pages = max(1, math.ceil(total / per_page))
    page = min(max(1, page), pages)
    start = (page - 1) * per_page
    return Page(items=rows[start:start + per_page], page=page, per_page=per_page, total=total)
