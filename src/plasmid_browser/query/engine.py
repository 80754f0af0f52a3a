"""Client-side query engine: worksheet options, filter, search, sort, paging.

Every function here is pure. Rows are read, never modified, and each call
returns new lists, so a result can be recomputed on any state change.
"""

import math
import re
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from pydantic import BaseModel, Field

from ..records.models import (
    DISPLAY_FIELDS,
    LINK_FIELD,
    BenchlingLink,
    Dataset,
    Member,
)

ALL = "all"
PAGE_SIZE = 50
SORT_DIRECTIONS = ("asc", "desc")

_DIGITS = re.compile(r"(\d+)")


class QueryResult(BaseModel):
    """Everything the presentation layer needs for one render."""

    worksheet_options: List[str] = Field(default_factory=lambda: [ALL])
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_count: int = 1
    page_rows: List[Dict[str, Any]] = Field(default_factory=list)
    start: int = 0
    end: int = 0

    @property
    def showing(self) -> str:
        if self.total <= 0:
            return ""
        return f"Showing {self.start + 1}–{self.end}"


def natural_key(value: Any) -> Tuple:
    """Case-insensitive key that orders embedded numbers numerically (m2 < m10)."""
    parts = _DIGITS.split(str(value).casefold())
    return tuple((0, int(p)) if p.isdigit() else (1, p) for p in parts if p != "")


def member_options(members: Iterable[Member]) -> List[str]:
    keys = [m.key for m in members if m.key]
    return [ALL] + sorted(keys, key=natural_key)


def worksheet_options(dataset: Dataset, selected_member: str) -> List[str]:
    """
    Options for the worksheet filter.

    With every member selected the options come from the rows themselves.
    For one member they come from its declared worksheets, which may include
    sheets that have no rows yet.
    """
    if selected_member == ALL:
        names = {row.get("worksheet") for row in dataset.rows if row.get("worksheet")}
        return [ALL] + sorted(str(n) for n in names)
    member = dataset.find_member(selected_member)
    worksheets = member.worksheets if member else []
    return [ALL] + sorted(worksheets)


def search_needles(text: str) -> List[str]:
    return (text or "").lower().split()


def search_haystack(row: Dict[str, Any]) -> str:
    parts = [row.get(field) for field in DISPLAY_FIELDS]
    link = row.get(LINK_FIELD)
    if isinstance(link, BenchlingLink):
        parts.append(link.search_text)
    elif isinstance(link, str):
        parts.append(link)
    return " ".join(str(p) for p in parts if p).lower()


def matches_member(row: Dict[str, Any], member: str) -> bool:
    if member == ALL:
        return True
    return row.get("memberId") == member or row.get("memberName") == member


def matches_worksheet(row: Dict[str, Any], worksheet: str) -> bool:
    return worksheet == ALL or row.get("worksheet") == worksheet


def matches_search(row: Dict[str, Any], needles: Sequence[str]) -> bool:
    if not needles:
        return True
    haystack = search_haystack(row)
    return all(needle in haystack for needle in needles)


def row_is_visible(row: Dict[str, Any], member: str, worksheet: str, needles: Sequence[str]) -> bool:
    return (
        matches_member(row, member)
        and matches_worksheet(row, worksheet)
        and matches_search(row, needles)
    )


def filter_rows(
    rows: Iterable[Dict[str, Any]],
    member: str = ALL,
    worksheet: str = ALL,
    search_text: str = "",
) -> List[Dict[str, Any]]:
    needles = search_needles(search_text)
    return [row for row in rows if row_is_visible(row, member, worksheet, needles)]


def sort_key(row: Dict[str, Any], field: str) -> str:
    value = row.get(field)
    if value is None:
        return ""
    if isinstance(value, BenchlingLink):
        return value.search_text.lower()
    return str(value).lower()


def sort_rows(rows: Iterable[Dict[str, Any]], field: str, direction: str = "asc") -> List[Dict[str, Any]]:
    """Sort by the lowercased string form of one field (no natural ordering)."""
    if direction not in SORT_DIRECTIONS:
        raise ValueError(f"Sort direction must be 'asc' or 'desc', got {direction!r}")
    return sorted(rows, key=lambda row: sort_key(row, field), reverse=direction == "desc")


def page_count(total: int, page_size: int = PAGE_SIZE) -> int:
    return max(1, math.ceil(total / page_size))


def page_bounds(page: int, total: int, page_size: int = PAGE_SIZE) -> Tuple[int, int]:
    """
    Slice bounds for a 1-based page. The page is not clamped here.

    Returns:
        (start, end) with start <= end; both equal for pages past the end
    """
    start = max(0, (page - 1) * page_size)
    end = min(total, start + page_size)
    return start, max(start, end)


def paginate(rows: Sequence[Dict[str, Any]], page: int, page_size: int = PAGE_SIZE) -> List[Dict[str, Any]]:
    start, end = page_bounds(page, len(rows), page_size)
    return list(rows[start:end])


def run_query(dataset: Dataset, view: Any, page_size: int = PAGE_SIZE) -> QueryResult:
    """
    Derive the rows to render from a dataset and the current view state.

    Args:
        dataset: Current dataset (read only)
        view: Object exposing search_text, member, worksheet, sort_field,
            sort_direction and page (see ViewState)
        page_size: Rows per page

    Returns:
        QueryResult for the requested page
    """
    visible = filter_rows(dataset.rows, view.member, view.worksheet, view.search_text)
    ordered = sort_rows(visible, view.sort_field, view.sort_direction)
    total = len(ordered)
    start, end = page_bounds(view.page, total, page_size)
    return QueryResult(
        worksheet_options=worksheet_options(dataset, view.member),
        rows=ordered,
        total=total,
        page=view.page,
        page_count=page_count(total, page_size),
        page_rows=ordered[start:end],
        start=start,
        end=end,
    )
