from dataclasses import dataclass
from typing import List

from ..records.models import COLUMNS, DEFAULT_SORT_FIELD
from .engine import ALL, SORT_DIRECTIONS


@dataclass
class ViewState:
    """User-adjustable query parameters.

    Any filter or search change sends the user back to page 1, and a member
    change also clears the worksheet selection, since worksheet names are
    only meaningful within one member.
    """

    search_text: str = ""
    member: str = ALL
    worksheet: str = ALL
    sort_field: str = DEFAULT_SORT_FIELD
    sort_direction: str = "asc"
    page: int = 1

    def set_search(self, text: str) -> None:
        self.search_text = text or ""
        self.page = 1

    def set_member(self, member: str) -> None:
        self.member = member or ALL
        self.worksheet = ALL
        self.page = 1

    def set_worksheet(self, worksheet: str) -> None:
        self.worksheet = worksheet or ALL
        self.page = 1

    def set_sort(self, field: str) -> None:
        if field == self.sort_field:
            self.sort_direction = "desc" if self.sort_direction == "asc" else "asc"
        else:
            self.sort_field = field
            self.sort_direction = "asc"

    def set_sort_option(self, option: str) -> None:
        """Apply a 'field:direction' option as offered by sort_options()."""
        field, _, direction = str(option).partition(":")
        direction = direction or "asc"
        if direction not in SORT_DIRECTIONS:
            raise ValueError(f"Sort direction must be 'asc' or 'desc', got {direction!r}")
        self.sort_field = field
        self.sort_direction = direction

    def set_page(self, page: int) -> None:
        self.page = max(1, int(page))

    def clamp_page(self, page_count: int) -> int:
        self.page = min(max(1, self.page), max(1, page_count))
        return self.page

    def first_page(self) -> None:
        self.page = 1

    def prev_page(self) -> None:
        self.page = max(1, self.page - 1)

    def next_page(self, page_count: int) -> None:
        self.page = min(max(1, page_count), self.page + 1)

    def last_page(self, page_count: int) -> None:
        self.page = max(1, page_count)

    @property
    def sort_option(self) -> str:
        return f"{self.sort_field}:{self.sort_direction}"


def sort_options() -> List[str]:
    return [f"{key}:{direction}" for key, _ in COLUMNS for direction in SORT_DIRECTIONS]


def sort_option_label(option: str) -> str:
    """Human label for a sort option, e.g. 'Plasmid (asc)'."""
    field, _, direction = str(option).partition(":")
    labels = dict(COLUMNS)
    return f"{labels.get(field, field)} ({direction or 'asc'})"
