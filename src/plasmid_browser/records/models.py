from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..utils.urls import short_url

LINK_FIELD = "Benchling"

DISPLAY_FIELDS = (
    "Plasmid_Name",
    "Plasmid_Information",
    "Antibiotics",
    "Descriptions",
    "Box_(Location)",
)

# Table columns in display order: (row key, header label)
COLUMNS = (
    ("Plasmid_Name", "Plasmid"),
    ("Plasmid_Information", "Info"),
    ("Antibiotics", "Abx"),
    ("Descriptions", "Description"),
    ("Box_(Location)", "Box"),
    (LINK_FIELD, "Benchling"),
)

DEFAULT_SORT_FIELD = "Plasmid_Name"


class BenchlingLink(BaseModel):
    """A normalized Benchling link: a url, a label, or both."""

    model_config = ConfigDict(frozen=True)

    url: Optional[str] = None
    text: Optional[str] = None

    @property
    def display_text(self) -> str:
        if self.text:
            return self.text
        return short_url(self.url or "")

    @property
    def search_text(self) -> str:
        return self.url or self.text or ""


class Member(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    memberId: Optional[str] = None
    name: Optional[str] = None
    worksheets: List[str] = Field(default_factory=list)

    @property
    def key(self) -> str:
        return self.memberId or self.name or ""

    def matches(self, member: str) -> bool:
        return bool(member) and (self.memberId == member or self.name == member)


class Dataset(BaseModel):
    """One generation of fetched data. Replaced wholesale, never merged."""

    members: List[Member] = Field(default_factory=list)
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    updated_at: Optional[str] = None
    generation: int = 0

    @classmethod
    def empty(cls) -> "Dataset":
        return cls()

    def find_member(self, member: str) -> Optional[Member]:
        for m in self.members:
            if m.matches(member):
                return m
        return None


def row_member_key(row: Dict[str, Any]) -> str:
    """Member identity shown for a row (id first, then display name)."""
    return row.get("memberId") or row.get("memberName") or ""
