"""Top-level browser object: session gate, loader, view state and queries."""

from typing import Any, Dict, List, Optional

from .auth.session import Session, SessionGate
from .config.loader import require_data_url
from .query.engine import PAGE_SIZE, QueryResult, member_options, run_query
from .query.view_state import ViewState
from .records.models import Dataset
from .retrieval.loader import DataLoader, LoadStatus
from .utils.logging import get_logger

logger = get_logger(__name__)


class PlasmidBrowser:
    """
    Everything a front end needs, behind one object.

    Signing in triggers a load. Queries are recomputed from the current
    dataset and view state on every call, and the page number is pulled
    back into range after each derivation.
    """

    def __init__(
        self,
        loader: DataLoader,
        *,
        page_size: int = PAGE_SIZE,
        background: bool = False,
        view: Optional[ViewState] = None,
    ):
        self.loader = loader
        self.page_size = page_size
        self.background = background
        self.view = view or ViewState()
        self.gate = SessionGate(on_authenticated=self._on_authenticated)
        self.pending = None

    @classmethod
    def from_config(cls, config: Dict[str, Any], **kwargs: Any) -> "PlasmidBrowser":
        loader = DataLoader(
            require_data_url(config),
            timeout_seconds=config.get("timeout_seconds", 20),
            user_agent=config.get("user_agent") or "plasmid-browser/0.1",
        )
        return cls(loader, page_size=config.get("page_size", PAGE_SIZE), **kwargs)

    def _on_authenticated(self, token: str) -> None:
        if self.background:
            logger.debug("Starting background load")
            self.pending = self.loader.load_async(token)
        else:
            self.loader.load(token)

    # Session

    def sign_in(self, token: str, identity_label: Optional[str] = None) -> bool:
        return self.gate.complete_sign_in(token, identity_label)

    @property
    def session(self) -> Session:
        return self.gate.session

    @property
    def requires_sign_in(self) -> bool:
        return self.gate.requires_sign_in

    # Data

    @property
    def dataset(self) -> Dataset:
        return self.loader.dataset

    @property
    def status(self) -> LoadStatus:
        return self.loader.status

    # Derived views

    def query(self) -> QueryResult:
        if self.requires_sign_in:
            return QueryResult(page=self.view.page)
        dataset = self.loader.dataset
        result = run_query(dataset, self.view, self.page_size)
        if self.view.clamp_page(result.page_count) != result.page:
            result = run_query(dataset, self.view, self.page_size)
        return result

    def member_options(self) -> List[str]:
        return member_options(self.dataset.members)

    def worksheet_options(self) -> List[str]:
        return self.query().worksheet_options

    def visible_count(self) -> int:
        return self.query().total

    def page_rows(self) -> List[Dict[str, Any]]:
        return self.query().page_rows

    def page_count(self) -> int:
        return self.query().page_count

    # View state mutators

    def set_search(self, text: str) -> None:
        self.view.set_search(text)

    def set_member(self, member: str) -> None:
        self.view.set_member(member)

    def set_worksheet(self, worksheet: str) -> None:
        self.view.set_worksheet(worksheet)

    def set_sort(self, field: str) -> None:
        self.view.set_sort(field)

    def set_sort_option(self, option: str) -> None:
        self.view.set_sort_option(option)

    def set_page(self, page: int) -> None:
        self.view.set_page(page)
