"""Authenticated data loader with last-request-wins commits."""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict, List, Optional

import requests
from pydantic import BaseModel, ValidationError

from ..parsing.normalizer import normalize_rows
from ..records.models import Dataset, Member
from ..utils.logging import get_logger
from ..utils.urls import append_query_param
from .errors import LoadError, ParseError, RemoteError, TransportError

logger = get_logger(__name__)

TOKEN_PARAM = "idToken"
DEFAULT_TIMEOUT_SECONDS = 20
DEFAULT_USER_AGENT = "plasmid-browser/0.1"


class LoadStatus(BaseModel):
    """Load status as seen by the presentation layer."""

    loading: bool = False
    error: str = ""
    generation: int = 0  # latest load started
    loaded_generation: int = 0  # generation of the current dataset

    @property
    def state(self) -> str:
        if self.loading:
            return "loading"
        if self.error:
            return "error"
        if self.loaded_generation:
            return "ready"
        return "idle"


def build_data_url(base_url: str, token: str) -> str:
    return append_query_param(base_url, TOKEN_PARAM, token)


def _clean_worksheets(raw: Any) -> List[Any]:
    """Drop null and blank worksheet names; a non-list counts as none."""
    if not isinstance(raw, list):
        return []
    return [name for name in raw if name is not None and str(name).strip()]


def _parse_members(raw_members: Any) -> List[Member]:
    if not isinstance(raw_members, list):
        return []
    members = []
    for entry in raw_members:
        if isinstance(entry, dict) and "worksheets" in entry:
            entry = {**entry, "worksheets": _clean_worksheets(entry["worksheets"])}
        try:
            member = Member.model_validate(entry)
        except ValidationError as e:
            logger.warning(f"Dropping invalid member entry: {e.error_count()} validation errors")
            continue
        if not member.key:
            logger.warning("Dropping member entry without memberId or name")
            continue
        members.append(member)
    return members


def parse_payload(payload: Any, generation: int = 0) -> Dataset:
    """
    Build a Dataset from a decoded response body.

    Raises:
        ParseError: If the body is not a JSON object of the expected shape
        RemoteError: If the body carries an ``error`` field
    """
    if not isinstance(payload, dict):
        raise ParseError(f"Expected a JSON object, got {type(payload).__name__}")
    if payload.get("error"):
        reason = payload.get("reason")
        raise RemoteError(str(payload["error"]), str(reason) if reason else None)

    raw_rows = payload.get("rows") or []
    if not isinstance(raw_rows, list):
        raise ParseError("'rows' must be a list")

    updated_at = payload.get("updatedAt")
    try:
        return Dataset(
            members=_parse_members(payload.get("members") or []),
            rows=normalize_rows(raw_rows),
            updated_at=str(updated_at) if updated_at else None,
            generation=generation,
        )
    except ValidationError as e:
        raise ParseError(f"Unexpected response shape: {e.error_count()} validation errors") from e


class DataLoader:
    """
    Fetches the dataset for a token and owns the current Dataset.

    Every load gets a generation number. A result is committed only if its
    generation is still the latest one started, so when two loads overlap
    the one started last wins no matter which finishes first.
    """

    def __init__(
        self,
        data_url: str,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
        max_workers: int = 4,
    ):
        if not data_url:
            raise ValueError("data_url is required")
        self.data_url = data_url
        self.timeout = timeout_seconds
        self.user_agent = user_agent
        self.session = session or requests.Session()
        self.max_workers = max_workers

        self._lock = threading.Lock()
        self._dataset = Dataset.empty()
        self._status = LoadStatus()
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def dataset(self) -> Dataset:
        with self._lock:
            return self._dataset

    @property
    def status(self) -> LoadStatus:
        with self._lock:
            return self._status.model_copy()

    def _get_headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
            "Cache-Control": "no-store",
        }

    def fetch(self, token: str, generation: int = 0) -> Dataset:
        """
        Perform one authenticated GET and parse the result.

        Args:
            token: Bearer token from the session gate
            generation: Generation number stamped on the returned Dataset

        Raises:
            ValueError: If no token is given
            TransportError: On a non-2xx status, timeout or connection failure
            ParseError: If the body is not a JSON object
            RemoteError: If the endpoint reports an error
        """
        if not token:
            raise ValueError("Cannot load data without a token")

        url = build_data_url(self.data_url, token)
        try:
            response = self.session.get(url, headers=self._get_headers(), timeout=self.timeout)
        except requests.Timeout as e:
            raise TransportError(None, f"Timeout after {self.timeout}s") from e
        except requests.RequestException as e:
            raise TransportError(None, f"Request failed: {e.__class__.__name__}") from e

        if not 200 <= response.status_code < 300:
            raise TransportError(response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise ParseError(f"Response is not valid JSON: {e}") from e

        return parse_payload(payload, generation=generation)

    def begin(self) -> int:
        """Start a new generation and mark the loader busy."""
        with self._lock:
            generation = self._status.generation + 1
            self._status = self._status.model_copy(update={"generation": generation, "loading": True})
            return generation

    def commit(
        self,
        generation: int,
        dataset: Optional[Dataset] = None,
        error: Optional[str] = None,
    ) -> bool:
        """
        Settle a generation. Results of superseded generations are dropped.

        Returns:
            True if the result was applied
        """
        with self._lock:
            if generation != self._status.generation:
                logger.info(
                    f"Discarding stale load result (generation {generation}, "
                    f"latest {self._status.generation})"
                )
                return False
            if error is not None:
                self._status = self._status.model_copy(update={"loading": False, "error": error})
                return True
            if dataset is not None:
                self._dataset = dataset
                self._status = self._status.model_copy(
                    update={"loading": False, "error": "", "loaded_generation": generation}
                )
                return True
            self._status = self._status.model_copy(update={"loading": False})
            return True

    def load(self, token: str) -> Optional[Dataset]:
        """
        Load and commit the dataset for a token.

        Failures are not retried; they are reported through status.error.

        Returns:
            The new Dataset if this load was committed successfully, else None
        """
        if not token:
            raise ValueError("Cannot load data without a token")

        return self._run(token, self.begin())

    def _run(self, token: str, generation: int) -> Optional[Dataset]:
        """Fetch for an already started generation and commit the result."""
        logger.info(f"Loading dataset (generation {generation})")
        try:
            dataset = self.fetch(token, generation=generation)
        except LoadError as e:
            logger.error(f"Dataset load failed: {e}")
            self.commit(generation, error=str(e))
            return None
        except Exception as e:
            logger.error(f"Unexpected error loading dataset: {e}", exc_info=True)
            self.commit(generation, error=str(e))
            return None

        if not self.commit(generation, dataset=dataset):
            return None
        logger.info(f"Loaded {len(dataset.rows)} rows and {len(dataset.members)} members")
        return dataset

    def load_async(self, token: str) -> Future:
        """
        Start a load on the loader's worker pool.

        The generation is taken on the calling thread, so request order, not
        worker scheduling, decides which load wins.
        """
        if not token:
            raise ValueError("Cannot load data without a token")
        generation = self.begin()
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="plasmid-loader"
            )
        return self._executor.submit(self._run, token, generation)

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None
