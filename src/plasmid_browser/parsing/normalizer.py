from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..records.models import LINK_FIELD, BenchlingLink
from ..utils.logging import get_logger
from ..utils.urls import short_url

logger = get_logger(__name__)

__all__ = ["normalize_link", "normalize_row", "normalize_rows", "short_url"]


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_link(raw: Any) -> Optional[BenchlingLink]:
    """
    Turn a raw Benchling cell into a BenchlingLink, or None.

    The sheet export sends either a bare URL string or an object with
    ``url``/``text``. Anything else is dropped rather than raised.
    """
    if isinstance(raw, BenchlingLink):
        return raw
    if not raw:
        return None
    if isinstance(raw, str):
        url = _clean(raw)
        return BenchlingLink(url=url) if url else None
    if isinstance(raw, Mapping):
        url = _clean(raw.get("url"))
        text = _clean(raw.get("text"))
        if url or text:
            return BenchlingLink(url=url, text=text)
    logger.debug(f"Dropping malformed {LINK_FIELD} value of type {type(raw).__name__}")
    return None


def normalize_row(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow copy of a row with its link field normalized."""
    row = dict(raw)
    row[LINK_FIELD] = normalize_link(raw.get(LINK_FIELD))
    return row


def normalize_rows(raws: Iterable[Any]) -> List[Dict[str, Any]]:
    rows = []
    skipped = 0
    for raw in raws:
        if not isinstance(raw, Mapping):
            skipped += 1
            continue
        rows.append(normalize_row(dict(raw)))
    if skipped:
        logger.warning(f"Skipped {skipped} rows that were not JSON objects")
    return rows
