"""Plain-text and JSON rendering of query results."""

import json
from typing import Any, Dict, List, Optional

from ..query.engine import QueryResult
from ..records.models import COLUMNS, LINK_FIELD, BenchlingLink, row_member_key
from ..retrieval.loader import LoadStatus
from ..utils.time import parse_iso

DESCRIPTION_WIDTH = 80
MAX_COLUMN_WIDTH = 40
EMPTY_MESSAGE = "No matches. Try a different keyword or filter."


def _truncate(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    return text[: width - 1] + "…"


def render_cell(key: str, row: Dict[str, Any]) -> str:
    value = row.get(key)
    if key == LINK_FIELD:
        if isinstance(value, BenchlingLink) and value.url:
            return value.display_text
        return ""
    text = str(value or "")
    if key == "Descriptions":
        return _truncate(text, DESCRIPTION_WIDTH)
    return text


def member_sheet_label(row: Dict[str, Any]) -> str:
    return f"{row_member_key(row)} · {row.get('worksheet') or ''}"


def format_updated_at(updated_at: Optional[str]) -> str:
    """Local 'YYYY-MM-DD HH:MM' for an ISO timestamp; raw text if unparseable."""
    if not updated_at:
        return ""
    try:
        return parse_iso(updated_at).astimezone().strftime("%Y-%m-%d %H:%M")
    except ValueError:
        return updated_at


def render_summary(result: QueryResult, status: LoadStatus) -> str:
    if status.loading:
        line = "Loading…"
    else:
        line = f"{result.total} result" + ("" if result.total == 1 else "s")
    if status.error:
        line += f"  [{status.error}]"
    return line


def render_pager(result: QueryResult) -> str:
    line = f"Page {result.page} / {result.page_count}"
    if result.showing:
        line += f" · {result.showing}"
    return line


def render_table(result: QueryResult) -> str:
    """
    Render the current page as a fixed-width text table.

    The last column shows the owning member and worksheet of each row.
    """
    if not result.page_rows:
        return EMPTY_MESSAGE

    headers = [label for _, label in COLUMNS] + ["Member / Sheet"]
    body: List[List[str]] = []
    for row in result.page_rows:
        cells = [_truncate(render_cell(key, row), MAX_COLUMN_WIDTH) for key, _ in COLUMNS]
        cells.append(member_sheet_label(row))
        body.append(cells)

    widths = [max(len(headers[i]), *(len(r[i]) for r in body)) for i in range(len(headers))]
    lines = [
        "  ".join(h.ljust(w) for h, w in zip(headers, widths)).rstrip(),
        "  ".join("-" * w for w in widths),
    ]
    for cells in body:
        lines.append("  ".join(c.ljust(w) for c, w in zip(cells, widths)).rstrip())
    return "\n".join(lines)


def _row_to_json(row: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(row)
    link = data.get(LINK_FIELD)
    if isinstance(link, BenchlingLink):
        data[LINK_FIELD] = link.model_dump(exclude_none=True)
    return data


def render_json(result: QueryResult) -> str:
    payload = {
        "total": result.total,
        "page": result.page,
        "page_count": result.page_count,
        "worksheet_options": result.worksheet_options,
        "rows": [_row_to_json(row) for row in result.page_rows],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)
