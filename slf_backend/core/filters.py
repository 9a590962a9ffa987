"""
In-memory search and filter helpers shared by the list endpoints.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

ALL = "all"


def matches_search(term: Optional[str], *values: Optional[str]) -> bool:
    """Case-insensitive substring match of `term` against any of `values`. Empty term matches everything."""
    if not term:
        return True
    needle = term.strip().lower()
    if not needle:
        return True
    return any(needle in str(v).lower() for v in values if v)


def matches_filter(value: Any, selected: Optional[str]) -> bool:
    """Equality filter; None or "all" lets every row through."""
    if selected is None or selected == ALL:
        return True
    return value == selected


def index_by_id(rows: Optional[Iterable[Dict[str, Any]]], key: str = "id") -> Dict[Any, Dict[str, Any]]:
    return {row[key]: row for row in (rows or []) if row.get(key) is not None}


def parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def sort_by_timestamp(rows: List[Dict[str, Any]], key: str, newest_first: bool = True) -> List[Dict[str, Any]]:
    """Sort rows on an ISO timestamp field; rows without a parseable timestamp always go last."""
    dated = []
    undated = []
    for row in rows:
        ts = parse_timestamp(row.get(key))
        if ts is None:
            undated.append(row)
        else:
            if ts.tzinfo is None:
                ts = ts.replace(tzinfo=timezone.utc)
            dated.append((ts.timestamp(), row))
    dated.sort(key=lambda pair: pair[0], reverse=newest_first)
    return [row for _, row in dated] + undated
