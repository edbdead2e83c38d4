"""SuitePulse — PostgREST Filter Builder.

Turns a plain filter mapping into query parameters for the hosted table API:

    {"user_id": "u1"}                         -> user_id=eq.u1
    {"created_at": ("gte", "2026-01-01")}     -> created_at=gte.2026-01-01
    {"date": [("gte", a), ("lte", b)]}        -> date=gte.a & date=lte.b
    {"status": ("in", ["todo", "done"])}      -> status=in.(todo,done)
"""

from typing import Any, Dict, List, Optional, Tuple

OPERATORS = {"eq", "neq", "gt", "gte", "lt", "lte", "like", "ilike", "is", "in"}


def _encode(op: str, value: Any) -> str:
    if op not in OPERATORS:
        raise ValueError(f"Unsupported filter operator: {op}")
    if op == "in":
        return f"in.({','.join(str(v) for v in value)})"
    if isinstance(value, bool):
        value = str(value).lower()
    elif value is None:
        value = "null"
    return f"{op}.{value}"


def build_params(
    filters: Optional[Dict[str, Any]] = None,
    select: str = "*",
    order: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Tuple[str, str]]:
    """Build an ordered list of query params (columns may repeat)."""
    params: List[Tuple[str, str]] = [("select", select)]

    for column, condition in (filters or {}).items():
        if isinstance(condition, tuple):
            params.append((column, _encode(*condition)))
        elif isinstance(condition, list) and condition and isinstance(condition[0], tuple):
            for op, value in condition:
                params.append((column, _encode(op, value)))
        else:
            params.append((column, _encode("eq", condition)))

    if order:
        params.append(("order", order))
    if limit:
        params.append(("limit", str(limit)))
    return params
