"""
Discover the bound column order of an UPDATE statement.

Textual heuristic, not a SQL parser: it reads ``SET <assignments> WHERE <conditions>``
and returns the left-hand side of each ``=``. Subqueries, ``OR`` conditions,
parentheses and quoted identifiers containing ``=`` or ``,`` are not handled.
"""

import re

_SET_WHERE = re.compile(r"SET\s+(.+?)\s+WHERE\s+(.+)", re.IGNORECASE | re.DOTALL)
_AND = re.compile(r"\s+AND\s+", re.IGNORECASE)


def _lhs(expr: str) -> str:
    return expr.split("=", 1)[0].strip()


def extract_bound_columns(sql: str) -> list[str]:
    """
    Return SET columns followed by WHERE columns, left to right.

    The order must equal the order of the ``?`` placeholders in *sql*.
    Returns [] when the statement has no ``SET ... WHERE ...`` shape.
    """
    if not sql:
        return []
    m = _SET_WHERE.search(sql)
    if m is None:
        return []
    assignments, conditions = m.group(1), m.group(2)
    columns = [_lhs(a) for a in assignments.split(",")]
    columns.extend(_lhs(c) for c in _AND.split(conditions))
    return columns
