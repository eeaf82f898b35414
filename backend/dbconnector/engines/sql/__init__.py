"""
SQL statement engine: column extraction and single-statement execution.

Exports: extract_bound_columns, run_query, run_update, run_execute.
"""

from dbconnector.engines.sql.executor import run_execute, run_query, run_update
from dbconnector.engines.sql.extractor import extract_bound_columns

__all__ = [
    "extract_bound_columns",
    "run_query",
    "run_update",
    "run_execute",
]
