from __future__ import annotations

from bugtracker.query.aggregator import Aggregator
from bugtracker.query.builder import build_query, parse_sort
from bugtracker.query.executor import QueryExecutor, compile_criteria

__all__ = [
    "build_query",
    "parse_sort",
    "compile_criteria",
    "QueryExecutor",
    "Aggregator",
]
