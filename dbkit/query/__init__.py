"""
Query module - Listing query builder and update payload sanitizing.

Everything here is pure: no I/O, no connection needed.
"""

from dbkit.query.listing import (
    ListQuery,
    ListQueryBuilder,
    ListQueryPlan,
    SearchSpec,
    SortSpec,
    DateFilter,
)
from dbkit.query.sanitizer import UNDEFINED, sanitize_update
from dbkit.query.search import escape_regex, to_searchable

__all__ = [
    "ListQuery",
    "ListQueryBuilder",
    "ListQueryPlan",
    "SearchSpec",
    "SortSpec",
    "DateFilter",
    "UNDEFINED",
    "sanitize_update",
    "escape_regex",
    "to_searchable",
]
