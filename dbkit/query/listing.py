"""
Listing query builder.

Translates a pageable, searchable, sortable, date-filtered list request
into a MongoDB filter, sort order, skip and limit. Pure: no I/O.

Example:
    from dbkit.query import ListQuery, ListQueryBuilder

    plan = ListQueryBuilder().build(ListQuery(
        take=20,
        search={"fields": ["name", "email"], "value": "jo"},
        sort={"by": "createdDate", "type": "desc"},
        dateFilter={"field": "createdDate", "start": since},
    ))
    cursor = collection.find(plan.filter).sort(plan.sort).skip(plan.skip).limit(plan.limit)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field
from pymongo import ASCENDING, DESCENDING

from dbkit.query.search import escape_regex, to_searchable

if TYPE_CHECKING:
    from dbkit.config.settings import DatabaseSettings

logger = logging.getLogger(__name__)

DEFAULT_TAKE = 10
DEFAULT_SKIP = 0
SORT_DESC = "desc"


class SearchSpec(BaseModel):
    """Free-text search: a substring of ``value`` in any of ``fields``."""

    fields: Optional[Union[str, List[str]]] = None
    value: Optional[str] = None


class SortSpec(BaseModel):
    """Single-key sort. ``type`` is "asc" or "desc"."""

    by: Optional[str] = None
    type: Optional[str] = SORT_DESC


class DateFilter(BaseModel):
    """Inclusive range on a date field. Either bound may be omitted."""

    field: Optional[str] = None
    start: Optional[Any] = None
    end: Optional[Any] = None


class ListQuery(BaseModel):
    """
    A listing request.

    ``take`` and ``skip`` are not validated; whatever is given reaches the
    driver, which applies its own error semantics.
    """

    model_config = ConfigDict(populate_by_name=True)

    take: Any = DEFAULT_TAKE
    skip: Any = DEFAULT_SKIP
    search: Optional[SearchSpec] = Field(default_factory=SearchSpec)
    sort: Optional[SortSpec] = Field(default_factory=SortSpec)
    date_filter: Optional[DateFilter] = Field(default_factory=DateFilter, alias="dateFilter")


@dataclass
class ListQueryPlan:
    """Everything one ``find`` call needs."""
    filter: Dict[str, Any]
    sort: List[Tuple[str, int]] = field(default_factory=list)
    skip: Any = DEFAULT_SKIP
    limit: Any = DEFAULT_TAKE


class ListQueryBuilder:
    """
    Builds ListQueryPlans.

    Args:
        legacy_sort_direction: Reproduce the historical mapping where
            type="desc" sorts ascending and anything else descending.
        escape: Regex escaping function applied to the search value.
        normalize: Text normalization applied after escaping.
    """

    def __init__(
        self,
        legacy_sort_direction: bool = False,
        escape: Callable[[str], str] = escape_regex,
        normalize: Callable[[str], str] = to_searchable,
    ):
        self._legacy_sort_direction = legacy_sort_direction
        self._escape = escape
        self._normalize = normalize

    @classmethod
    def from_settings(cls, settings: "DatabaseSettings") -> "ListQueryBuilder":
        return cls(legacy_sort_direction=settings.DBKIT_LEGACY_SORT_DIRECTION)

    def build(self, query: Union[ListQuery, Mapping[str, Any], None] = None) -> ListQueryPlan:
        """Build the filter, sort, skip and limit for a listing request."""
        if query is None:
            query = ListQuery()
        elif not isinstance(query, ListQuery):
            query = ListQuery.model_validate(dict(query))

        filter_data: Dict[str, Any] = {}

        search_clause = self.build_search(query.search)
        if search_clause:
            filter_data["$or"] = search_clause

        date_clause = self.build_date_range(query.date_filter)
        if date_clause:
            filter_data["$and"] = date_clause

        plan = ListQueryPlan(
            filter=filter_data,
            sort=self.build_sort(query.sort),
            skip=query.skip,
            limit=query.take,
        )
        logger.debug(f"Built listing plan: {plan}")
        return plan

    def build_sort(self, sort: Optional[SortSpec]) -> List[Tuple[str, int]]:
        """Single-key sort order, or empty when ``by`` or ``type`` is missing."""
        if not sort or not sort.by or not sort.type:
            return []

        if self._legacy_sort_direction:
            direction = DESCENDING if sort.type != SORT_DESC else ASCENDING
        else:
            direction = DESCENDING if sort.type == SORT_DESC else ASCENDING

        return [(sort.by, direction)]

    def build_search(self, search: Optional[SearchSpec]) -> List[Dict[str, Any]]:
        """One unanchored, case-sensitive regex condition per field, to be OR-ed."""
        if not search or not search.fields or not search.value:
            return []

        fields = [search.fields] if isinstance(search.fields, str) else list(search.fields)
        pattern = ".*" + self._normalize(self._escape(search.value)) + ".*"

        return [{name: {"$regex": pattern}} for name in fields]

    def build_date_range(self, date_filter: Optional[DateFilter]) -> List[Dict[str, Any]]:
        """Up to two range conditions on one field, to be AND-ed."""
        if not date_filter or not date_filter.field:
            return []

        conditions = []
        if date_filter.start:
            conditions.append({date_filter.field: {"$gte": date_filter.start}})
        if date_filter.end:
            conditions.append({date_filter.field: {"$lte": date_filter.end}})

        return conditions
