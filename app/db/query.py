"""
Positional-parameter query builder for the property search.

Predicates are collected as ``(template, value)`` pairs and only turned into
SQL in ``build``. Placeholders are numbered in the order values are bound, so
``$n`` always refers to ``params[n - 1]``.
"""
from dataclasses import dataclass
from typing import Any, List, Tuple

from app.core.errors import ValidationError

PROPERTY_SEARCH_BASE = """SELECT properties.*, avg(property_reviews.rating) AS average_rating
FROM properties
LEFT JOIN property_reviews ON properties.id = property_reviews.property_id"""


@dataclass(frozen=True)
class BuiltQuery:
    sql: str
    params: Tuple[Any, ...]


class SearchQueryBuilder:
    def __init__(self, base: str = PROPERTY_SEARCH_BASE, group_by: str = "properties.id",
                 order_by: str = "properties.cost_per_night ASC, properties.id"):
        self._base = base
        self._group_by = group_by
        self._order_by = order_by
        self._where: List[Tuple[str, Any]] = []
        self._having: List[Tuple[str, Any]] = []

    def where(self, template: str, value: Any) -> "SearchQueryBuilder":
        """Add a row predicate, e.g. ``where("properties.city LIKE {}", "%Paris%")``."""
        self._where.append((template, value))
        return self

    def having(self, template: str, value: Any) -> "SearchQueryBuilder":
        """Add a predicate on an aggregate, rendered after GROUP BY."""
        self._having.append((template, value))
        return self

    def build(self, limit: int) -> BuiltQuery:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValidationError(f"limit must be a positive integer, got {limit!r}")

        params: List[Any] = []

        def bind(value: Any) -> str:
            params.append(value)
            return f"${len(params)}"

        lines = [self._base]
        for i, (template, value) in enumerate(self._where):
            lines.append(f"{'WHERE' if i == 0 else 'AND'} {template.format(bind(value))}")
        lines.append(f"GROUP BY {self._group_by}")
        for i, (template, value) in enumerate(self._having):
            lines.append(f"{'HAVING' if i == 0 else 'AND'} {template.format(bind(value))}")
        lines.append(f"ORDER BY {self._order_by}")
        lines.append(f"LIMIT {bind(limit)};")
        return BuiltQuery(sql="\n".join(lines), params=tuple(params))
