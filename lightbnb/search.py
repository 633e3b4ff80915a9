"""
lightbnb/search.py

Filtered property search: builds one parameterized aggregate query from a
sparse set of options and executes it against the store.

Query shape:
    SELECT properties.*, avg(rating) AS average_rating
    FROM properties JOIN property_reviews
    [WHERE owner / min price / max price / city]
    GROUP BY properties.id
    [HAVING avg(rating) >= minimum_rating]
    ORDER BY cost_per_night ASC LIMIT limit

User values never appear in the query text; every value is a positional
placeholder whose number equals its position in the parameter list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Protocol

try:
    from lightbnb.config import DEFAULT_SEARCH_LIMIT, IS_DEV, SEARCH_ESCAPE_LIKE
    from lightbnb.db import ExecutionError
    from lightbnb.schemas import SearchOptions
except ModuleNotFoundError:
    from config import DEFAULT_SEARCH_LIMIT, IS_DEV, SEARCH_ESCAPE_LIKE
    from db import ExecutionError
    from schemas import SearchOptions


BASE_QUERY = (
    "SELECT properties.*, avg(property_reviews.rating) AS average_rating\n"
    "FROM properties\n"
    "JOIN property_reviews ON properties.id = property_reviews.property_id"
)
GROUP_BY = "GROUP BY properties.id"
HAVING_RATING = "HAVING avg(property_reviews.rating) >= {ph}"
ORDER_AND_LIMIT = "ORDER BY cost_per_night ASC\nLIMIT {ph}"


@dataclass(frozen=True)
class Predicate:
    """One WHERE comparison: column, operator, bound value."""
    column: str
    operator: str
    value: Any
    escape: bool = False  # LIKE with ESCAPE '\'


@dataclass(frozen=True)
class QueryPlan:
    """Ready-to-execute query text and its positional parameters."""
    text: str
    params: List[Any]


@dataclass
class SearchResult:
    """
    Outcome of one search call.

    Either rows (possibly empty, which is a successful "no matches") or an
    error. Callers must check ok before trusting an empty row list.
    """
    rows: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[ExecutionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ---------------------------------------------------------
# Value helpers
# ---------------------------------------------------------
def to_minor_units(amount: Any) -> int:
    """Convert a price in dollars to whole cents (x100, rounded half-up)."""
    cents = Decimal(str(amount)) * 100
    return int(cents.to_integral_value(rounding=ROUND_HALF_UP))


def escape_like(value: str) -> str:
    """
    Escape \\, % and _ so they match literally under ESCAPE '\\'.
    """
    value = value.replace("\\", "\\\\")
    return value.replace("%", "\\%").replace("_", "\\_")


def placeholder(index: int, paramstyle: str) -> str:
    """Render the positional marker for the 1-based parameter index."""
    if paramstyle == "numeric_dollar":
        return f"${index}"
    if paramstyle == "numeric":
        return f"?{index}"
    raise ValueError("paramstyle must be 'numeric_dollar' or 'numeric'")


# ---------------------------------------------------------
# Query construction
# ---------------------------------------------------------
def where_predicates(options: SearchOptions, *, escape_wildcards: Optional[bool] = None) -> List[Predicate]:
    """
    Collect WHERE predicates in their fixed order: owner, min price, max price, city.

    Absent (None) options contribute nothing. escape_wildcards=None follows
    SEARCH_ESCAPE_LIKE.
    """
    if escape_wildcards is None:
        escape_wildcards = SEARCH_ESCAPE_LIKE
    predicates: List[Predicate] = []

    if options.owner_id is not None:
        predicates.append(Predicate("owner_id", "=", options.owner_id))

    if options.minimum_price_per_night is not None:
        predicates.append(Predicate("cost_per_night", ">=", to_minor_units(options.minimum_price_per_night)))

    if options.maximum_price_per_night is not None:
        predicates.append(Predicate("cost_per_night", "<=", to_minor_units(options.maximum_price_per_night)))

    if options.city is not None:
        city = escape_like(options.city) if escape_wildcards else options.city
        predicates.append(Predicate("city", "LIKE", f"%{city}%", escape=escape_wildcards))

    return predicates


def build_search_query(
    options: SearchOptions,
    limit: int = DEFAULT_SEARCH_LIMIT,
    *,
    paramstyle: str = "numeric_dollar",
    escape_wildcards: Optional[bool] = None,
) -> QueryPlan:
    """
    Render the search query for options and limit.

    Pure: the same inputs always produce the same text and parameters.

    Raises:
        ValueError: limit is not a positive integer, or unknown paramstyle
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValueError(f"limit must be a positive integer, got {limit!r}")

    params: List[Any] = []
    clauses: List[str] = [BASE_QUERY]

    conditions: List[str] = []
    for predicate in where_predicates(options, escape_wildcards=escape_wildcards):
        params.append(predicate.value)
        condition = f"{predicate.column} {predicate.operator} {placeholder(len(params), paramstyle)}"
        if predicate.escape:
            condition += " ESCAPE '\\'"
        conditions.append(condition)

    # WHERE before the first predicate, AND before each later one
    if conditions:
        clauses.append("WHERE " + " AND ".join(conditions))

    # Always grouped so the average works with zero filters
    clauses.append(GROUP_BY)

    if options.minimum_rating is not None:
        params.append(options.minimum_rating)
        clauses.append(HAVING_RATING.format(ph=placeholder(len(params), paramstyle)))

    params.append(limit)
    clauses.append(ORDER_AND_LIMIT.format(ph=placeholder(len(params), paramstyle)))

    return QueryPlan(text="\n".join(clauses) + ";", params=params)


# ---------------------------------------------------------
# Observers
# ---------------------------------------------------------
class SearchObserver(Protocol):
    def search_completed(self, plan: QueryPlan, rows: List[Dict[str, Any]]) -> None: ...

    def search_failed(self, plan: QueryPlan, error: ExecutionError) -> None: ...


class PrintSearchObserver:
    """Default observer: failures always printed, completions in DEV only."""

    def search_completed(self, plan: QueryPlan, rows: List[Dict[str, Any]]) -> None:
        if IS_DEV:
            print(f"[SEARCH] params={len(plan.params)}, results={len(rows)}")

    def search_failed(self, plan: QueryPlan, error: ExecutionError) -> None:
        print(f"[SEARCH] DB error: {error}")


# ---------------------------------------------------------
# Execution
# ---------------------------------------------------------
async def search_properties(
    store,
    options: SearchOptions,
    limit: int = DEFAULT_SEARCH_LIMIT,
    *,
    observer: Optional[SearchObserver] = None,
) -> SearchResult:
    """
    Build and run the filtered search against store.

    Store failures come back as SearchResult(error=...), never as an
    exception, so "no matches" and "query failed" stay distinguishable.

    Args:
        store: object with .paramstyle and async .execute(query, params)
        options: sparse filters
        limit: maximum rows (default 10)
        observer: notified of completion/failure (defaults to printing)
    """
    observer = observer or PrintSearchObserver()
    plan = build_search_query(options, limit, paramstyle=store.paramstyle)

    try:
        rows = await store.execute(plan.text, plan.params)
    except ExecutionError as e:
        observer.search_failed(plan, e)
        return SearchResult(error=e)

    observer.search_completed(plan, rows)
    return SearchResult(rows=rows)
