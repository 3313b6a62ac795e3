"""Opportunity query construction: status vocabulary, filter predicates, ordering, paging.

Nothing in this module talks to the store.  The service layer builds a list of
:class:`Predicate` objects once per request and applies it to two independent
PostgREST builders (the page query and the count query), so both always filter
on exactly the same conditions.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any

from app.config import settings
from app.schemas.common import Pagination
from app.schemas.opportunity import OpportunitySearchParams

# Public-facing statuses collapse onto the stored ``opportunity_status`` enum.
STATUS_ALIASES: dict[str, str] = {
    "fundraising": "active",
    "due_diligence": "active",
    "funded": "closed",
    "cancelled": "archived",
}

KEYWORD_COLUMNS: tuple[str, ...] = (
    "opportunity_name",
    "opportunity_description",
    "business_plan",
    "value_creation_strategy",
)

# (column, descending): featured first, then newest first.
SEARCH_ORDERING: tuple[tuple[str, bool], ...] = (
    ("featured_listing", True),
    ("created_at", True),
)

SEARCH_COLUMNS = ",".join(
    [
        "id",
        "opportunity_name",
        "opportunity_description",
        "property_type",
        "property_subtype",
        "investment_strategy",
        "total_project_cost",
        "equity_requirement",
        "minimum_investment",
        "maximum_investment",
        "target_raise_amount",
        "projected_irr",
        "projected_total_return_multiple",
        "projected_hold_period_months",
        "cash_on_cash_return",
        "preferred_return_rate",
        "property_address",
        "total_square_feet",
        "number_of_units",
        "year_built",
        "property_condition",
        "business_plan",
        "value_creation_strategy",
        "exit_strategy",
        "fundraising_deadline",
        "expected_closing_date",
        "public_listing",
        "featured_listing",
        "accredited_only",
        "status",
        "created_at",
        "updated_at",
        "sponsor_id",
    ]
)

_RESERVED_RE = re.compile(r'[,()"\\:]')


@dataclass(frozen=True)
class Predicate:
    """One filter on the opportunity table.

    *op* names the PostgREST builder method (``eq``, ``gte``, ``lte``,
    ``ilike`` or ``or_``).  For ``or_`` the *column* is empty and *value*
    holds the complete logic-tree string.
    """

    op: str
    column: str
    value: Any


# ---------------------------------------------------------------------------
# Status vocabulary
# ---------------------------------------------------------------------------


def resolve_status(status: str | None) -> str:
    """Map a caller-supplied status onto the stored enum.

    Unknown values pass through unchanged; an empty value means the default
    public status.
    """
    if not status:
        return settings.DEFAULT_PUBLIC_STATUS
    return STATUS_ALIASES.get(status, status)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def _quote_filter_value(value: str) -> str:
    """Quote a value embedded in an ``or=(...)`` tree if it holds reserved characters."""
    if not _RESERVED_RE.search(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def keyword_filter(keyword: str) -> str:
    pattern = _quote_filter_value(f"%{keyword}%")
    return ",".join(f"{column}.ilike.{pattern}" for column in KEYWORD_COLUMNS)


def visibility_predicates(status: str | None) -> list[Predicate]:
    return [
        Predicate("eq", "status", resolve_status(status)),
        Predicate("eq", "public_listing", True),
    ]


def build_predicates(params: OpportunitySearchParams) -> list[Predicate]:
    """Build the filter list for a public search.

    The visibility pair always comes first and cannot be switched off by any
    parameter; every other predicate is added only when its parameter is set.
    """
    predicates = visibility_predicates(params.status)

    if params.property_type:
        predicates.append(Predicate("eq", "property_type", params.property_type))
    if params.investment_strategy:
        predicates.append(Predicate("eq", "investment_strategy", params.investment_strategy))

    if params.min_investment is not None:
        predicates.append(Predicate("gte", "minimum_investment", params.min_investment))
    if params.max_investment is not None:
        predicates.append(Predicate("lte", "minimum_investment", params.max_investment))
    if params.min_irr is not None:
        predicates.append(Predicate("gte", "projected_irr", params.min_irr))
    if params.max_irr is not None:
        predicates.append(Predicate("lte", "projected_irr", params.max_irr))

    if params.state:
        predicates.append(Predicate("ilike", "property_address->>state", f"%{params.state}%"))
    if params.city:
        predicates.append(Predicate("ilike", "property_address->>city", f"%{params.city}%"))

    if params.keyword:
        predicates.append(Predicate("or_", "", keyword_filter(params.keyword)))

    return predicates


def apply_predicates(query: Any, predicates: list[Predicate]) -> Any:
    """Chain *predicates* onto a PostgREST filter builder and return it."""
    for predicate in predicates:
        if predicate.op == "or_":
            query = query.or_(predicate.value)
        else:
            query = getattr(query, predicate.op)(predicate.column, predicate.value)
    return query


def apply_ordering(query: Any, ordering: tuple[tuple[str, bool], ...] = SEARCH_ORDERING) -> Any:
    for column, desc in ordering:
        query = query.order(column, desc=desc)
    return query


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


def page_range(page: int, limit: int) -> tuple[int, int]:
    """Inclusive row range ``(from, to)`` for a 1-based *page*."""
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")
    start = (page - 1) * limit
    return start, start + limit - 1


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    total_pages = math.ceil(total / limit) if limit else 0
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
