"""Service layer for investment opportunities, read from the Supabase store."""

from __future__ import annotations

import logging
from typing import Any

from app.config import settings
from app.errors import (
    OpportunityAccessDeniedError,
    OpportunityNotFoundError,
    OpportunityStoreError,
)
from app.schemas.opportunity import (
    OpportunityBrief,
    OpportunityDetail,
    OpportunityListParams,
    OpportunityListResponse,
    OpportunitySearchParams,
    OpportunitySearchResponse,
    OpportunityStatus,
)
from app.services.opportunity_query import (
    SEARCH_COLUMNS,
    Predicate,
    apply_ordering,
    apply_predicates,
    build_pagination,
    build_predicates,
    page_range,
)
from app.services.supabase_client import get_supabase

logger = logging.getLogger(__name__)

LISTING_SORT_FIELDS = {
    "created_at",
    "updated_at",
    "opportunity_name",
    "minimum_investment",
    "projected_irr",
    "target_raise_amount",
}

# Statuses any signed-in user may open; anything else is sponsor-only.
VIEWABLE_STATUSES = {OpportunityStatus.ACTIVE.value, OpportunityStatus.REVIEW.value}


def _table():
    return get_supabase().table(settings.OPPORTUNITIES_TABLE)


def _count(predicates: list[Predicate]) -> int:
    """Run a head-only count with *predicates*; store failures count as 0."""
    query = _table().select("id", count="exact", head=True)
    query = apply_predicates(query, predicates)
    try:
        result = query.execute()
    except Exception as e:
        logger.warning("Opportunity count query failed, reporting total=0: %s", e)
        return 0
    return result.count or 0


# ── Public search ──────────────────────────────────────────────────────

async def search_opportunities(params: OpportunitySearchParams) -> OpportunitySearchResponse:
    """Return one page of publicly listed opportunities plus pagination metadata."""
    predicates = build_predicates(params)
    start, end = page_range(params.page, params.limit)

    query = _table().select(SEARCH_COLUMNS)
    query = apply_predicates(query, predicates)
    query = apply_ordering(query)
    query = query.range(start, end)

    try:
        result = query.execute()
    except Exception as e:
        logger.error("Error fetching opportunities: %s", e)
        raise OpportunityStoreError("Failed to fetch opportunities") from e

    # The count runs separately; concurrent writes can make it disagree with the page.
    total = _count(predicates)
    opportunities = [OpportunityBrief(**row) for row in (result.data or [])]

    return OpportunitySearchResponse(
        opportunities=opportunities,
        pagination=build_pagination(params.page, params.limit, total),
    )


# ── Authenticated listing ──────────────────────────────────────────────

async def list_opportunities(params: OpportunityListParams) -> OpportunityListResponse:
    """Return one page of opportunities for a signed-in user.

    No status or visibility filter is added; what the configured key can read
    is governed by the table's row-level security policies.
    """
    limit = min(params.limit, settings.MAX_PAGE_LIMIT)
    start, end = page_range(params.page, limit)
    sort_by = params.sort_by if params.sort_by in LISTING_SORT_FIELDS else "created_at"

    query = (
        _table()
        .select("*")
        .order(sort_by, desc=params.sort_order != "asc")
        .range(start, end)
    )
    try:
        result = query.execute()
    except Exception as e:
        logger.error("Error listing opportunities: %s", e)
        raise OpportunityStoreError("Failed to fetch opportunities") from e

    total = _count([])
    return OpportunityListResponse(
        opportunities=[OpportunityDetail(**row) for row in (result.data or [])],
        pagination=build_pagination(params.page, limit, total),
    )


# ── Single opportunity ─────────────────────────────────────────────────

async def get_opportunity(opportunity_id: str, user_id: str) -> dict[str, Any]:
    """Return one opportunity row if *user_id* owns it or its status is viewable."""
    query = _table().select("*").eq("id", opportunity_id).limit(1)
    try:
        result = query.execute()
    except Exception as e:
        logger.error("Error fetching opportunity %s: %s", opportunity_id, e)
        raise OpportunityStoreError("Failed to fetch opportunity") from e

    if not result.data:
        raise OpportunityNotFoundError("Opportunity not found")

    row = result.data[0]
    if row.get("sponsor_id") != user_id and row.get("status") not in VIEWABLE_STATUSES:
        raise OpportunityAccessDeniedError("Access denied")
    return row
