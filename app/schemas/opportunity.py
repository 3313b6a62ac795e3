"""Pydantic schemas for investment opportunities read from Supabase."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.common import Pagination


class PropertyType(str, Enum):
    MULTIFAMILY = "multifamily"
    OFFICE = "office"
    RETAIL = "retail"
    INDUSTRIAL = "industrial"
    MIXED_USE = "mixed_use"
    HOSPITALITY = "hospitality"
    HEALTHCARE = "healthcare"
    SELF_STORAGE = "self_storage"
    LAND = "land"
    OTHER = "other"


class InvestmentStrategy(str, Enum):
    VALUE_ADD = "value_add"
    CORE_PLUS = "core_plus"
    OPPORTUNISTIC = "opportunistic"
    CORE = "core"
    DEVELOPMENT = "development"
    REDEVELOPMENT = "redevelopment"
    DISTRESSED = "distressed"


class OpportunityStatus(str, Enum):
    """Status values stored in the ``opportunity_status`` column."""

    DRAFT = "draft"
    REVIEW = "review"
    ACTIVE = "active"
    CLOSED = "closed"
    ARCHIVED = "archived"


# ── Row shapes ─────────────────────────────────────────────────────────

class PropertyAddress(BaseModel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _scalar_to_text(cls, value: Any) -> Any:
        # JSONB addresses are free-form; zips are often stored as numbers.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class OpportunityBrief(BaseModel):
    """Search projection of an opportunity row."""

    id: str = Field(description="Opportunity ID (uuid)")
    opportunity_name: str | None = Field(default=None, examples=["Downtown Office Building"])
    opportunity_description: str | None = None
    property_type: str | None = Field(default=None, examples=["office"])
    property_subtype: str | None = None
    investment_strategy: str | None = Field(default=None, examples=["value_add"])

    total_project_cost: float | None = None
    equity_requirement: float | None = None
    minimum_investment: float | None = Field(default=None, examples=[25000])
    maximum_investment: float | None = None
    target_raise_amount: float | None = None
    projected_irr: float | None = Field(
        default=None, description="Projected IRR as a fraction (0-1)", examples=[0.12]
    )
    projected_total_return_multiple: float | None = None
    projected_hold_period_months: int | None = None
    cash_on_cash_return: float | None = None
    preferred_return_rate: float | None = None

    property_address: PropertyAddress | None = None
    total_square_feet: float | None = None
    number_of_units: int | None = None
    year_built: int | None = None
    property_condition: str | None = None

    business_plan: str | None = None
    value_creation_strategy: str | None = None
    exit_strategy: str | None = None
    fundraising_deadline: str | None = None
    expected_closing_date: str | None = None

    public_listing: bool = False
    featured_listing: bool = False
    accredited_only: bool | None = None
    status: str | None = Field(default=None, examples=["active"])
    created_at: str | None = Field(default=None, description="Insert time (ISO 8601)")
    updated_at: str | None = None
    sponsor_id: str | None = None

    @field_validator("public_listing", "featured_listing", mode="before")
    @classmethod
    def _null_flag_is_false(cls, value: Any) -> Any:
        return False if value is None else value


class OpportunityDetail(OpportunityBrief):
    """Full opportunity row; columns outside the search projection pass through."""

    model_config = ConfigDict(extra="allow")


# ── Query parameters (internal) ────────────────────────────────────────

class OpportunitySearchParams(BaseModel):
    """Public search parameters; ``None`` means the filter is not applied."""

    keyword: str | None = None
    property_type: str | None = None
    investment_strategy: str | None = None
    min_investment: float | None = None
    max_investment: float | None = None
    min_irr: float | None = None
    max_irr: float | None = None
    state: str | None = None
    city: str | None = None
    status: str | None = None
    page: int = 1
    limit: int = 10


class OpportunityListParams(BaseModel):
    """Parameters of the authenticated listing."""

    page: int = 1
    limit: int = 20
    sort_by: str = "created_at"
    sort_order: str = "desc"


# ── Responses ──────────────────────────────────────────────────────────

class OpportunitySearchResponse(BaseModel):
    opportunities: list[OpportunityBrief] = Field(description="Current page of opportunities")
    pagination: Pagination


class OpportunityListResponse(BaseModel):
    opportunities: list[OpportunityDetail] = Field(description="Current page of opportunities")
    pagination: Pagination


class OpportunityDetailResponse(BaseModel):
    opportunity: OpportunityDetail
