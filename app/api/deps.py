import logging
import math

from fastapi import Header, Query

from app.config import settings
from app.errors import AuthenticationError, InvalidQueryParameterError
from app.schemas.opportunity import OpportunityListParams, OpportunitySearchParams
from app.services.supabase_client import get_supabase

logger = logging.getLogger(__name__)


def _optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _optional_number(name: str, value: str | None) -> float | None:
    """Parse a numeric filter; blank means absent, anything non-numeric is rejected."""
    value = _optional_text(value)
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError:
        raise InvalidQueryParameterError(f"Invalid {name}: {value!r} is not a number") from None
    if not math.isfinite(number):
        raise InvalidQueryParameterError(f"Invalid {name}: {value!r} is not a number")
    return number


def get_opportunity_search_params(
    keyword: str | None = Query(
        None, description="Case-insensitive match in name, description, business plan "
        "or value-creation strategy"
    ),
    property_type: str | None = Query(None, description="Exact property type, e.g. office"),
    investment_strategy: str | None = Query(
        None, description="Exact investment strategy, e.g. value_add"
    ),
    min_investment: str | None = Query(None, description="Lower bound on minimum investment"),
    max_investment: str | None = Query(None, description="Upper bound on minimum investment"),
    min_irr: str | None = Query(None, description="Lower bound on projected IRR (fraction)"),
    max_irr: str | None = Query(None, description="Upper bound on projected IRR (fraction)"),
    state: str | None = Query(None, description="Partial, case-insensitive state match"),
    city: str | None = Query(None, description="Partial, case-insensitive city match"),
    status: str | None = Query(
        None, description="fundraising / due_diligence / funded / cancelled or a stored "
        "status; defaults to active"
    ),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(
        settings.SEARCH_DEFAULT_LIMIT, ge=1, description="Items per page (uncapped)"
    ),
) -> OpportunitySearchParams:
    return OpportunitySearchParams(
        keyword=_optional_text(keyword),
        property_type=_optional_text(property_type),
        investment_strategy=_optional_text(investment_strategy),
        min_investment=_optional_number("min_investment", min_investment),
        max_investment=_optional_number("max_investment", max_investment),
        min_irr=_optional_number("min_irr", min_irr),
        max_irr=_optional_number("max_irr", max_irr),
        state=_optional_text(state),
        city=_optional_text(city),
        status=_optional_text(status),
        page=page,
        limit=limit,
    )


def get_opportunity_list_params(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(
        settings.LISTING_DEFAULT_LIMIT, ge=1, description="Items per page (capped at 50)"
    ),
    sort_by: str = Query("created_at", alias="sortBy", description="Sort field"),
    sort_order: str = Query("desc", alias="sortOrder", description="Sort order: asc or desc"),
) -> OpportunityListParams:
    return OpportunityListParams(
        page=page,
        limit=min(limit, settings.MAX_PAGE_LIMIT),
        sort_by=sort_by,
        sort_order=sort_order,
    )


def get_current_user_id(authorization: str | None = Header(None)) -> str:
    """Verify the bearer token with Supabase auth and return the user's id."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Authentication required")

    try:
        response = get_supabase().auth.get_user(token.strip())
    except Exception as e:
        logger.info("Rejected access token: %s", e)
        raise AuthenticationError("Authentication required") from e

    user = getattr(response, "user", None) if response else None
    if user is None:
        raise AuthenticationError("Authentication required")
    return user.id
