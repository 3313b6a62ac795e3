"""Investment opportunity API: public search plus authenticated listing and detail."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import (
    get_current_user_id,
    get_opportunity_list_params,
    get_opportunity_search_params,
)
from app.schemas.common import ErrorResponse
from app.schemas.opportunity import (
    OpportunityDetailResponse,
    OpportunityListParams,
    OpportunityListResponse,
    OpportunitySearchParams,
    OpportunitySearchResponse,
)
from app.services import opportunity_service

router = APIRouter()


@router.get(
    "/search",
    response_model=OpportunitySearchResponse,
    summary="Search opportunities",
    description="Search publicly listed opportunities by keyword, property type, strategy, "
    "investment and IRR ranges, location and status. Featured listings come first, then "
    "newest first.",
    responses={
        400: {"model": ErrorResponse, "description": "Malformed filter value"},
        500: {"model": ErrorResponse, "description": "Store failure"},
    },
)
async def search_opportunities(
    params: OpportunitySearchParams = Depends(get_opportunity_search_params),
):
    return await opportunity_service.search_opportunities(params)


@router.get(
    "/",
    response_model=OpportunityListResponse,
    summary="List opportunities",
    description="Paginated listing for signed-in users, sortable by a whitelisted column. "
    "At most 50 items per page.",
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid access token"},
        500: {"model": ErrorResponse, "description": "Store failure"},
    },
)
async def list_opportunities(
    params: OpportunityListParams = Depends(get_opportunity_list_params),
    user_id: str = Depends(get_current_user_id),
):
    return await opportunity_service.list_opportunities(params)


@router.get(
    "/{opportunity_id}",
    response_model=OpportunityDetailResponse,
    summary="Opportunity detail",
    description="Return one opportunity. Sponsors see their own in any status; other users "
    "only see active or in-review opportunities.",
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid access token"},
        403: {"model": ErrorResponse, "description": "Not viewable by this user"},
        404: {"model": ErrorResponse, "description": "Opportunity not found"},
    },
)
async def get_opportunity(
    opportunity_id: str,
    user_id: str = Depends(get_current_user_id),
):
    opportunity = await opportunity_service.get_opportunity(opportunity_id, user_id)
    return {"opportunity": opportunity}
