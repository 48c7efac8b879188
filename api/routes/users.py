"""
User listing endpoint with filtering, pagination and field selection
"""

from fastapi import APIRouter, Depends, Query, Request
from api.dependencies import get_query_engine
from queries.user_query import UserQueryEngine
from schemas.api import UserListResponse, ValidationErrorResponse, ErrorResponse
from typing import Optional
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Users"])


@router.get(
    "/users",
    response_model=UserListResponse,
    responses={422: {"model": ValidationErrorResponse}, 500: {"model": ErrorResponse}},
)
async def list_users(
    request: Request,
    gender: Optional[str] = Query(None, description="male or female"),
    city: Optional[str] = Query(None, description="Case-insensitive substring of the city"),
    country: Optional[str] = Query(None, description="Case-insensitive substring of the country"),
    limit: Optional[str] = Query(None, description="Users per page, 1-100 (default 10)"),
    page: Optional[str] = Query(None, description="Page number (default 1)"),
    fields: Optional[str] = Query(None, description="Comma-separated fields to return"),
    engine: UserQueryEngine = Depends(get_query_engine)
):
    """
    Retrieve stored users.

    Parameters arrive as raw strings and are validated by the query engine,
    so every invalid combination yields the same 422 body.
    """
    request_id = getattr(request.state, "request_id", "-")
    logger.info(
        f"[{request_id}] GET /users - gender={gender}, city={city}, country={country}, "
        f"limit={limit}, page={page}, fields={fields}"
    )

    result = await engine.list_users({
        "gender": gender,
        "city": city,
        "country": country,
        "limit": limit,
        "page": page,
        "fields": fields,
    })

    return UserListResponse(**result.to_dict())
