"""
Pydantic schemas for API request/response models
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
from models.base import Gender

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# Health Check Schemas
# ============================================================================

class HealthCheckResponse(BaseModel):
    """Health check response model"""
    status: str = Field("ok", description="Always 'ok' when the process is serving")
    timestamp: datetime = Field(default_factory=_utcnow)
    database_connected: bool

    class Config:
        json_schema_extra = {
            "example": {
                "status": "ok",
                "timestamp": "2025-04-03T15:48:03Z",
                "database_connected": True
            }
        }


# ============================================================================
# User Listing Schemas
# ============================================================================

class UserListParams(BaseModel):
    """Query parameters for the user listing endpoint"""
    gender: Optional[Gender] = Field(None, description="Exact gender match")
    city: Optional[str] = Field(None, max_length=255, description="Case-insensitive substring of the city")
    country: Optional[str] = Field(None, max_length=255, description="Case-insensitive substring of the country")
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Users per page")
    page: int = Field(default=1, ge=1, description="Page number (1-indexed)")
    fields: Optional[str] = Field(None, description="Comma-separated list of fields to return")

    class Config:
        use_enum_values = True


class UserListResponse(BaseModel):
    """Paginated, field-shaped user listing"""
    status: str = "success"
    total: int
    per_page: int
    current_page: int
    last_page: int
    data: List[Dict[str, Any]]

    class Config:
        json_schema_extra = {
            "example": {
                "status": "success",
                "total": 42,
                "per_page": 10,
                "current_page": 1,
                "last_page": 5,
                "data": [
                    {
                        "id": 1,
                        "name": "Louise Martin",
                        "email": "louise.martin@example.com",
                        "city": "Paris"
                    }
                ]
            }
        }


# ============================================================================
# Error Response Schemas
# ============================================================================

class ValidationErrorResponse(BaseModel):
    """Returned with HTTP 422 when listing parameters are invalid"""
    status: str = "error"
    message: str
    errors: Dict[str, List[str]]

    class Config:
        json_schema_extra = {
            "example": {
                "status": "error",
                "message": "Invalid request parameters",
                "errors": {
                    "gender": ["Input should be 'male' or 'female'"]
                }
            }
        }


class ErrorResponse(BaseModel):
    """Standard error response"""
    status: str = "error"
    message: str
    detail: Optional[str] = None
