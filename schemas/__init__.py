"""
Pydantic schemas for data validation and serialization.

Schemas:
    profile: randomuser.me payload models and the flattened ProfileData
    api: listing parameters and HTTP response models

Usage:
    from schemas.profile import ProfileData, UpstreamUser
    from schemas.api import UserListParams, UserListResponse

Example:
    user = UpstreamUser.parse_obj(payload["results"][0])
    profile = ProfileData.from_upstream(user)
    assert profile.username == payload["results"][0]["login"]["username"]
"""

__all__ = [
    "UpstreamUser",
    "ProfileData",
    "UserListParams",
    "UserListResponse",
    "HealthCheckResponse",
    "ValidationErrorResponse",
    "ErrorResponse",
]
