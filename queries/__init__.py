"""
Read-side query processing for stored users.

Modules:
    user_query: UserQueryEngine, the canonical field set and projection helpers
"""

__all__ = [
    "UserQueryEngine",
    "CANONICAL_FIELDS",
    "PagedUsers",
]
