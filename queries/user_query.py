"""
User listing: validation, filtering, pagination and field selection.

Every matched user is first built into a full UserRow; the caller's field
list is applied afterwards as a pure projection, so it never changes which
rows match. Unknown field names are dropped without error.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Mapping, Optional
import logging
import math

from pydantic import ValidationError as PydanticValidationError

from ingestion.loaders.profile_store import ProfileStore
from models import UserRecord
from schemas.api import UserListParams
from core.exceptions import QueryValidationError

logger = logging.getLogger(__name__)

# Output order of every row
CANONICAL_FIELDS = (
    "id",
    "name",
    "email",
    "username",
    "gender",
    "city",
    "country",
    "first_name",
    "last_name",
    "phone",
    "cell",
    "date_of_birth",
    "street",
    "state",
    "postcode",
    "picture_large",
    "picture_medium",
    "picture_thumbnail",
)


@dataclass(frozen=True)
class UserRow:
    """Full canonical shape of one listed user"""
    id: int
    name: str
    email: str
    username: str
    gender: Optional[str]
    city: Optional[str]
    country: Optional[str]
    first_name: str
    last_name: str
    phone: Optional[str]
    cell: Optional[str]
    date_of_birth: Optional[datetime]
    street: Optional[str]
    state: Optional[str]
    postcode: Optional[str]
    picture_large: Optional[str]
    picture_medium: Optional[str]
    picture_thumbnail: Optional[str]


@dataclass
class PagedUsers:
    total: int
    per_page: int
    current_page: int
    last_page: int
    data: List[Dict[str, Any]]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_row(user: UserRecord) -> UserRow:
    """Compute every canonical field; missing detail/location give None"""
    detail = user.detail
    location = user.location

    gender = None
    if detail is not None and detail.gender is not None:
        gender = getattr(detail.gender, "value", detail.gender)

    return UserRow(
        id=user.id,
        name=user.full_name,
        email=user.email,
        username=user.username,
        gender=gender,
        city=location.city if location else None,
        country=location.country if location else None,
        first_name=user.first_name,
        last_name=user.last_name,
        phone=detail.phone if detail else None,
        cell=detail.cell if detail else None,
        date_of_birth=detail.date_of_birth if detail else None,
        street=location.full_street if location else None,
        state=location.state if location else None,
        postcode=location.postcode if location else None,
        picture_large=detail.picture_large if detail else None,
        picture_medium=detail.picture_medium if detail else None,
        picture_thumbnail=detail.picture_thumbnail if detail else None,
    )


def parse_fields(raw: Optional[str]) -> Optional[FrozenSet[str]]:
    """
    Parse a comma-separated field list.

    Returns None when no selection was requested. Names are trimmed and
    anything outside CANONICAL_FIELDS is discarded, so a list made only of
    unknown names selects nothing.
    """
    if not raw:
        return None
    requested = {name.strip() for name in raw.split(",")}
    return frozenset(requested.intersection(CANONICAL_FIELDS))


def project(row: UserRow, selected: Optional[FrozenSet[str]]) -> Dict[str, Any]:
    """Restrict a row to the selected fields, keeping canonical order"""
    return {
        name: getattr(row, name)
        for name in CANONICAL_FIELDS
        if selected is None or name in selected
    }


def _validation_errors(error: PydanticValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for item in error.errors():
        name = str(item["loc"][0]) if item.get("loc") else "__root__"
        errors.setdefault(name, []).append(item["msg"])
    return errors


class UserQueryEngine:
    """
    Filtered, paginated and field-shaped listing of stored users.

    Parameters are validated before the store is touched; a bad gender,
    an out-of-range limit or a non-integer page raises
    QueryValidationError and no query runs.
    """

    def __init__(self, store: ProfileStore):
        self.store = store

    @staticmethod
    def validate(params: Mapping[str, Any]) -> UserListParams:
        # Blank values count as absent
        cleaned = {
            key: value for key, value in params.items()
            if value is not None and not (isinstance(value, str) and value.strip() == "")
        }
        try:
            return UserListParams.parse_obj(cleaned)
        except PydanticValidationError as e:
            raise QueryValidationError(
                "Invalid request parameters",
                errors=_validation_errors(e)
            )

    async def list_users(self, params: Mapping[str, Any]) -> PagedUsers:
        """
        List users matching the given parameters.

        Args:
            params: Raw gender, city, country, limit, page and fields values

        Returns:
            PagedUsers with one projected dict per matched user

        Raises:
            QueryValidationError: If any parameter is invalid
            PersistenceError: If the store cannot be queried
        """
        query = self.validate(params)
        selected = parse_fields(query.fields)

        total, users = await self.store.find_users(
            gender=query.gender,
            city=query.city,
            country=query.country,
            page=query.page,
            per_page=query.limit
        )

        data = [project(build_row(user), selected) for user in users]

        logger.info(
            f"Listed {len(data)} of {total} users "
            f"(page={query.page}, limit={query.limit}, fields={query.fields or 'all'})"
        )

        return PagedUsers(
            total=total,
            per_page=query.limit,
            current_page=query.page,
            last_page=max(1, math.ceil(total / query.limit)),
            data=data
        )
