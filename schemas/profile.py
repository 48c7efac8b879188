"""
Pydantic schemas for the randomuser.me payload and the flattened profile
"""

from pydantic import BaseModel, Field, validator
from typing import Optional, Union, Dict, Any
from datetime import datetime, timezone


# ============================================================================
# Upstream payload (one entry of "results")
# ============================================================================

class UpstreamName(BaseModel):
    first: str
    last: str


class UpstreamLogin(BaseModel):
    username: str


class UpstreamDob(BaseModel):
    date: Optional[datetime] = None


class UpstreamPicture(BaseModel):
    large: Optional[str] = None
    medium: Optional[str] = None
    thumbnail: Optional[str] = None


class UpstreamStreet(BaseModel):
    number: Optional[Union[int, str]] = None
    name: Optional[str] = None


class UpstreamCoordinates(BaseModel):
    latitude: Optional[Union[str, float]] = None
    longitude: Optional[Union[str, float]] = None


class UpstreamLocation(BaseModel):
    street: UpstreamStreet = Field(default_factory=UpstreamStreet)
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postcode: Optional[Union[int, str]] = None
    coordinates: UpstreamCoordinates = Field(default_factory=UpstreamCoordinates)


class UpstreamUser(BaseModel):
    """A single user as returned by the randomuser.me API"""
    name: UpstreamName
    email: str
    login: UpstreamLogin
    gender: str
    dob: UpstreamDob = Field(default_factory=UpstreamDob)
    phone: Optional[str] = None
    cell: Optional[str] = None
    picture: UpstreamPicture = Field(default_factory=UpstreamPicture)
    location: UpstreamLocation = Field(default_factory=UpstreamLocation)


# ============================================================================
# Flattened profile
# ============================================================================

def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


class ProfileData(BaseModel):
    """
    One person's identity, detail and location data, ready to be stored.

    gender is kept as received; the store rejects anything other than
    male/female. Postcode, street number and coordinates are plain text.
    """

    # Identity
    first_name: str
    last_name: str
    email: str
    username: str

    # Detail
    gender: str
    date_of_birth: Optional[datetime] = None
    phone: Optional[str] = None
    cell: Optional[str] = None
    picture_large: Optional[str] = None
    picture_medium: Optional[str] = None
    picture_thumbnail: Optional[str] = None

    # Location
    street_number: Optional[str] = None
    street_name: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postcode: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None

    @validator("street_number", "postcode", "latitude", "longitude", pre=True)
    def coerce_text(cls, v):
        """Upstream sends some of these as numbers"""
        return _as_text(v)

    @classmethod
    def from_upstream(cls, user: UpstreamUser) -> "ProfileData":
        """Flatten a nested upstream user"""
        date_of_birth = user.dob.date
        if date_of_birth is not None and date_of_birth.tzinfo is not None:
            # Stored as a naive UTC timestamp
            date_of_birth = date_of_birth.astimezone(timezone.utc).replace(tzinfo=None)

        return cls(
            first_name=user.name.first,
            last_name=user.name.last,
            email=user.email,
            username=user.login.username,
            gender=user.gender,
            date_of_birth=date_of_birth,
            phone=user.phone,
            cell=user.cell,
            picture_large=user.picture.large,
            picture_medium=user.picture.medium,
            picture_thumbnail=user.picture.thumbnail,
            street_number=user.location.street.number,
            street_name=user.location.street.name,
            city=user.location.city,
            state=user.location.state,
            country=user.location.country,
            postcode=user.location.postcode,
            latitude=user.location.coordinates.latitude,
            longitude=user.location.coordinates.longitude,
        )

    def user_fields(self) -> Dict[str, Any]:
        return self.dict(include={"first_name", "last_name", "email", "username"})

    def detail_fields(self) -> Dict[str, Any]:
        return self.dict(include={
            "gender", "date_of_birth", "phone", "cell",
            "picture_large", "picture_medium", "picture_thumbnail",
        })

    def location_fields(self) -> Dict[str, Any]:
        return self.dict(include={
            "street_number", "street_name", "city", "state", "country",
            "postcode", "latitude", "longitude",
        })
