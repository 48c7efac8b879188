"""
Abstract base class for profile sources
"""

from abc import ABC, abstractmethod
from core.result import Result
from schemas.profile import ProfileData


class ProfileSource(ABC):
    """
    Abstract base class for anything that produces one profile per call.

    Implementations must not raise: every failure is returned as
    ``Result.failure`` carrying an UpstreamFetchError.
    """

    source_name: str = "profile_source"

    @abstractmethod
    async def fetch_one(self) -> Result[ProfileData]:
        """
        Fetch a single profile.

        Returns:
            Result holding a ProfileData or an UpstreamFetchError
        """
        pass
