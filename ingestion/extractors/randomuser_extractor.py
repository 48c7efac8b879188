"""
randomuser.me profile source.

One HTTP GET per call with a bounded timeout and no retries:
- Non-success status -> UpstreamStatusError (status code and body)
- Timeout / connection / other transport failure -> UpstreamTransportError
- Unusable body -> UpstreamPayloadError
"""

import httpx
from typing import Any, Dict, Optional
from pydantic import ValidationError as PydanticValidationError
from ingestion.base import ProfileSource
from schemas.profile import ProfileData, UpstreamUser
from core.result import Result
from core.exceptions import (
    UpstreamStatusError,
    UpstreamTransportError,
    UpstreamPayloadError,
)
import logging

logger = logging.getLogger(__name__)

RESPONSE_BODY_LIMIT = 500


class RandomUserSource(ProfileSource):
    """
    Fetch one random profile per call from the randomuser.me API.

    Attributes:
        api_url: Upstream endpoint returning {"results": [user]}
        timeout: Request timeout in seconds
        client: Optional shared httpx.AsyncClient; a short-lived one is
            created per call when omitted
    """

    source_name = "randomuser"

    def __init__(
        self,
        api_url: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.api_url = api_url
        self.timeout = timeout
        self.client = client

    async def fetch_one(self) -> Result[ProfileData]:
        try:
            if self.client is not None:
                response = await self.client.get(self.api_url, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(self.api_url)
        except httpx.TimeoutException as e:
            return Result.failure(UpstreamTransportError(
                f"Request to {self.api_url} timed out",
                context={"api_url": self.api_url, "timeout": self.timeout},
                original_exception=e
            ))
        except Exception as e:
            return Result.failure(UpstreamTransportError(
                f"Request to {self.api_url} failed: {e}",
                context={"api_url": self.api_url},
                original_exception=e
            ))

        if not response.is_success:
            return Result.failure(UpstreamStatusError(
                f"Random user API request failed with status {response.status_code}",
                status_code=response.status_code,
                response_body=response.text[:RESPONSE_BODY_LIMIT],
                context={"api_url": self.api_url}
            ))

        return self._parse(response)

    def _parse(self, response: httpx.Response) -> Result[ProfileData]:
        """Turn a successful response into a ProfileData"""
        try:
            data: Dict[str, Any] = response.json()
        except ValueError as e:
            return Result.failure(UpstreamPayloadError(
                "Failed to parse JSON response",
                context={
                    "api_url": self.api_url,
                    "response_body": response.text[:RESPONSE_BODY_LIMIT]
                },
                original_exception=e
            ))

        results = data.get("results") if isinstance(data, dict) else None
        if not results:
            return Result.failure(UpstreamPayloadError(
                "Response contains no results",
                context={
                    "api_url": self.api_url,
                    "response_body": response.text[:RESPONSE_BODY_LIMIT]
                }
            ))

        try:
            user = UpstreamUser.parse_obj(results[0])
            profile = ProfileData.from_upstream(user)
        except PydanticValidationError as e:
            return Result.failure(UpstreamPayloadError(
                "Response does not match the expected user shape",
                context={"api_url": self.api_url, "payload": results[0]},
                original_exception=e
            ))

        logger.debug(f"Fetched profile {profile.username} from {self.api_url}")
        return Result.success(profile)
