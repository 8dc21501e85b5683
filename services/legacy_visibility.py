"""
Legacy Visibility API - Session-cookie authenticated Slack endpoints.
Converts channels between public and private and lists channel managers,
neither of which the bot token is allowed to do.
"""

import logging
from typing import Dict, Any, List, Optional
import httpx

from config import Settings
from models.schemas import ConversionOutcome

logger = logging.getLogger(__name__)

LIST_ASSIGNMENTS_METHOD = "admin.roles.entity.listAssignments"
CONVERT_TO_PUBLIC_METHOD = "conversations.convertToPublic"
CONVERT_TO_PRIVATE_METHOD = "conversations.convertToPrivate"

# Error codes meaning the channel already has the requested visibility
ALREADY_IN_STATE_ERRORS = frozenset({
    "already_public",
    "channel_already_public",
    "already_private",
    "channel_already_private",
    "not_private",
    "not_public",
})

class LegacyVisibilityError(Exception):
    """Raised when a legacy endpoint is unreachable or answers with an error"""

    def __init__(self, method: str, error: str):
        super().__init__(f"{method} failed: {error}")
        self.method = method
        self.error = error

class LegacyVisibilityClient:
    """
    Client for the browser-session endpoints.
    Every request is form-encoded and carries the ``d`` session cookie.
    """

    def __init__(self, settings: Settings, http_client: Optional[httpx.AsyncClient] = None):
        self.token = settings.SLACK_BROWSER_TOKEN
        self.base_url = settings.SLACK_API_BASE_URL.rstrip("/")
        self.client = http_client or httpx.AsyncClient(
            timeout=float(settings.REQUEST_TIMEOUT),
            follow_redirects=True,
        )
        self.headers = {"Cookie": f"d={settings.SLACK_SESSION_COOKIE}"}

        if not settings.legacy_credentials_configured:
            logger.warning("Legacy visibility API credentials missing - calls will be rejected upstream")

    async def _post(self, method: str, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self.client.post(
                f"{self.base_url}/{method}",
                data={"token": self.token, **data},
                headers=self.headers,
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise LegacyVisibilityError(method, f"http_{e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise LegacyVisibilityError(method, f"transport_error: {e}") from e
        except ValueError as e:
            raise LegacyVisibilityError(method, "invalid_json") from e

    async def list_channel_managers(self, channel_id: str) -> List[str]:
        """
        Get the user IDs holding the channel manager role.

        Args:
            channel_id: Slack channel ID

        Returns:
            User IDs of the first role assignment, or an empty list when the
            endpoint answers ``ok: false``
        """
        data = await self._post(LIST_ASSIGNMENTS_METHOD, {"entity_id": channel_id})

        if not data.get("ok"):
            logger.warning(f"Channel manager lookup for {channel_id} returned error: {data.get('error')}")
            return []

        assignments = data.get("role_assignments") or []
        if not assignments:
            return []
        return list(assignments[0].get("users") or [])

    async def convert_to_public(self, channel_id: str) -> ConversionOutcome:
        return await self._convert(CONVERT_TO_PUBLIC_METHOD, channel_id)

    async def convert_to_private(self, channel_id: str) -> ConversionOutcome:
        return await self._convert(CONVERT_TO_PRIVATE_METHOD, channel_id)

    async def _convert(self, method: str, channel_id: str) -> ConversionOutcome:
        data = await self._post(method, {"channel": channel_id})

        if data.get("ok"):
            logger.info(f"{method} succeeded for {channel_id}")
            return ConversionOutcome.CONVERTED

        error = data.get("error", "unknown_error")
        if error in ALREADY_IN_STATE_ERRORS:
            logger.info(f"{method} was a no-op for {channel_id}: {error}")
            return ConversionOutcome.ALREADY_IN_STATE

        raise LegacyVisibilityError(method, error)

    async def close(self):
        await self.client.aclose()
