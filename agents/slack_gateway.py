"""
Slack Gateway - Handles lookups and outgoing messages on the Slack Web API.
Acts as the interface between Slack and the command handlers.
"""

import logging
from typing import List, Optional
from slack_sdk.web.async_client import AsyncWebClient
from slack_sdk.errors import SlackApiError

from config import Settings
from models.schemas import ChannelVisibilityState

logger = logging.getLogger(__name__)

class SlackGateway:
    """
    Gateway for all bot-token Slack interactions.
    """

    def __init__(self, settings: Settings, client: Optional[AsyncWebClient] = None):
        self.client = client or AsyncWebClient(token=settings.SLACK_BOT_TOKEN)

    async def get_user_is_admin(self, user_id: str) -> bool:
        """
        Check whether a user is a workspace admin.

        Args:
            user_id: Slack user ID

        Returns:
            The user's admin flag; False if the lookup fails
        """
        try:
            response = await self.client.users_info(user=user_id)
            return bool(response["user"].get("is_admin", False))
        except SlackApiError as e:
            logger.error(f"Slack API error looking up user {user_id}: {e.response['error']}")
            return False
        except Exception as e:
            logger.error(f"Error looking up user {user_id}: {e}")
            return False

    async def get_channel_visibility(self, channel_id: str) -> ChannelVisibilityState:
        """Fetch the channel's current visibility. Errors propagate."""
        response = await self.client.conversations_info(channel=channel_id)
        channel = response["channel"]
        return ChannelVisibilityState(
            channel_id=channel_id,
            is_private=bool(channel.get("is_private", False)),
        )

    async def post_ephemeral(self, channel_id: str, user_id: str, text: str):
        await self.client.chat_postEphemeral(channel=channel_id, user=user_id, text=text)
        logger.debug(f"Sent ephemeral message to {user_id} in {channel_id}")

    async def post_message(self, channel_id: str, text: str):
        await self.client.chat_postMessage(
            channel=channel_id,
            text=text,
            unfurl_links=False,
            unfurl_media=False
        )

    async def list_conversation_members(self, channel_id: str, batch_size: int = 200) -> List[str]:
        """
        List every member of a conversation, following pagination cursors.

        Args:
            channel_id: Slack channel ID
            batch_size: Number of members per API call

        Returns:
            Member user IDs
        """
        members: List[str] = []
        cursor = None

        while True:
            response = await self.client.conversations_members(
                channel=channel_id,
                limit=batch_size,
                cursor=cursor
            )
            members.extend(response.get("members", []))

            cursor = response.get("response_metadata", {}).get("next_cursor")
            if not cursor:
                break

        return members
