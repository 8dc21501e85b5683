"""
Visibility Agent - Handles /toggle-visibility.
Authorizes the invoking user against channel managers and workspace admins,
then flips the channel between public and private through the legacy API.
"""

import logging
from contextlib import nullcontext
from typing import Optional

from slack_sdk.errors import SlackApiError

from agents.slack_gateway import SlackGateway
from models.schemas import (
    AuthorizationResult,
    CommandInvocation,
    ConversionOutcome,
    ToggleOutcome,
)
from services.channel_locks import ChannelLockRegistry
from services.legacy_visibility import LegacyVisibilityClient, LegacyVisibilityError
from utils.template_loader import TemplateLoader

logger = logging.getLogger(__name__)

class VisibilityAgent:
    """
    Toggles channel visibility on behalf of channel managers and admins.
    """

    def __init__(
        self,
        slack_gateway: SlackGateway,
        legacy_api: LegacyVisibilityClient,
        templates: TemplateLoader,
        channel_locks: Optional[ChannelLockRegistry] = None,
    ):
        self.slack = slack_gateway
        self.legacy_api = legacy_api
        self.templates = templates
        self.channel_locks = channel_locks

    async def authorize(self, user_id: str, channel_id: str) -> AuthorizationResult:
        is_admin = await self.slack.get_user_is_admin(user_id)
        manager_ids = await self.legacy_api.list_channel_managers(channel_id)
        return AuthorizationResult.evaluate(user_id, manager_ids, is_admin)

    async def toggle_visibility(self, invocation: CommandInvocation) -> ToggleOutcome:
        """
        Handle one toggle invocation end to end.

        Args:
            invocation: The slash command that triggered the toggle

        Returns:
            What happened; errors are logged and reported as FAILED
        """
        channel_id = invocation.channel_id
        lock = self.channel_locks.hold(channel_id) if self.channel_locks else nullcontext()

        try:
            async with lock:
                return await self._toggle(invocation)
        except SlackApiError as e:
            logger.error(f"Slack API error toggling {channel_id} for {invocation.user_id}: {e.response['error']}")
        except LegacyVisibilityError as e:
            logger.error(f"Legacy visibility API error toggling {channel_id} for {invocation.user_id}: {e}")
        except Exception as e:
            logger.error(f"Error toggling visibility of {channel_id} for {invocation.user_id}: {e}")
        return ToggleOutcome.FAILED

    async def _toggle(self, invocation: CommandInvocation) -> ToggleOutcome:
        user_id = invocation.user_id
        channel_id = invocation.channel_id

        authorization = await self.authorize(user_id, channel_id)
        if not authorization.allowed:
            logger.info(f"Denied visibility toggle of {channel_id} for {user_id}")
            await self._notify(invocation, "toggle.restricted")
            return ToggleOutcome.DENIED

        logger.info(f"Authorized {user_id} for {channel_id} as {authorization.reason.value}")

        visibility = await self.slack.get_channel_visibility(channel_id)

        if visibility.is_private:
            await self._notify(invocation, "toggle.converting_public")
            outcome = await self.legacy_api.convert_to_public(channel_id)
            if outcome == ConversionOutcome.ALREADY_IN_STATE:
                await self._notify(invocation, "toggle.already_public")
                return ToggleOutcome.ALREADY_PUBLIC
            await self._notify(invocation, "toggle.now_public")
            return ToggleOutcome.MADE_PUBLIC

        await self._notify(invocation, "toggle.converting_private")
        outcome = await self.legacy_api.convert_to_private(channel_id)
        if outcome == ConversionOutcome.ALREADY_IN_STATE:
            await self._notify(invocation, "toggle.already_private")
            return ToggleOutcome.ALREADY_PRIVATE
        await self._notify(invocation, "toggle.now_private")
        return ToggleOutcome.MADE_PRIVATE

    async def _notify(self, invocation: CommandInvocation, template_key: str):
        text = self.templates.render(template_key, channel_id=invocation.channel_id)
        await self.slack.post_ephemeral(invocation.channel_id, invocation.user_id, text)
