"""
Command Router - Maps slash commands, interactive actions and events to handlers.
Names without a registered handler are acknowledged upstream and logged here.
"""

import logging
from typing import Awaitable, Callable, Dict

from agents.visibility_agent import VisibilityAgent
from models.schemas import (
    BlockAction,
    BlockActionsPayload,
    CommandInvocation,
    InnerEvent,
    SlackEvent,
    parse_inner_event,
)

logger = logging.getLogger(__name__)

TOGGLE_VISIBILITY_COMMAND = "/toggle-visibility"

CommandHandler = Callable[[CommandInvocation], Awaitable[object]]
ActionHandler = Callable[[BlockActionsPayload, BlockAction], Awaitable[object]]
EventHandler = Callable[[InnerEvent], Awaitable[object]]

class CommandRouter:
    """Explicit name-to-handler dispatch for everything Slack sends us."""

    def __init__(self, visibility_agent: VisibilityAgent):
        self.commands: Dict[str, CommandHandler] = {
            TOGGLE_VISIBILITY_COMMAND: visibility_agent.toggle_visibility,
        }
        self.actions: Dict[str, ActionHandler] = {
            "initial": self._noop_action,
        }
        self.events: Dict[str, EventHandler] = {
            "team_join": self._noop_event,
        }

    async def dispatch_command(self, invocation: CommandInvocation) -> bool:
        """
        Run the handler registered for a slash command.

        Returns:
            True if a handler ran, False for unknown commands or handler errors
        """
        handler = self.commands.get(invocation.command)
        if handler is None:
            logger.warning(f"No handler for command {invocation.command} from {invocation.user_id}")
            return False
        try:
            await handler(invocation)
            return True
        except Exception as e:
            logger.error(f"Error in command handler: {e}")
            return False

    async def dispatch_action(self, payload: BlockActionsPayload) -> int:
        """Run handlers for every action in an interactivity payload; returns how many ran."""
        handled = 0
        for action in payload.actions:
            handler = self.actions.get(action.action_id)
            if handler is None:
                logger.warning(f"No handler for action {action.action_id} from {payload.user.id}")
                continue
            try:
                await handler(payload, action)
                handled += 1
            except Exception as e:
                logger.error(f"Error in action handler: {e}")
        return handled

    async def dispatch_event(self, envelope: SlackEvent) -> bool:
        try:
            event = parse_inner_event(envelope.event)
            handler = self.events.get(event.type)
            if handler is None:
                logger.debug(f"Ignoring event type {event.type}")
                return False
            await handler(event)
            return True
        except Exception as e:
            logger.error(f"Error in event handler: {e}")
            return False

    async def _noop_action(self, payload: BlockActionsPayload, action: BlockAction):
        logger.debug(f"Action {action.action_id} from {payload.user.id} has no behaviour yet")

    async def _noop_event(self, event: InnerEvent):
        logger.debug(f"Event {event.type} has no behaviour yet")
