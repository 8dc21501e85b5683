"""
Log Channel Reporter

Mirrors selected log lines into a Slack channel so operators can follow
the bot without shell access.
"""

import logging

from agents.slack_gateway import SlackGateway

logger = logging.getLogger(__name__)

LEVEL_EMOJI = {
    logging.DEBUG: ":mag:",
    logging.INFO: ":information_source:",
    logging.WARNING: ":warning:",
    logging.ERROR: ":x:",
}

class LogChannelReporter:
    def __init__(self, slack_gateway: SlackGateway, channel_id: str):
        self.slack = slack_gateway
        self.channel_id = channel_id

    @property
    def enabled(self) -> bool:
        return bool(self.channel_id)

    async def log(self, message: str, level: int = logging.INFO) -> bool:
        """Log locally and post to the log channel. Posting failures are only logged."""
        logger.log(level, message)
        if not self.enabled:
            return False

        try:
            await self.slack.post_message(self.channel_id, f"{LEVEL_EMOJI.get(level, '')} {message}".strip())
            return True
        except Exception as e:
            logger.error(f"Failed to mirror log line to {self.channel_id}: {e}")
            return False
