"""
Configuration settings for the visibility toggle bot.
Manages environment variables and system configuration.
"""

from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Slack Configuration
    SLACK_BOT_TOKEN: str = ""
    SLACK_SIGNING_SECRET: str = ""
    # App-level token, only needed for Socket Mode; requests arrive over HTTP here
    SLACK_APP_TOKEN: str = ""

    # Legacy browser credentials used by the visibility endpoints
    SLACK_BROWSER_TOKEN: str = ""
    SLACK_SESSION_COOKIE: str = ""
    SLACK_API_BASE_URL: str = "https://slack.com/api"

    # Channel that receives mirrored log lines (empty disables it)
    SLACK_LOG_CHANNEL: str = ""

    # Server Configuration
    PORT: int = 3000
    ENVIRONMENT: str = "development"
    INDEX_REDIRECT_URL: str = "https://github.com/jaspermayone/slacky"
    LOG_LEVEL: str = "INFO"

    # Request Configuration
    REQUEST_TIMEOUT: int = 30
    SERIALIZE_CHANNEL_TOGGLES: bool = True

    @property
    def legacy_credentials_configured(self) -> bool:
        return bool(self.SLACK_BROWSER_TOKEN and self.SLACK_SESSION_COOKIE)

    class Config:
        env_file = ".env"
        extra = "ignore"
        frozen = True

REQUIRED_VARS: List[str] = [
    "SLACK_BOT_TOKEN",
    "SLACK_SIGNING_SECRET",
    "SLACK_BROWSER_TOKEN",
    "SLACK_SESSION_COOKIE",
]

def load_settings() -> Settings:
    """Build the process-wide settings once at startup."""
    return Settings()

def validate_config(settings: Settings):
    """Validate that all required configuration is present"""
    missing_vars = []
    for var in REQUIRED_VARS:
        if not getattr(settings, var):
            missing_vars.append(var)

    if missing_vars:
        raise ValueError(f"Missing required environment variables: {', '.join(missing_vars)}")
