"""
Pydantic schemas for data validation and API contracts.
Defines data models for Slack payloads, command invocations and toggle results.
"""

from enum import Enum
from typing import Dict, Any, List, Optional, Union
from pydantic import BaseModel

class SlackEvent(BaseModel):
    """Schema for incoming Slack event envelopes"""
    token: Optional[str] = None
    team_id: Optional[str] = None
    api_app_id: Optional[str] = None
    event: Dict[str, Any] = {}
    type: str
    event_id: Optional[str] = None
    event_time: Optional[int] = None

    class Config:
        extra = "allow"

class SlackChallenge(BaseModel):
    """Schema for Slack URL verification challenge"""
    token: Optional[str] = None
    challenge: str
    type: str

class TeamJoinEvent(BaseModel):
    """A new member joined the workspace"""
    type: str = "team_join"
    user: Dict[str, Any] = {}

    class Config:
        extra = "allow"

class UnhandledEvent(BaseModel):
    """Any inner event type without a dedicated model"""
    type: str

    class Config:
        extra = "allow"

InnerEvent = Union[TeamJoinEvent, UnhandledEvent]

EVENT_MODELS = {
    "team_join": TeamJoinEvent,
}

def parse_inner_event(event: Dict[str, Any]) -> InnerEvent:
    """Narrow a raw inner event to its model by its ``type`` field."""
    model = EVENT_MODELS.get(event.get("type", ""), UnhandledEvent)
    return model(**event)

class SlackUserRef(BaseModel):
    id: str

    class Config:
        extra = "allow"

class BlockAction(BaseModel):
    """Single interactive element action"""
    action_id: str
    block_id: Optional[str] = None
    type: Optional[str] = None
    value: Optional[str] = None

    class Config:
        extra = "allow"

class BlockActionsPayload(BaseModel):
    """Schema for the interactivity ``payload`` form field"""
    type: str
    user: SlackUserRef
    actions: List[BlockAction] = []
    channel: Optional[Dict[str, Any]] = None
    response_url: Optional[str] = None
    trigger_id: Optional[str] = None

    class Config:
        extra = "allow"

class CommandInvocation(BaseModel):
    """One slash command invocation, discarded once handled"""
    command: str
    user_id: str
    channel_id: str
    team_id: Optional[str] = None
    text: str = ""
    trigger_id: Optional[str] = None
    response_url: Optional[str] = None

    class Config:
        frozen = True
        extra = "ignore"

class ChannelVisibilityState(BaseModel):
    """Current visibility of a channel, fetched fresh for every invocation"""
    channel_id: str
    is_private: bool

class AuthorizationReason(str, Enum):
    CHANNEL_MANAGER = "channel_manager"
    WORKSPACE_ADMIN = "workspace_admin"
    NOT_PERMITTED = "not_permitted"

class AuthorizationResult(BaseModel):
    """Outcome of the manager/admin permission check"""
    allowed: bool
    reason: AuthorizationReason

    @classmethod
    def evaluate(cls, user_id: str, manager_ids: List[str], is_admin: bool) -> "AuthorizationResult":
        if user_id in set(manager_ids):
            return cls(allowed=True, reason=AuthorizationReason.CHANNEL_MANAGER)
        if is_admin:
            return cls(allowed=True, reason=AuthorizationReason.WORKSPACE_ADMIN)
        return cls(allowed=False, reason=AuthorizationReason.NOT_PERMITTED)

class ConversionOutcome(str, Enum):
    """What the legacy API did with a conversion request"""
    CONVERTED = "converted"
    ALREADY_IN_STATE = "already_in_state"

class ToggleOutcome(str, Enum):
    """Final result of a handled toggle invocation"""
    DENIED = "denied"
    MADE_PUBLIC = "made_public"
    MADE_PRIVATE = "made_private"
    ALREADY_PUBLIC = "already_public"
    ALREADY_PRIVATE = "already_private"
    FAILED = "failed"
