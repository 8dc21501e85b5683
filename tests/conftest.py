"""Shared fixtures: settings, a mocked Slack client and a stubbed legacy API."""

import asyncio
from typing import Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock
from urllib.parse import parse_qs

import httpx
import pytest

from agents.slack_gateway import SlackGateway
from agents.visibility_agent import VisibilityAgent
from config import Settings
from services.channel_locks import ChannelLockRegistry
from services.legacy_visibility import (
    CONVERT_TO_PRIVATE_METHOD,
    CONVERT_TO_PUBLIC_METHOD,
    LIST_ASSIGNMENTS_METHOD,
    LegacyVisibilityClient,
)
from utils.template_loader import TemplateLoader

CHANNEL = "C0123"
USER = "U0INVOKER"


class LegacyApiStub:
    """httpx MockTransport handler that plays the legacy endpoints."""

    def __init__(self, managers: Optional[List[str]] = None, is_private: bool = False):
        self.managers = managers or []
        self.is_private = is_private
        self.overrides: Dict[str, dict] = {}
        self.status_codes: Dict[str, int] = {}
        self.convert_delay = 0.0
        self.requests: List[tuple] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        method = request.url.path.rsplit("/", 1)[-1]
        form = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
        self.requests.append((method, form, request.headers.get("cookie")))

        if method in self.status_codes:
            return httpx.Response(self.status_codes[method], text="upstream trouble")
        if method in self.overrides:
            return httpx.Response(200, json=self.overrides[method])

        if method == LIST_ASSIGNMENTS_METHOD:
            assignments = [{"role_id": "Rl0A", "users": self.managers}] if self.managers else []
            return httpx.Response(200, json={"ok": True, "role_assignments": assignments})

        if method in (CONVERT_TO_PUBLIC_METHOD, CONVERT_TO_PRIVATE_METHOD):
            if self.convert_delay:
                await asyncio.sleep(self.convert_delay)
            want_private = method == CONVERT_TO_PRIVATE_METHOD
            if self.is_private == want_private:
                error = "already_private" if want_private else "already_public"
                return httpx.Response(200, json={"ok": False, "error": error})
            self.is_private = want_private
            return httpx.Response(200, json={"ok": True})

        return httpx.Response(404, json={"ok": False, "error": "unknown_method"})

    def calls(self, method: str) -> List[dict]:
        return [form for m, form, _ in self.requests if m == method]


@pytest.fixture
def settings():
    return Settings(
        SLACK_BOT_TOKEN="xoxb-test",
        SLACK_SIGNING_SECRET="signing-secret",
        SLACK_BROWSER_TOKEN="xoxc-browser",
        SLACK_SESSION_COOKIE="session-cookie",
        SLACK_API_BASE_URL="https://slack.test/api",
        ENVIRONMENT="test",
    )


@pytest.fixture
def legacy_stub():
    return LegacyApiStub()


@pytest.fixture
def http_client(legacy_stub):
    return httpx.AsyncClient(transport=httpx.MockTransport(legacy_stub))


@pytest.fixture
def slack_client(legacy_stub):
    """AsyncWebClient stand-in; channel visibility follows the legacy stub."""
    client = MagicMock()
    client.users_info = AsyncMock(return_value={"ok": True, "user": {"id": USER, "is_admin": False}})

    async def conversations_info(channel):
        return {"ok": True, "channel": {"id": channel, "is_private": legacy_stub.is_private}}

    client.conversations_info = AsyncMock(side_effect=conversations_info)
    client.chat_postEphemeral = AsyncMock(return_value={"ok": True})
    client.chat_postMessage = AsyncMock(return_value={"ok": True})
    client.conversations_members = AsyncMock(return_value={"ok": True, "members": []})
    return client


@pytest.fixture
def templates():
    return TemplateLoader()


@pytest.fixture
def gateway(settings, slack_client):
    return SlackGateway(settings, client=slack_client)


@pytest.fixture
def legacy_api(settings, http_client):
    return LegacyVisibilityClient(settings, http_client=http_client)


@pytest.fixture
def agent(gateway, legacy_api, templates):
    return VisibilityAgent(gateway, legacy_api, templates, ChannelLockRegistry())


def ephemeral_texts(slack_client) -> List[str]:
    return [c.kwargs["text"] for c in slack_client.chat_postEphemeral.await_args_list]
