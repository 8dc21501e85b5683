"""
Main FastAPI application entry point for the visibility toggle bot.
Receives Slack slash commands, interactivity payloads and events,
acknowledges them immediately and handles them in background tasks.
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, HTTPException, Request, BackgroundTasks
from fastapi.responses import PlainTextResponse, RedirectResponse, Response
import httpx
from pydantic import ValidationError
from slack_sdk.signature import SignatureVerifier
from slack_sdk.web.async_client import AsyncWebClient

from agents.command_router import CommandRouter
from agents.slack_gateway import SlackGateway
from agents.visibility_agent import VisibilityAgent
from config import Settings
from models.schemas import BlockActionsPayload, CommandInvocation, SlackChallenge, SlackEvent
from services.channel_locks import ChannelLockRegistry
from services.legacy_visibility import LegacyVisibilityClient
from services.log_channel import LogChannelReporter
from utils.template_loader import TemplateLoader

logger = logging.getLogger(__name__)

SERVICE_NAME = "slacky"

def create_app(
    settings: Settings,
    slack_client: Optional[AsyncWebClient] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    templates: Optional[TemplateLoader] = None,
) -> FastAPI:
    """
    Build the application with every collaborator wired from one settings object.

    Args:
        settings: Immutable process configuration
        slack_client: Slack Web API client override
        http_client: HTTP client override for the legacy visibility API
        templates: Message template loader override

    Returns:
        Configured FastAPI application
    """
    templates = templates or TemplateLoader()
    slack_gateway = SlackGateway(settings, client=slack_client)
    legacy_api = LegacyVisibilityClient(settings, http_client=http_client)
    channel_locks = ChannelLockRegistry() if settings.SERIALIZE_CHANNEL_TOGGLES else None
    visibility_agent = VisibilityAgent(slack_gateway, legacy_api, templates, channel_locks)
    router = CommandRouter(visibility_agent)
    log_channel = LogChannelReporter(slack_gateway, settings.SLACK_LOG_CHANNEL)
    verifier = SignatureVerifier(settings.SLACK_SIGNING_SECRET)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await log_channel.log(templates.render("app.startup", environment=settings.ENVIRONMENT))
        yield
        await legacy_api.close()
        logger.info("Legacy visibility client closed")

    app = FastAPI(
        title="Slacky",
        description="Slack bot that toggles channel visibility for channel managers and admins",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.router = router
    app.state.visibility_agent = visibility_agent

    async def verified_body(request: Request) -> bytes:
        body = await request.body()
        try:
            valid = verifier.is_valid(
                body=body,
                timestamp=request.headers.get("X-Slack-Request-Timestamp"),
                signature=request.headers.get("X-Slack-Signature"),
            )
        except ValueError:
            valid = False
        if not valid:
            logger.warning(f"Rejected request to {request.url.path} with invalid Slack signature")
            raise HTTPException(status_code=401, detail="Invalid request signature")
        return body

    @app.get("/")
    async def index():
        """Index endpoint - redirects to the project page"""
        logger.info("Index Endpoint Hit")
        return RedirectResponse(settings.INDEX_REDIRECT_URL, status_code=302)

    @app.get("/ping")
    @app.get("/up")
    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "service": SERVICE_NAME}

    @app.post("/slack/commands")
    async def slack_commands(request: Request, background_tasks: BackgroundTasks):
        """Acknowledge a slash command and handle it after the response is sent."""
        await verified_body(request)
        form = await request.form()
        try:
            invocation = CommandInvocation(**dict(form))
        except ValidationError as e:
            logger.error(f"Malformed slash command payload: {e}")
            raise HTTPException(status_code=400, detail="Malformed slash command")

        logger.info(f"Received {invocation.command} from {invocation.user_id} in {invocation.channel_id}")
        background_tasks.add_task(router.dispatch_command, invocation)
        return Response(status_code=200)

    @app.post("/slack/actions")
    async def slack_actions(request: Request, background_tasks: BackgroundTasks):
        """Acknowledge an interactivity payload and handle its actions."""
        await verified_body(request)
        form = await request.form()
        try:
            payload = BlockActionsPayload(**json.loads(form.get("payload", "")))
        except (ValueError, TypeError) as e:
            logger.error(f"Malformed interactivity payload: {e}")
            raise HTTPException(status_code=400, detail="Malformed interactivity payload")

        background_tasks.add_task(router.dispatch_action, payload)
        return Response(status_code=200)

    @app.post("/slack/events")
    async def slack_events(request: Request, background_tasks: BackgroundTasks):
        """Handle Slack URL verification and event callbacks."""
        body = await verified_body(request)
        try:
            data = json.loads(body)
        except ValueError:
            raise HTTPException(status_code=400, detail="Malformed event body")
        if not isinstance(data, dict):
            raise HTTPException(status_code=400, detail="Malformed event body")

        if data.get("type") == "url_verification":
            try:
                challenge = SlackChallenge(**data)
            except ValidationError:
                raise HTTPException(status_code=400, detail="Missing challenge parameter")
            return PlainTextResponse(challenge.challenge)

        if data.get("type") == "event_callback":
            try:
                envelope = SlackEvent(**data)
            except ValidationError as e:
                logger.error(f"Malformed event callback: {e}")
                raise HTTPException(status_code=400, detail="Malformed event callback")
            background_tasks.add_task(router.dispatch_event, envelope)
            return {"status": "accepted"}

        return {"status": "ignored"}

    return app
