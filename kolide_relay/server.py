"""FastAPI server relaying Kolide webhooks to Slack and Linear."""

import logging
from typing import Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse

from . import __version__
from .common import (
    setup_logging,
    log_server_message,
    log_webhook_request,
    log_error,
    verify_signature,
)
from .config import RelayConfig
from .exceptions import (
    AuthError,
    ConfigurationError,
    RelayError,
    UnexpectedError,
)
from .linear import create_linear_ticket, create_ticket_draft, should_create_ticket
from .models import KolideEvent, is_known_event_type, load_event, parse_payload
from .slack import create_slack_message, send_to_slack

# Initialize FastAPI app
app = FastAPI(title="Kolide Relay", version=__version__)

# Load configuration
config = RelayConfig.from_env()

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "Authorization"
IDENTIFIER_HEADER = "X-Kolide-Webhook-Identifier"

# Non-POST methods get a plain-text 405 here or from the 405 handler
WEBHOOK_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@app.on_event("startup")
async def startup_event() -> None:
    """Handle application startup."""
    setup_logging(config.log_dir)
    log_server_message("Server starting up")
    if not config.webhook_secret:
        log_server_message("KOLIDE_WEBHOOK_SECRET is not set; all webhooks will fail")
    if not config.slack_webhook_url:
        log_server_message("SLACK_WEBHOOK_URL is not set; all webhooks will fail")
    log_server_message(f"Linear tickets: {'enabled' if config.linear_enabled else 'disabled'}")
    log_server_message("Server ready")


@app.on_event("shutdown")
async def shutdown_event() -> None:
    """Handle application shutdown."""
    log_server_message("Server shutting down")


@app.exception_handler(405)
async def method_not_allowed_handler(request: Request, exc: HTTPException) -> PlainTextResponse:
    """Handle 405 errors for methods the router does not match."""
    log_server_message(f"405 Method Not Allowed: {request.method} {request.url.path}")
    return PlainTextResponse("Method not allowed", status_code=405)


@app.get("/health")
async def health_check() -> Dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "kolide_relay"}


def authenticate_and_load(
    body: bytes,
    signature: str,
    cfg: RelayConfig,
    webhook_identifier: Optional[str] = None,
) -> KolideEvent:
    """Verify the signature over the raw body, then parse and validate it."""
    if not cfg.webhook_secret:
        raise ConfigurationError("KOLIDE_WEBHOOK_SECRET is not configured")

    if not verify_signature(body, signature, cfg.webhook_secret):
        raise AuthError(f"Invalid signature received (identifier={webhook_identifier})")

    payload = parse_payload(body)
    if cfg.log_payloads:
        log_webhook_request(payload, cfg.log_dir, webhook_identifier)

    return load_event(payload)


async def relay_event(event: KolideEvent, cfg: RelayConfig) -> None:
    """Forward an event to Slack, then to Linear when the event type calls for it."""
    if not cfg.slack_webhook_url:
        raise ConfigurationError("SLACK_WEBHOOK_URL is not configured")

    message = create_slack_message(event)
    await send_to_slack(cfg.slack_webhook_url, message, timeout=cfg.http_timeout)
    log_server_message(f"Successfully forwarded event {event.id} to Slack")

    if not should_create_ticket(event.event):
        return
    if not cfg.linear_enabled:
        log_server_message(f"Linear not configured; skipping ticket for {event.id}")
        return

    draft = create_ticket_draft(event)
    issue = await create_linear_ticket(
        cfg.linear_api_key,
        cfg.linear_team_id,
        draft,
        api_url=cfg.linear_api_url,
        timeout=cfg.http_timeout,
    )
    log_server_message(f"Created Linear ticket {issue.identifier} for event {event.id}")


@app.api_route("/", methods=WEBHOOK_METHODS)
async def kolide_webhook(request: Request) -> PlainTextResponse:
    """Handle Kolide webhook requests with HMAC signature validation."""
    if request.method != "POST":
        return PlainTextResponse("Method not allowed", status_code=405)

    webhook_identifier = request.headers.get(IDENTIFIER_HEADER)

    try:
        signature = request.headers.get(SIGNATURE_HEADER)
        if not signature:
            raise AuthError(
                f"Missing {SIGNATURE_HEADER} header",
                message="Missing Authorization header",
            )

        body = await request.body()
        event = authenticate_and_load(body, signature, config, webhook_identifier)

        log_server_message(f"Received Kolide event: {event.event} ({event.id})")
        if not is_known_event_type(event.event):
            log_server_message(f"Unrecognized event type {event.event!r}; relaying as-is")

        await relay_event(event, config)

    except RelayError as e:
        log_error(f"{type(e).__name__}: {e.detail}", config.log_dir)
        return PlainTextResponse(e.message, status_code=e.status_code)
    except Exception as e:
        logger.exception("Error processing webhook")
        error = UnexpectedError(f"Error processing webhook: {e}")
        log_error(error.detail, config.log_dir)
        return PlainTextResponse(error.message, status_code=error.status_code)

    return PlainTextResponse("Event processed successfully", status_code=200)


if __name__ == "__main__":
    import uvicorn

    # Run the server
    uvicorn.run(
        "kolide_relay.server:app",
        host=config.host,
        port=config.port,
        reload=False,
        log_level="info"
    )
