"""Slack message building and delivery through an incoming webhook."""

from __future__ import annotations

import logging

import httpx

from .exceptions import ForwardingError
from .formatting import (
    SLACK_LINK_FORMAT,
    extract_subject,
    format_event_title,
    format_timestamp,
    get_event_emoji,
    humanize_fields,
)
from .models import (
    ContextBlock,
    HeaderBlock,
    KolideEvent,
    MrkdwnTextObject,
    PlainTextObject,
    SectionBlock,
    SlackMessage,
)

logger = logging.getLogger(__name__)

NO_DATA_TEXT = "_No additional data_"


def format_data_fields(event: KolideEvent) -> str:
    """Build the section text: the event subject, then one line per field."""
    lines = [
        f"*{label}:* {rendered}"
        for label, rendered, _ in humanize_fields(event.data, SLACK_LINK_FORMAT)
    ]
    if not lines:
        return NO_DATA_TEXT

    subject = extract_subject(event.data)
    if subject:
        lines.insert(0, subject)
    return "\n".join(lines)


def create_slack_message(event: KolideEvent) -> SlackMessage:
    """Create a Block Kit message for a Kolide event."""
    emoji = get_event_emoji(event.event)
    title = format_event_title(event.event)
    timestamp = format_timestamp(event.timestamp, "medium")

    return SlackMessage(
        blocks=[
            HeaderBlock(text=PlainTextObject(text=f"{emoji} {title}")),
            SectionBlock(text=MrkdwnTextObject(text=format_data_fields(event))),
            ContextBlock(
                elements=[
                    MrkdwnTextObject(text=f"Event ID: `{event.id}` | Time: {timestamp}")
                ]
            ),
        ]
    )


async def _post_message(client: httpx.AsyncClient, webhook_url: str, message: SlackMessage) -> None:
    try:
        resp = await client.post(
            webhook_url,
            headers={"Content-Type": "application/json"},
            json=message.model_dump(),
        )
    except httpx.HTTPError as e:
        raise ForwardingError(f"Slack request failed: {e}") from e

    if not resp.is_success:
        raise ForwardingError(f"Slack API error: {resp.status_code} - {resp.text}")


async def send_to_slack(
    webhook_url: str,
    message: SlackMessage,
    client: httpx.AsyncClient | None = None,
    timeout: float = 10.0,
) -> None:
    """POST a message to a Slack incoming webhook.

    Raises:
        ForwardingError: on a transport failure or a non-2xx response.
    """
    if client is not None:
        await _post_message(client, webhook_url, message)
    else:
        async with httpx.AsyncClient(timeout=timeout) as owned_client:
            await _post_message(owned_client, webhook_url, message)
    logger.info("Message delivered to Slack")
