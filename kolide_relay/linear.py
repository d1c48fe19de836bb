"""Linear ticket creation for Kolide events that need follow-up."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

import httpx
from pydantic import ValidationError

from .config import DEFAULT_LINEAR_API_URL
from .exceptions import ForwardingError
from .formatting import (
    MARKDOWN_LINK_FORMAT,
    extract_subject,
    format_event_title,
    format_timestamp,
    humanize_fields,
)
from .models import KolideEvent, KolideEventType, LinearIssue, LinearPriority, TicketDraft

logger = logging.getLogger(__name__)

TICKET_EVENTS = frozenset({
    KolideEventType.ISSUES_NEW.value,
    KolideEventType.REQUESTS_ISSUE_EXEMPTION.value,
    KolideEventType.REQUESTS_REGISTRATION.value,
})

ISSUE_CREATE_MUTATION = """
mutation IssueCreate($input: IssueCreateInput!) {
  issueCreate(input: $input) {
    success
    issue {
      id
      identifier
      title
      url
    }
  }
}
"""


def should_create_ticket(event_type: str) -> bool:
    """Return True if the event type warrants a Linear ticket."""
    return event_type in TICKET_EVENTS


def create_ticket_title(event: KolideEvent) -> str:
    title = format_event_title(event.event)
    subject = extract_subject(event.data)
    if subject:
        return f"{title} - {subject}"
    return f"{title} - {format_timestamp(event.timestamp, 'short')}"


def create_ticket_description(event: KolideEvent) -> str:
    """Markdown description listing every non-null event field."""
    lines: List[str] = [
        f"# Kolide Event: {event.event}",
        "",
        f"**Event ID:** {event.id}",
        f"**Timestamp:** {format_timestamp(event.timestamp, 'full')}",
        "",
        "## Event Data",
        "",
    ]

    for label, rendered, raw in humanize_fields(event.data, MARKDOWN_LINK_FORMAT):
        if isinstance(raw, (dict, list)):
            lines.append(f"**{label}:**")
            lines.append("```json")
            lines.append(json.dumps(raw, indent=2, ensure_ascii=False))
            lines.append("```")
        else:
            lines.append(f"**{label}:** {rendered}")

    return "\n".join(lines)


def create_ticket_draft(event: KolideEvent) -> TicketDraft:
    return TicketDraft(
        title=create_ticket_title(event),
        description=create_ticket_description(event),
        priority=LinearPriority.HIGH,
    )


def build_issue_create_request(team_id: str, draft: TicketDraft) -> Dict[str, Any]:
    """GraphQL request body for the ``issueCreate`` mutation."""
    return {
        "query": ISSUE_CREATE_MUTATION,
        "variables": {
            "input": {
                "teamId": team_id,
                "title": draft.title,
                "description": draft.description,
                "priority": int(draft.priority),
            }
        },
    }


def _parse_issue_create_response(resp: httpx.Response) -> LinearIssue:
    if not resp.is_success:
        raise ForwardingError(f"Linear API error: {resp.status_code} - {resp.text}")

    try:
        result = resp.json()
    except ValueError as e:
        raise ForwardingError(f"Linear API returned invalid JSON: {resp.text}") from e

    if not isinstance(result, dict):
        raise ForwardingError(f"Unexpected Linear API response: {resp.text}")
    if result.get("errors"):
        raise ForwardingError(f"Linear GraphQL error: {json.dumps(result['errors'])}")

    data = result.get("data") or {}
    if not isinstance(data, dict):
        raise ForwardingError(f"Unexpected Linear API response: {resp.text}")
    issue_create = data.get("issueCreate") or {}
    if not isinstance(issue_create, dict):
        raise ForwardingError(f"Unexpected Linear API response: {resp.text}")
    if not issue_create.get("success") or not issue_create.get("issue"):
        raise ForwardingError("Linear ticket creation failed")

    try:
        return LinearIssue.model_validate(issue_create["issue"])
    except ValidationError as e:
        raise ForwardingError(f"Unexpected Linear issue payload: {issue_create['issue']}") from e


async def _post_issue(
    client: httpx.AsyncClient, api_url: str, api_key: str, body: Dict[str, Any]
) -> LinearIssue:
    try:
        resp = await client.post(
            api_url,
            headers={"Content-Type": "application/json", "Authorization": api_key},
            json=body,
        )
    except httpx.HTTPError as e:
        raise ForwardingError(f"Linear request failed: {e}") from e
    return _parse_issue_create_response(resp)


async def create_linear_ticket(
    api_key: str,
    team_id: str,
    draft: TicketDraft,
    client: httpx.AsyncClient | None = None,
    api_url: str = DEFAULT_LINEAR_API_URL,
    timeout: float = 10.0,
) -> LinearIssue:
    """Create a Linear issue from a ticket draft.

    Raises:
        ForwardingError: on a transport failure, a non-2xx response, GraphQL
            errors, or ``issueCreate.success`` being false.
    """
    body = build_issue_create_request(team_id, draft)
    if client is not None:
        issue = await _post_issue(client, api_url, api_key, body)
    else:
        async with httpx.AsyncClient(timeout=timeout) as owned_client:
            issue = await _post_issue(owned_client, api_url, api_key, body)

    logger.info(f"Linear ticket created: {issue.identifier} ({issue.url})")
    return issue
