"""Tests for Linear ticket drafting and creation."""

import asyncio
import json

import httpx
import pytest

from kolide_relay.exceptions import ForwardingError
from kolide_relay.linear import (
    ISSUE_CREATE_MUTATION,
    build_issue_create_request,
    create_linear_ticket,
    create_ticket_draft,
    should_create_ticket,
)
from kolide_relay.models import KolideEvent, LinearPriority, TicketDraft

API_URL = "https://linear.test/graphql"


def make_event(**overrides) -> KolideEvent:
    payload = {
        "event": "issues.new",
        "id": "abc123",
        "timestamp": "2024-01-01T00:00:00Z",
        "data": {"device_name": "MacBook-1", "user_name": "alice"},
    }
    payload.update(overrides)
    return KolideEvent.model_validate(payload)


class TestGating:
    @pytest.mark.parametrize(
        "event", ["issues.new", "requests.issue_exemption", "requests.registration"]
    )
    def test_ticket_events(self, event):
        assert should_create_ticket(event)

    @pytest.mark.parametrize(
        "event", ["devices.created", "issues.resolved", "issues.new.extra", "unknown.event", ""]
    )
    def test_other_events_skip(self, event):
        assert not should_create_ticket(event)


class TestDraft:
    def test_title_with_device_and_user(self):
        draft = create_ticket_draft(make_event())
        assert draft.title == "Issues New - Device: MacBook-1 - User: alice"
        assert draft.priority == LinearPriority.HIGH

    def test_title_prefers_issue_name(self):
        event = make_event(data={"issue_name": "Firewall disabled", "hostname": "mbp"})
        assert create_ticket_draft(event).title == "Issues New - Firewall disabled - Device: mbp"

    def test_title_falls_back_to_short_date(self):
        event = make_event(event="requests.registration", data={"check_id": 5})
        assert create_ticket_draft(event).title == "Requests Registration - 1/1/24, 12:00 AM"

    def test_description(self):
        event = make_event(
            data={
                "device_name": "MacBook-1",
                "ignored": None,
                "check_url": "https://app.kolide.com/c/1",
                "failure": {"os": "macOS", "checks": [1, 2]},
            }
        )
        description = create_ticket_draft(event).description
        lines = description.splitlines()

        assert lines[0] == "# Kolide Event: issues.new"
        assert "**Event ID:** abc123" in lines
        assert "**Timestamp:** Monday, January 1, 2024 at 12:00:00 AM UTC" in lines
        assert "## Event Data" in lines
        assert "**Device Name:** MacBook-1" in lines
        assert "**Check Url:** [https://app.kolide.com/c/1](https://app.kolide.com/c/1)" in lines
        assert "Ignored" not in description

        start = lines.index("**Failure:**")
        assert lines[start + 1] == "```json"
        end = lines.index("```", start + 2)
        assert json.loads("\n".join(lines[start + 2:end])) == {"os": "macOS", "checks": [1, 2]}

    def test_request_body(self):
        draft = TicketDraft(title="T", description="D")
        body = build_issue_create_request("team-1", draft)
        assert body["query"] == ISSUE_CREATE_MUTATION
        assert body["variables"] == {
            "input": {"teamId": "team-1", "title": "T", "description": "D", "priority": 2}
        }


def _run_create(handler, draft=None):
    draft = draft or TicketDraft(title="T", description="D")

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await create_linear_ticket(
                "lin_api_key", "team-1", draft, client=client, api_url=API_URL
            )

    return asyncio.run(run())


def _success(issue=None):
    issue = issue or {
        "id": "uuid-1",
        "identifier": "SEC-42",
        "title": "T",
        "url": "https://linear.app/acme/issue/SEC-42",
    }
    return httpx.Response(200, json={"data": {"issueCreate": {"success": True, "issue": issue}}})


class TestCreateTicket:
    def test_posts_graphql_mutation(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["authorization"] = request.headers["authorization"]
            seen["content_type"] = request.headers["content-type"]
            seen["body"] = json.loads(request.content)
            return _success()

        issue = _run_create(handler)

        assert issue.identifier == "SEC-42"
        assert seen["url"] == API_URL
        assert seen["authorization"] == "lin_api_key"
        assert seen["content_type"] == "application/json"
        assert "issueCreate" in seen["body"]["query"]
        assert seen["body"]["variables"]["input"]["priority"] == 2

    def test_http_error(self):
        def handler(request):
            return httpx.Response(401, text="Authentication required")

        with pytest.raises(ForwardingError) as exc_info:
            _run_create(handler)
        assert "401" in exc_info.value.detail
        assert "Authentication required" in exc_info.value.detail

    def test_graphql_errors(self):
        def handler(request):
            return httpx.Response(200, json={"errors": [{"message": "teamId invalid"}]})

        with pytest.raises(ForwardingError) as exc_info:
            _run_create(handler)
        assert "teamId invalid" in exc_info.value.detail

    def test_success_false(self):
        def handler(request):
            return httpx.Response(200, json={"data": {"issueCreate": {"success": False}}})

        with pytest.raises(ForwardingError, match="creation failed"):
            _run_create(handler)

    def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, text="<html>oops</html>")

        with pytest.raises(ForwardingError):
            _run_create(handler)

    @pytest.mark.parametrize(
        "body", [{"data": {"issueCreate": "yes"}}, {"data": "x"}, ["not", "an", "object"]]
    )
    def test_unexpected_response_shape(self, body):
        def handler(request):
            return httpx.Response(200, json=body)

        with pytest.raises(ForwardingError, match="Unexpected Linear API response") as exc_info:
            _run_create(handler)
        assert httpx.Response(200, json=body).text in exc_info.value.detail

    def test_transport_error(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(ForwardingError, match="timed out"):
            _run_create(handler)
