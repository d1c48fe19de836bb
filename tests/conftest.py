import json

import pytest

from kolide_relay.common import compute_hmac_sha256
from kolide_relay.config import RelayConfig

SECRET = "test-webhook-secret"


@pytest.fixture
def relay_config() -> RelayConfig:
    return RelayConfig(
        webhook_secret=SECRET,
        slack_webhook_url="https://hooks.slack.test/services/T000/B000/XXX",
        linear_api_key="lin_api_test",
        linear_team_id="team-123",
    )


@pytest.fixture
def issue_payload() -> dict:
    return {
        "event": "issues.new",
        "id": "abc123",
        "timestamp": "2024-01-01T00:00:00Z",
        "data": {"device_name": "MacBook-1", "user_name": "alice"},
    }


@pytest.fixture
def signed_request():
    """Return ``(body, headers)`` for a payload signed with the test secret."""

    def _signed(payload, secret: str = SECRET):
        body = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
        headers = {
            "Authorization": compute_hmac_sha256(body, secret),
            "Content-Type": "application/json",
        }
        return body, headers

    return _signed
