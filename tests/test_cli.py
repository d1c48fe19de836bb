import json

from click.testing import CliRunner

from kolide_relay import cli as cli_module
from kolide_relay.cli import build_sample_event, cli
from kolide_relay.common import compute_hmac_sha256, verify_signature


class FakeResponse:
    def __init__(self, status_code: int, text: str):
        self.status_code = status_code
        self.text = text
        self.ok = 200 <= status_code < 300


def test_config_masks_secrets(monkeypatch):
    monkeypatch.setenv("KOLIDE_WEBHOOK_SECRET", "supersecret")
    monkeypatch.delenv("LINEAR_API_KEY", raising=False)

    result = CliRunner().invoke(cli, ["config"])

    assert result.exit_code == 0
    assert "supersecret" not in result.output
    assert "***********" in result.output
    assert "Linear Tickets: disabled" in result.output


def test_sign_prints_signature(tmp_path):
    payload_file = tmp_path / "event.json"
    payload_file.write_bytes(b'{"event":"issues.new"}')

    result = CliRunner().invoke(cli, ["sign", str(payload_file), "--secret", "abc"])

    assert result.exit_code == 0
    assert result.output.strip() == compute_hmac_sha256(b'{"event":"issues.new"}', "abc")


def test_send_test_signs_request(monkeypatch):
    calls = []

    def fake_post(url, headers, data, timeout):
        calls.append((url, headers, data))
        return FakeResponse(200, "Event processed successfully")

    monkeypatch.setattr(cli_module.requests, "post", fake_post)

    result = CliRunner().invoke(
        cli, ["send-test", "http://relay.test/", "--event", "devices.created", "--secret", "abc"]
    )

    assert result.exit_code == 0
    url, headers, data = calls[0]
    assert url == "http://relay.test/"
    assert verify_signature(data, headers["Authorization"], "abc")
    assert json.loads(data)["event"] == "devices.created"


def test_send_test_fails_on_error_status(monkeypatch):
    monkeypatch.setattr(
        cli_module.requests, "post", lambda *a, **kw: FakeResponse(401, "Invalid signature")
    )

    result = CliRunner().invoke(cli, ["send-test", "--secret", "wrong"])

    assert result.exit_code == 1
    assert "401" in result.output


def test_sample_event_is_valid_envelope():
    from kolide_relay.models import is_valid_payload

    assert is_valid_payload(build_sample_event("issues.new"))
