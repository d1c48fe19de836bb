"""CLI for the Kolide webhook relay."""

import json
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path

import click
import requests
from rich.console import Console

from .common import compute_hmac_sha256
from .config import RelayConfig

console = Console()


def _mask(value: str) -> str:
    return '*' * len(value) if value else 'Not set'


def build_sample_event(event_type: str) -> dict:
    """Sample Kolide envelope used by ``send-test``."""
    return {
        "event": event_type,
        "id": str(uuid.uuid4()),
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "data": {
            "issue_name": "Sample Kolide check failure",
            "device_name": "MacBook-Test",
            "user_name": "test.user",
            "check_url": "https://app.kolide.com/checks",
        },
    }


@click.group()
def cli():
    """Kolide webhook relay CLI."""
    pass


@cli.command()
@click.option("--host", default=None, help="Host to bind to")
@click.option("--port", default=None, type=int, help="Port to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload")
def serve(host, port, reload):
    """Start the Kolide webhook relay server."""
    config = RelayConfig.from_env()
    host = host or config.host
    port = port or config.port
    try:
        console.print("🚀 Starting Kolide webhook relay server...")
        console.print(f"📡 Host: {host}")
        console.print(f"🔌 Port: {port}")
        console.print(f"🔄 Reload: {reload}")

        import uvicorn
        uvicorn.run(
            "kolide_relay.server:app",
            host=host,
            port=port,
            reload=reload,
            log_level="info"
        )

    except KeyboardInterrupt:
        console.print("⏹️  Server stopped by user")
    except Exception as e:
        console.print(f"❌ Server failed: {e}", style="red")
        sys.exit(1)


@cli.command()
def config():
    """Show current configuration."""
    try:
        config = RelayConfig.from_env()

        console.print("📋 Kolide Relay Configuration:")
        console.print(f"  Webhook Secret: {_mask(config.webhook_secret)}")
        console.print(f"  Slack Webhook URL: {_mask(config.slack_webhook_url)}")
        console.print(f"  Linear API Key: {_mask(config.linear_api_key)}")
        console.print(f"  Linear Team ID: {config.linear_team_id or 'Not set'}")
        console.print(f"  Linear API URL: {config.linear_api_url}")
        console.print(f"  Linear Tickets: {'enabled' if config.linear_enabled else 'disabled'}")
        console.print(f"  HTTP Timeout: {config.http_timeout}s")
        console.print(f"  Host: {config.host}")
        console.print(f"  Port: {config.port}")
        console.print(f"  Log Directory: {config.log_dir or 'Not set'}")
        console.print(f"  Log Payloads: {config.log_payloads}")

    except Exception as e:
        console.print(f"❌ Failed to load configuration: {e}", style="red")
        sys.exit(1)


@cli.command()
@click.argument("payload_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--secret", envvar="KOLIDE_WEBHOOK_SECRET", required=True, help="Webhook signing secret")
def sign(payload_file, secret):
    """Print the Authorization signature for a payload file."""
    body = payload_file.read_bytes()
    click.echo(compute_hmac_sha256(body, secret))


@cli.command("send-test")
@click.argument("url", default="http://localhost:8080/")
@click.option("--event", "event_type", default="issues.new", help="Kolide event type to send")
@click.option("--secret", envvar="KOLIDE_WEBHOOK_SECRET", required=True, help="Webhook signing secret")
@click.option("--timeout", default=10.0, help="Request timeout in seconds")
def send_test(url, event_type, secret, timeout):
    """Send a signed sample event to a running relay."""
    payload = build_sample_event(event_type)
    body = json.dumps(payload).encode("utf-8")
    signature = compute_hmac_sha256(body, secret)

    console.print(f"📤 Sending {event_type} ({payload['id']}) to {url}")
    try:
        response = requests.post(
            url,
            headers={
                "Authorization": signature,
                "X-Kolide-Webhook-Identifier": "kolide-relay-cli",
                "Content-Type": "application/json",
            },
            data=body,
            timeout=timeout,
        )
    except requests.exceptions.ConnectionError:
        console.print(f"❌ Could not connect to {url}. Is the relay running?", style="red")
        sys.exit(1)
    except requests.exceptions.RequestException as e:
        console.print(f"❌ Request failed: {e}", style="red")
        sys.exit(1)

    style = "green" if response.ok else "red"
    console.print(f"Response status: {response.status_code}", style=style)
    console.print(f"Response body: {response.text}")
    if not response.ok:
        sys.exit(1)


if __name__ == "__main__":
    cli()
