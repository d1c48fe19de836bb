"""Configuration for the Kolide webhook relay."""

import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_LINEAR_API_URL = "https://api.linear.app/graphql"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class RelayConfig:
    """Configuration for the Kolide webhook relay."""

    # Webhook settings
    webhook_secret: str = ""

    # Slack settings
    slack_webhook_url: str = ""

    # Linear settings (ticket creation is disabled unless both are set)
    linear_api_key: str = ""
    linear_team_id: str = ""
    linear_api_url: str = DEFAULT_LINEAR_API_URL

    # Outbound HTTP
    http_timeout: float = 10.0

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8080

    # Logging
    log_dir: Optional[str] = None
    log_payloads: bool = False

    @property
    def linear_enabled(self) -> bool:
        return bool(self.linear_api_key and self.linear_team_id)

    @classmethod
    def from_env(cls) -> "RelayConfig":
        """Create configuration from environment variables."""
        return cls(
            webhook_secret=os.getenv("KOLIDE_WEBHOOK_SECRET", ""),
            slack_webhook_url=os.getenv("SLACK_WEBHOOK_URL", ""),
            linear_api_key=os.getenv("LINEAR_API_KEY", ""),
            linear_team_id=os.getenv("LINEAR_TEAM_ID", ""),
            linear_api_url=os.getenv("LINEAR_API_URL", DEFAULT_LINEAR_API_URL),
            http_timeout=float(os.getenv("KOLIDE_RELAY_HTTP_TIMEOUT", "10")),
            host=os.getenv("KOLIDE_RELAY_HOST", "0.0.0.0"),
            port=int(os.getenv("KOLIDE_RELAY_PORT", "8080")),
            log_dir=os.getenv("KOLIDE_RELAY_LOG_DIR") or None,
            log_payloads=_env_flag("KOLIDE_RELAY_LOG_PAYLOADS"),
        )
