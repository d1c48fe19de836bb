"""Kolide Relay - forwards Kolide device-trust webhooks to Slack and Linear.

This package provides:

- kolide_relay.server: Webhook reception, signature checks and relaying
- kolide_relay.slack / kolide_relay.linear: Message building and delivery
- kolide_relay.models: Kolide, Slack and Linear data models
- kolide_relay.common: Shared utilities and common functionality
"""

__version__ = "1.0.0"

from . import common
from . import models

__all__ = [
    "common",
    "models",
]
