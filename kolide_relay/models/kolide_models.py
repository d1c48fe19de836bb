"""Pydantic models for Kolide webhook payloads."""

import json
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator

from ..exceptions import InvalidPayloadError, MalformedPayloadError


class KolideEventType(str, Enum):
    """Event types Kolide currently sends.

    Envelopes carrying any other value are still accepted; see
    :func:`is_known_event_type`.
    """

    AUDIT_LOG_RECORDED = "audit_log.recorded"
    ADMIN_USERS_CREATED = "admin_users.created"
    AUTH_LOGS_SUCCESS = "auth_logs.success"
    AUTH_LOGS_FAILURE = "auth_logs.failure"
    DEVICES_CREATED = "devices.created"
    DEVICES_REGISTERED = "devices.registered"
    DEVICES_DESTROYED = "devices.destroyed"
    DEVICE_TRUST_STATUS_CHANGED = "device_trust.status_changed"
    ISSUES_NEW = "issues.new"
    ISSUES_RESOLVED = "issues.resolved"
    REQUESTS_ISSUE_EXEMPTION = "requests.issue_exemption"
    REQUESTS_REGISTRATION = "requests.registration"


KNOWN_EVENT_TYPES = frozenset(member.value for member in KolideEventType)


def is_known_event_type(event: str) -> bool:
    return event in KNOWN_EVENT_TYPES


class KolideEvent(BaseModel):
    """Kolide webhook envelope."""
    model_config = ConfigDict(extra="ignore")

    event: StrictStr = Field(..., min_length=1, description="Event type, e.g. issues.new")
    id: StrictStr = Field(..., min_length=1, description="Opaque event identifier")
    timestamp: StrictStr = Field(..., min_length=1, description="ISO-8601 event time")
    data: Dict[str, Any] = Field(default_factory=dict, description="Event specific fields")

    @field_validator("data", mode="before")
    @classmethod
    def _null_data_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value


def parse_payload(body: bytes) -> Any:
    """Decode the raw request body as JSON."""
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedPayloadError(f"Invalid JSON in request body: {e}") from e


def is_valid_payload(payload: Any) -> bool:
    """Check that ``event``, ``id`` and ``timestamp`` are present and non-empty.

    The event type is not checked against :class:`KolideEventType`.
    """
    try:
        KolideEvent.model_validate(payload)
    except ValidationError:
        return False
    return True


def load_event(payload: Any) -> KolideEvent:
    """Build a :class:`KolideEvent` from decoded JSON."""
    try:
        return KolideEvent.model_validate(payload)
    except ValidationError as e:
        raise InvalidPayloadError(f"Invalid payload structure: {e.error_count()} error(s)") from e
