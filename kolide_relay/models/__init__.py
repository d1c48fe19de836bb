"""Shared models for Kolide events, Slack messages and Linear tickets."""

from .kolide_models import (
    KolideEvent,
    KolideEventType,
    is_known_event_type,
    parse_payload,
    is_valid_payload,
    load_event,
)

from .slack_models import (
    SlackMessage,
    SlackBlock,
    HeaderBlock,
    SectionBlock,
    ContextBlock,
    PlainTextObject,
    MrkdwnTextObject,
)

from .linear_models import (
    LinearPriority,
    TicketDraft,
    LinearIssue,
)

__all__ = [
    # Kolide models
    "KolideEvent",
    "KolideEventType",
    "is_known_event_type",
    "parse_payload",
    "is_valid_payload",
    "load_event",
    # Slack models
    "SlackMessage",
    "SlackBlock",
    "HeaderBlock",
    "SectionBlock",
    "ContextBlock",
    "PlainTextObject",
    "MrkdwnTextObject",
    # Linear models
    "LinearPriority",
    "TicketDraft",
    "LinearIssue",
]
