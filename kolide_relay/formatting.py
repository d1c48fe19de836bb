"""Formatting helpers shared by the Slack and Linear message builders."""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional, Tuple

# First matching substring wins; "device_trust" must precede "device".
EMOJI_RULES: Tuple[Tuple[str, str], ...] = (
    ("issue", "\U0001f534"),           # red circle
    ("device_trust", "\U0001f6e1\ufe0f"),  # shield
    ("device", "\U0001f4bb"),          # laptop
    ("auth", "\U0001f510"),            # lock with key
    ("admin", "\U0001f464"),           # bust in silhouette
    ("request", "\U0001f4dd"),         # memo
)
DEFAULT_EMOJI = "\U0001f4e2"  # loudspeaker

# Candidate keys per concept, checked in order. A None label means the value
# is used as-is (the issue or title name).
SUBJECT_FIELDS: Tuple[Tuple[Optional[str], Tuple[str, ...]], ...] = (
    (None, ("issue_name", "title", "name")),
    ("Device", ("device_name", "device", "hostname")),
    ("User", ("user_name", "user", "email")),
)

SLACK_LINK_FORMAT = "<{url}|View>"
MARKDOWN_LINK_FORMAT = "[{url}]({url})"
PLAIN_LINK_FORMAT = "{url}"

_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


def format_event_title(event: str) -> str:
    """Turn ``auth_logs.failure`` into ``Auth Logs Failure``."""
    return " ".join(_capitalize(word) for word in re.split(r"[._]", event))


def get_event_emoji(event: str) -> str:
    for needle, emoji in EMOJI_RULES:
        if needle in event:
            return emoji
    return DEFAULT_EMOJI


def format_field_key(key: str) -> str:
    """Convert a snake_case data key to Title Case."""
    return " ".join(_capitalize(word) for word in key.split("_"))


def humanize_value(value: Any, link_format: str = SLACK_LINK_FORMAT) -> str:
    """Render a JSON value for display.

    URLs go through ``link_format``, objects and arrays become compact JSON,
    and booleans keep their JSON spelling.
    """
    if isinstance(value, str):
        if value.startswith("http"):
            return link_format.format(url=value)
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def humanize_fields(
    data: Dict[str, Any], link_format: str = SLACK_LINK_FORMAT
) -> Iterator[Tuple[str, str, Any]]:
    """Yield ``(label, rendered value, raw value)`` for every non-null field."""
    for key, value in data.items():
        if value is None:
            continue
        yield format_field_key(key), humanize_value(value, link_format), value


def _first_present(data: Dict[str, Any], keys: Tuple[str, ...]) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None


def extract_subject(data: Dict[str, Any]) -> str:
    """Describe what an event is about, e.g. ``Device: MacBook-1 - User: alice``.

    Returns an empty string when none of the :data:`SUBJECT_FIELDS` are set.
    """
    parts = []
    for label, keys in SUBJECT_FIELDS:
        value = _first_present(data, keys)
        if value is None:
            continue
        text = humanize_value(value, PLAIN_LINK_FORMAT)
        parts.append(f"{label}: {text}" if label else text)
    return " - ".join(parts)


def parse_timestamp(timestamp: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp as an aware UTC datetime.

    Timestamps without an offset are taken as UTC.
    """
    try:
        parsed = datetime.fromisoformat(timestamp)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _clock(dt: datetime, seconds: bool = False) -> str:
    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    if seconds:
        return f"{hour}:{dt.minute:02d}:{dt.second:02d} {suffix}"
    return f"{hour}:{dt.minute:02d} {suffix}"


def format_timestamp(timestamp: str, style: str = "medium") -> str:
    """Render a timestamp the way en-US locales show it, in UTC.

    ``short``:  ``1/1/24, 12:00 AM``
    ``medium``: ``Jan 1, 2024, 12:00 AM``
    ``full``:   ``Monday, January 1, 2024 at 12:00:00 AM UTC``

    Unparsable timestamps are returned unchanged.
    """
    dt = parse_timestamp(timestamp)
    if dt is None:
        return timestamp

    month = _MONTHS[dt.month - 1]
    if style == "short":
        return f"{dt.month}/{dt.day}/{dt.year % 100:02d}, {_clock(dt)}"
    if style == "medium":
        return f"{month[:3]} {dt.day}, {dt.year}, {_clock(dt)}"
    if style == "full":
        weekday = _WEEKDAYS[dt.weekday()]
        return f"{weekday}, {month} {dt.day}, {dt.year} at {_clock(dt, seconds=True)} UTC"
    raise ValueError(f"Unknown timestamp style: {style}")
