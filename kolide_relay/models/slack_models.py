"""Pydantic models for Slack Block Kit messages."""

from typing import List, Literal, Union
from pydantic import BaseModel, Field


class PlainTextObject(BaseModel):
    type: Literal["plain_text"] = "plain_text"
    text: str


class MrkdwnTextObject(BaseModel):
    type: Literal["mrkdwn"] = "mrkdwn"
    text: str


class HeaderBlock(BaseModel):
    """Slack header block."""
    type: Literal["header"] = "header"
    text: PlainTextObject


class SectionBlock(BaseModel):
    """Slack section block."""
    type: Literal["section"] = "section"
    text: MrkdwnTextObject


class ContextBlock(BaseModel):
    """Slack context block."""
    type: Literal["context"] = "context"
    elements: List[MrkdwnTextObject]


SlackBlock = Union[HeaderBlock, SectionBlock, ContextBlock]


class SlackMessage(BaseModel):
    """Message body for a Slack incoming webhook."""
    blocks: List[SlackBlock] = Field(default_factory=list)
