"""Pydantic models for Linear ticket creation."""

from enum import IntEnum
from pydantic import BaseModel, ConfigDict, Field


class LinearPriority(IntEnum):
    """Linear issue priority levels."""

    NONE = 0
    URGENT = 1
    HIGH = 2
    MEDIUM = 3
    LOW = 4


class TicketDraft(BaseModel):
    """Title, description and priority for a Linear issue."""
    title: str
    description: str
    priority: LinearPriority = Field(default=LinearPriority.HIGH)


class LinearIssue(BaseModel):
    """Issue returned by a successful ``issueCreate`` mutation."""
    model_config = ConfigDict(extra="ignore")

    id: str
    identifier: str
    title: str
    url: str
