"""
Ticket Application DTOs
=======================

Data Transfer Objects for the ticket boundary.

These Pydantic models validate what the presentation layer hands in and
shape what it reads back. Following YAGNI - only what's needed.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from helpdesk.config import TicketPriority, TicketStatus, UserRole


# ========== Request DTOs ==========

class TicketCreateDTO(BaseModel):
    """Fields a client supplies when filing a ticket."""
    title: str = Field(..., min_length=1, description="Short summary of the issue")
    description: str = Field(default="", description="Full problem description")
    priority: Optional[TicketPriority] = Field(
        default=None,
        description="Requested priority (defaults to the classification fallback)"
    )
    category: Optional[str] = Field(
        default=None,
        description="Free-form classification tag"
    )
    id: Optional[str] = Field(
        default=None,
        min_length=1,
        description="Explicit ticket id; allocated by the repository when omitted"
    )
    attachments: List[str] = Field(default_factory=list, description="Opaque attachment references")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title cannot be blank")
        return v.strip()

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class CommentCreateDTO(BaseModel):
    """A message posted to a ticket conversation."""
    content: str = Field(default="", description="Message body")
    attachments: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_not_empty(self) -> "CommentCreateDTO":
        if not self.content.strip() and not self.attachments:
            raise ValueError("comment needs text or at least one attachment")
        return self


# ========== Response DTOs ==========

class TicketDTO(BaseModel):
    """Read model for a ticket."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    status: TicketStatus
    priority: TicketPriority
    category: str
    creator_id: str
    assigned_to: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    attachments: List[str] = Field(default_factory=list)


class DashboardSummary(BaseModel):
    """Counters and most recent tickets for one user's visible set."""
    role: UserRole
    total_tickets: int
    open_count: int
    in_progress_count: int
    resolved_count: int
    urgent_count: int
    recent_tickets: List[TicketDTO] = Field(default_factory=list)
