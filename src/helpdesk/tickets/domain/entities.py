"""
Ticket Domain Entities
======================

Pure Python domain entities for the ticket tracker.

These entities contain field-level consistency rules only and are free
of infrastructure concerns.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

from helpdesk.config import (
    TicketStatus, TicketPriority, UserRole, TERMINAL_STATUSES
)
from helpdesk.shared.clock import as_utc


@dataclass(frozen=True)
class User:
    """
    A user of the tracker.

    Immutable for the lifetime of the core; the role alone determines
    what the user may do.
    """
    id: str
    name: str
    role: UserRole
    email: str = ""
    phone: Optional[str] = None  # Contact handle for the messaging hand-off

    @property
    def contact_handle(self) -> Optional[str]:
        return self.phone or None


@dataclass
class Ticket:
    """
    Ticket entity representing a support request.

    ``assigned_to``, when set, always references a PIC. Status and priority
    are closed enumerations.
    """

    id: str
    title: str
    description: str
    status: TicketStatus
    priority: TicketPriority
    category: str
    creator_id: str

    # Timestamps
    created_at: datetime
    updated_at: datetime

    assigned_to: Optional[str] = None
    attachments: List[str] = field(default_factory=list)
    status_changes: int = 0  # Transitions to a different status so far

    def __post_init__(self):
        """Validate ticket on initialization."""
        if not self.id:
            raise ValueError("ticket id is required")
        if not self.title or not self.title.strip():
            raise ValueError("title is required")
        if not self.creator_id:
            raise ValueError("creator_id is required")
        # Coerce raw strings into the closed enumerations
        self.status = TicketStatus(self.status)
        self.priority = TicketPriority(self.priority)
        # Naive timestamps are taken to be UTC
        self.created_at = as_utc(self.created_at)
        self.updated_at = as_utc(self.updated_at)
        if self.updated_at < self.created_at:
            raise ValueError("updated_at cannot be before created_at")

    @property
    def is_terminal(self) -> bool:
        """RESOLVED and CLOSED tickets are exempt from staleness escalation."""
        return self.status in TERMINAL_STATUSES

    def age_at(self, current_time: datetime) -> float:
        """Age in seconds at ``current_time``."""
        return (current_time - self.created_at).total_seconds()


@dataclass(frozen=True)
class Comment:
    """
    A message in a ticket's conversation.

    Append-only: never mutated or deleted once created.
    """
    id: str
    ticket_id: str
    author_id: str
    content: str
    created_at: datetime
    attachments: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "created_at", as_utc(self.created_at))
