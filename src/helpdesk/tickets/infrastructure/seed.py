"""
Seed Data Loader
================

Bootstraps a demo instance from a YAML fixture file.

Seeded records are written straight into the stores; they do not go
through the lifecycle and therefore raise no notifications.

Example file:

    users:
      - {id: u1, name: Alice Admin, role: ADMIN, phone: "6281234567890"}
      - {id: u3, name: Charlie Client, role: CLIENT}
    tickets:
      - id: T-1001
        title: Website slow on checkout
        priority: URGENT
        creator_id: u3
        age_hours: 24
    comments:
      - {ticket_id: T-1001, author_id: u3, content: Any ETA?, age_hours: 1}
"""

from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional, Tuple

import yaml
from pydantic import BaseModel, Field

from helpdesk.config import (
    UserRole, TicketStatus, TicketPriority, DEFAULT_CATEGORY, DEFAULT_PRIORITY
)
from helpdesk.core import ApplicationException, ConfigurationException
from helpdesk.shared.clock import Clock, as_utc, utc_now
from helpdesk.shared.infrastructure.logging import get_logger
from helpdesk.tickets.domain import User, Ticket, Comment
from helpdesk.tickets.infrastructure.repositories import (
    InMemoryTicketRepository,
    InMemoryUserDirectory,
)

logger = get_logger(__name__)


class SeedUser(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    role: UserRole
    email: str = ""
    phone: Optional[str] = None


class SeedTicket(BaseModel):
    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str = ""
    status: TicketStatus = TicketStatus.OPEN
    priority: TicketPriority = DEFAULT_PRIORITY
    category: str = DEFAULT_CATEGORY
    creator_id: str
    assigned_to: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    age_hours: Optional[float] = Field(default=None, ge=0, description="Created this long before load")
    updated_age_hours: Optional[float] = Field(default=None, ge=0, description="Last updated this long before load")
    attachments: List[str] = Field(default_factory=list)


class SeedComment(BaseModel):
    id: Optional[str] = None
    ticket_id: str
    author_id: str
    content: str
    created_at: Optional[datetime] = None
    age_hours: Optional[float] = Field(default=None, ge=0)
    attachments: List[str] = Field(default_factory=list)


class SeedData(BaseModel):
    users: List[SeedUser] = Field(default_factory=list)
    tickets: List[SeedTicket] = Field(default_factory=list)
    comments: List[SeedComment] = Field(default_factory=list)


class SeedLoader:
    """Loads a YAML fixture into a user directory and ticket repository."""

    def __init__(self, clock: Clock = utc_now):
        self._clock = clock

    def read(self, path: Path) -> SeedData:
        """Parse the YAML file; a missing file yields empty seed data."""
        if not path.exists():
            logger.warning(f"Seed data file not found: {path}, starting empty")
            return SeedData()

        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        try:
            return SeedData(**data)
        except (TypeError, ValueError) as e:
            raise ConfigurationException(f"Invalid seed data in {path}: {e}") from e

    def apply(
        self,
        data: SeedData,
        users: InMemoryUserDirectory,
        repository: InMemoryTicketRepository
    ) -> None:
        """
        Write the seed records into the stores.

        Every record is first checked against a staging copy of the stores,
        so a bad fixture raises ConfigurationException and writes nothing.
        """
        try:
            new_users, tickets, comments = self._build(data)
            self._stage(new_users, tickets, comments, users, repository)
        except (ValueError, ApplicationException) as e:
            raise ConfigurationException(f"Invalid seed data: {e}") from e

        for user in new_users:
            users.add(user)
        for ticket in tickets:
            repository.create(ticket)
        for comment in comments:
            repository.add_comment(comment)

        logger.info(
            "Seed data loaded",
            extra={
                "users": len(new_users),
                "tickets": len(tickets),
                "comments": len(comments)
            }
        )

    def _build(
        self,
        data: SeedData
    ) -> Tuple[List[User], List[Ticket], List[Comment]]:
        now = self._clock()

        new_users = [
            User(id=u.id, name=u.name, role=u.role, email=u.email, phone=u.phone)
            for u in data.users
        ]

        tickets = []
        for t in data.tickets:
            created_at = _resolve_time(t.created_at, t.age_hours, now)
            updated_at = created_at
            if t.updated_at is not None or t.updated_age_hours is not None:
                updated_at = max(created_at, _resolve_time(t.updated_at, t.updated_age_hours, now))
            tickets.append(Ticket(
                id=t.id,
                title=t.title,
                description=t.description,
                status=t.status,
                priority=t.priority,
                category=t.category,
                creator_id=t.creator_id,
                assigned_to=t.assigned_to,
                created_at=created_at,
                updated_at=updated_at,
                attachments=list(t.attachments),
            ))

        comments = [
            Comment(
                id=c.id or f"c{i}",
                ticket_id=c.ticket_id,
                author_id=c.author_id,
                content=c.content,
                created_at=_resolve_time(c.created_at, c.age_hours, now),
                attachments=tuple(c.attachments),
            )
            for i, c in enumerate(data.comments, 1)
        ]
        return new_users, tickets, comments

    def _stage(
        self,
        new_users: List[User],
        tickets: List[Ticket],
        comments: List[Comment],
        users: InMemoryUserDirectory,
        repository: InMemoryTicketRepository
    ) -> None:
        staging_users = InMemoryUserDirectory(users.all())
        for user in new_users:
            staging_users.add(user)

        staging_repo = InMemoryTicketRepository(staging_users, self._clock)
        for ticket in repository.list_tickets():
            staging_repo.create(ticket)
        for ticket in tickets:
            staging_users.get(ticket.creator_id)
            staging_repo.create(ticket)
        for comment in comments:
            staging_users.get(comment.author_id)
            staging_repo.add_comment(comment)

    def load(
        self,
        path: Path,
        users: InMemoryUserDirectory,
        repository: InMemoryTicketRepository
    ) -> SeedData:
        data = self.read(path)
        self.apply(data, users, repository)
        return data


def _resolve_time(
    explicit: Optional[datetime],
    age_hours: Optional[float],
    now: datetime
) -> datetime:
    if explicit is not None:
        return as_utc(explicit)
    if age_hours is not None:
        return now - timedelta(hours=age_hours)
    return now
