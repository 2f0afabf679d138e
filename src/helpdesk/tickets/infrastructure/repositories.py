"""
Ticket Infrastructure Repositories
==================================

Concrete in-memory implementations of the ticket repository interfaces.

Each repository is an explicitly owned object constructed once per running
instance. State is guarded by a re-entrant lock because the staleness
monitor reads from a scheduler worker thread; reads hand out copies so
callers never observe a half-applied mutation.
"""

import threading
from dataclasses import replace
from typing import Dict, List, Optional

from helpdesk.config import UserRole, TicketStatus
from helpdesk.core import ResourceNotFoundException, ValidationException
from helpdesk.shared.clock import Clock, utc_now
from helpdesk.tickets.application import ITicketRepository, IUserDirectory
from helpdesk.tickets.domain import User, Ticket, Comment

FIRST_TICKET_NUMBER = 1001


def _snapshot(ticket: Ticket) -> Ticket:
    return replace(ticket, attachments=list(ticket.attachments))


class InMemoryUserDirectory(IUserDirectory):
    """User registry keyed by id."""

    def __init__(self, users: Optional[List[User]] = None):
        self._users: Dict[str, User] = {}
        self._lock = threading.RLock()
        for user in users or []:
            self.add(user)

    def add(self, user: User) -> User:
        if not user.id:
            raise ValidationException("user id is required")
        try:
            role = UserRole(user.role)
        except ValueError:
            raise ValidationException(f"Unknown role: {user.role!r}", {"user_id": user.id}) from None
        if role is not user.role:
            user = replace(user, role=role)
        with self._lock:
            if user.id in self._users:
                raise ValidationException(f"User '{user.id}' already exists", {"user_id": user.id})
            self._users[user.id] = user
        return user

    def get(self, user_id: str) -> User:
        user = self.find(user_id)
        if user is None:
            raise ResourceNotFoundException("User", user_id)
        return user

    def find(self, user_id: Optional[str]) -> Optional[User]:
        if not user_id:
            return None
        with self._lock:
            return self._users.get(user_id)

    def list_by_role(self, role: UserRole) -> List[User]:
        with self._lock:
            return [u for u in self._users.values() if u.role == role]

    def all(self) -> List[User]:
        with self._lock:
            return list(self._users.values())


class InMemoryTicketRepository(ITicketRepository):
    """
    In-memory ticket and comment store.

    No business logic beyond field consistency: unique ids, assignees that
    are PICs, comments only on existing tickets.
    """

    def __init__(self, users: IUserDirectory, clock: Clock = utc_now):
        self._users = users
        self._clock = clock
        self._tickets: Dict[str, Ticket] = {}
        self._comments: List[Comment] = []
        self._next_number = FIRST_TICKET_NUMBER
        self._lock = threading.RLock()

    def create(self, ticket: Ticket) -> Ticket:
        """Append a new ticket."""
        if not ticket.id or not ticket.title or not ticket.creator_id:
            raise ValidationException(
                "Ticket id, title and creator are required",
                {"ticket_id": ticket.id}
            )

        with self._lock:
            if ticket.id in self._tickets:
                raise ValidationException(
                    f"Ticket '{ticket.id}' already exists",
                    {"ticket_id": ticket.id}
                )
            if ticket.assigned_to is not None:
                self._require_pic(ticket.assigned_to)

            stored = _snapshot(ticket)
            self._tickets[stored.id] = stored
            return _snapshot(stored)

    def get(self, ticket_id: str) -> Ticket:
        with self._lock:
            return _snapshot(self._get(ticket_id))

    def list_tickets(self) -> List[Ticket]:
        with self._lock:
            return [_snapshot(t) for t in self._tickets.values()]

    def update_status(self, ticket_id: str, status: TicketStatus) -> Ticket:
        try:
            status = TicketStatus(status)
        except ValueError:
            raise ValidationException(f"Unknown ticket status: {status!r}") from None

        with self._lock:
            ticket = self._get(ticket_id)
            if ticket.status != status:
                ticket.status_changes += 1
            ticket.status = status
            ticket.updated_at = self._clock()
            return _snapshot(ticket)

    def assign(self, ticket_id: str, assignee_id: str) -> Ticket:
        """
        Assign a ticket.

        Raises:
            ResourceNotFoundException: unknown ticket or assignee
            ValidationException: assignee is not a PIC
        """
        with self._lock:
            ticket = self._get(ticket_id)
            self._require_pic(assignee_id)
            ticket.assigned_to = assignee_id
            ticket.updated_at = self._clock()
            return _snapshot(ticket)

    def add_comment(self, comment: Comment) -> Comment:
        with self._lock:
            self._get(comment.ticket_id)
            self._comments.append(comment)
            return comment

    def list_comments(self, ticket_id: str) -> List[Comment]:
        with self._lock:
            self._get(ticket_id)
            return [c for c in self._comments if c.ticket_id == ticket_id]

    def next_ticket_id(self) -> str:
        with self._lock:
            while f"T-{self._next_number}" in self._tickets:
                self._next_number += 1
            ticket_id = f"T-{self._next_number}"
            self._next_number += 1
            return ticket_id

    # ----- internals (call with the lock held) -----

    def _get(self, ticket_id: str) -> Ticket:
        ticket = self._tickets.get(ticket_id)
        if ticket is None:
            raise ResourceNotFoundException("Ticket", ticket_id)
        return ticket

    def _require_pic(self, user_id: str) -> None:
        user = self._users.get(user_id)
        if user.role != UserRole.PIC:
            raise ValidationException(
                f"Assignee '{user_id}' must be a PIC, not {user.role.value}",
                {"assignee_id": user_id, "role": user.role.value}
            )
