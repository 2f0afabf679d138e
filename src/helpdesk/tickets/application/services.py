"""
Ticket Application Services
===========================

The ticket lifecycle translates user intents into repository mutations
plus the matching notification fan-out.

Following SOLID principles:
- Single Responsibility: mutations here, reads in queries.py
- Dependency Inversion: depend on repository interfaces, not the in-memory store
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Union
from uuid import uuid4

from pydantic import ValidationError

from helpdesk.config import (
    UserRole, TicketStatus, TicketPriority, NotificationKind,
    DEFAULT_CATEGORY, DEFAULT_PRIORITY
)
from helpdesk.core import PermissionDeniedException, ValidationException
from helpdesk.notifications.application import NotificationEngine
from helpdesk.shared.clock import Clock, utc_now
from helpdesk.shared.infrastructure.logging import get_logger
from helpdesk.tickets.application.dto import TicketCreateDTO, CommentCreateDTO
from helpdesk.tickets.domain import User, Ticket, Comment

logger = get_logger(__name__)


# ========== Repository Interfaces (Dependency Inversion) ==========

class IUserDirectory(ABC):
    """Interface for user lookups."""

    @abstractmethod
    def get(self, user_id: str) -> User:
        """Get user by ID; raises ResourceNotFoundException if unknown."""

    @abstractmethod
    def find(self, user_id: Optional[str]) -> Optional[User]:
        """Get user by ID or None."""

    @abstractmethod
    def list_by_role(self, role: UserRole) -> List[User]:
        """All users holding ``role``."""


class ITicketRepository(ABC):
    """Interface for ticket and comment data access."""

    @abstractmethod
    def create(self, ticket: Ticket) -> Ticket:
        """Append a new ticket; ValidationException on duplicate id."""

    @abstractmethod
    def get(self, ticket_id: str) -> Ticket:
        """Get ticket by ID; ResourceNotFoundException if unknown."""

    @abstractmethod
    def list_tickets(self) -> List[Ticket]:
        """Snapshot of every ticket."""

    @abstractmethod
    def update_status(self, ticket_id: str, status: TicketStatus) -> Ticket:
        """Set status and refresh updated_at."""

    @abstractmethod
    def assign(self, ticket_id: str, assignee_id: str) -> Ticket:
        """Set assignee (must be a PIC) and refresh updated_at."""

    @abstractmethod
    def add_comment(self, comment: Comment) -> Comment:
        """Append to the comment log of an existing ticket."""

    @abstractmethod
    def list_comments(self, ticket_id: str) -> List[Comment]:
        """Comments of a ticket in creation order."""

    @abstractmethod
    def next_ticket_id(self) -> str:
        """Allocate an unused ticket id."""


# ========== Application Services ==========

class TicketLifecycle:
    """
    Orchestrates ticket creation, status changes, assignment and comments.

    Repository failures propagate unmodified. Raising notifications is a
    best-effort side effect and never fails the enclosing operation.
    """

    def __init__(
        self,
        repository: ITicketRepository,
        users: IUserDirectory,
        notifications: NotificationEngine,
        clock: Clock = utc_now
    ):
        self._repo = repository
        self._users = users
        self._notifications = notifications
        self._clock = clock

    # ----- authorization -----

    def _authorize(self, actor: User, action: str) -> None:
        """Explicit switch over the closed role enumeration."""
        if action == "create_ticket":
            allowed = actor.role == UserRole.CLIENT
        elif action == "update_status":
            allowed = actor.role in (UserRole.ADMIN, UserRole.PIC)
        elif action == "assign_ticket":
            allowed = actor.role == UserRole.ADMIN
        elif action == "post_comment":
            allowed = actor.role in (UserRole.ADMIN, UserRole.PIC, UserRole.CLIENT)
        else:
            raise ValueError(f"Unknown action: {action}")

        if not allowed:
            raise PermissionDeniedException(actor.id, action.replace("_", " "))

    # ----- operations -----

    def create_ticket(
        self,
        creator_id: str,
        fields: Union[TicketCreateDTO, dict]
    ) -> Ticket:
        """
        File a new ticket on behalf of a client.

        Status is always OPEN. Missing category/priority fall back to
        "Other"/MEDIUM. Every admin is notified; urgent tickets raise an
        ``urgent`` notification, everything else ``info``.

        Raises:
            ResourceNotFoundException: unknown creator
            PermissionDeniedException: creator is not a CLIENT
            ValidationException: malformed fields or duplicate id
        """
        creator = self._users.get(creator_id)
        self._authorize(creator, "create_ticket")
        dto = _validate(TicketCreateDTO, fields)

        now = self._clock()
        ticket = Ticket(
            id=dto.id or self._repo.next_ticket_id(),
            title=dto.title,
            description=dto.description,
            status=TicketStatus.OPEN,
            priority=dto.priority or DEFAULT_PRIORITY,
            category=dto.category or DEFAULT_CATEGORY,
            creator_id=creator.id,
            created_at=now,
            updated_at=now,
            attachments=list(dto.attachments),
        )
        created = self._repo.create(ticket)

        logger.info(
            "Ticket created",
            extra={"ticket_id": created.id, "actor_id": creator.id, "priority": created.priority.value}
        )

        kind = (
            NotificationKind.URGENT
            if created.priority == TicketPriority.URGENT
            else NotificationKind.INFO
        )
        for admin in self._users.list_by_role(UserRole.ADMIN):
            self._notify(
                admin.id,
                "New Ticket Submitted",
                f"{creator.name} opened {created.id}: {created.title} ({created.priority.value})",
                created.id,
                kind,
            )
        return created

    def update_status(
        self,
        ticket_id: str,
        new_status: Union[TicketStatus, str],
        actor_id: str
    ) -> Ticket:
        """
        Move a ticket to ``new_status``. No transition graph is enforced.

        The creator receives a ``success`` notification naming the new status.
        Each transition gets its own title; re-setting the current status
        repeats the previous title and is suppressed.
        """
        actor = self._users.get(actor_id)
        self._authorize(actor, "update_status")
        status = _coerce_status(new_status)

        updated = self._repo.update_status(ticket_id, status)

        logger.info(
            "Ticket status updated",
            extra={"ticket_id": ticket_id, "actor_id": actor.id, "status": status.value}
        )

        self._notify(
            updated.creator_id,
            _status_title(status, updated.status_changes),
            f"Your ticket {updated.id} ({updated.title}) is now {status.value}.",
            updated.id,
            NotificationKind.SUCCESS,
        )
        return updated

    def assign_ticket(self, ticket_id: str, assignee_id: str, actor_id: str) -> Ticket:
        """Assign a ticket to a PIC and warn the PIC about the new work."""
        actor = self._users.get(actor_id)
        self._authorize(actor, "assign_ticket")

        updated = self._repo.assign(ticket_id, assignee_id)

        logger.info(
            "Ticket assigned",
            extra={"ticket_id": ticket_id, "actor_id": actor.id, "assignee_id": assignee_id}
        )

        self._notify(
            assignee_id,
            "New Ticket Assigned",
            f"{actor.name} assigned {updated.id} to you: {updated.title} ({updated.priority.value})",
            updated.id,
            NotificationKind.WARNING,
        )
        return updated

    def post_comment(
        self,
        ticket_id: str,
        author_id: str,
        text: str,
        attachments: Optional[Sequence[str]] = None
    ) -> Comment:
        """
        Append a comment and notify the other side of the conversation.

        A client's comment goes to the current assignee (if any); a staff
        comment goes to the ticket's creator. The title carries the comment's
        position in the thread, so every comment notifies.
        """
        author = self._users.get(author_id)
        self._authorize(author, "post_comment")
        dto = _validate(
            CommentCreateDTO,
            {"content": text or "", "attachments": list(attachments or [])}
        )

        comment = Comment(
            id=f"c-{uuid4().hex[:12]}",
            ticket_id=ticket_id,
            author_id=author.id,
            content=dto.content,
            created_at=self._clock(),
            attachments=tuple(dto.attachments),
        )
        stored = self._repo.add_comment(comment)
        ticket = self._repo.get(ticket_id)
        thread = [c.id for c in self._repo.list_comments(ticket_id)]
        ordinal = thread.index(stored.id) + 1

        logger.info(
            "Comment posted",
            extra={"ticket_id": ticket_id, "actor_id": author.id, "comment_id": stored.id}
        )

        recipient_id = _conversation_counterpart(author, ticket)
        if recipient_id and recipient_id != author.id:
            self._notify(
                recipient_id,
                f"New reply from {author.name} on {ticket.id} (#{ordinal})",
                _preview(dto.content) or f"{author.name} added attachments to {ticket.id}.",
                ticket.id,
                NotificationKind.INFO,
            )
        return stored

    # ----- helpers -----

    def _notify(
        self,
        recipient_id: str,
        title: str,
        message: str,
        ticket_id: str,
        kind: NotificationKind
    ) -> None:
        try:
            self._notifications.raise_notification(recipient_id, title, message, ticket_id, kind)
        except Exception:
            logger.error(
                "Failed to raise notification",
                extra={"recipient_id": recipient_id, "ticket_id": ticket_id, "title": title},
                exc_info=True
            )


def _conversation_counterpart(author: User, ticket: Ticket) -> Optional[str]:
    if author.role == UserRole.CLIENT:
        return ticket.assigned_to
    if author.role in (UserRole.ADMIN, UserRole.PIC):
        return ticket.creator_id
    return None


def _status_title(status: TicketStatus, transition: int) -> str:
    title = f"Ticket {status.value.replace('_', ' ').title()}"
    return title if transition <= 1 else f"{title} (#{transition})"


def _coerce_status(value: Union[TicketStatus, str]) -> TicketStatus:
    try:
        return TicketStatus(value)
    except ValueError:
        raise ValidationException(
            f"Unknown ticket status: {value!r}",
            {"status": str(value)}
        ) from None


def _validate(model, data):
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ValidationException(
            f"Invalid {model.__name__}",
            {"errors": e.errors(include_url=False)}
        ) from e


def _preview(text: str, limit: int = 120) -> str:
    text = text.strip()
    return text if len(text) <= limit else text[: limit - 3] + "..."
