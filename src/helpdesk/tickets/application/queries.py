"""
Ticket Read Services
====================

Read paths: role-filtered ticket lists, comment threads, the dashboard
summary and the contact hand-off for the external messaging app.
"""

from dataclasses import dataclass
from typing import List, Optional

from helpdesk.config import UserRole, TicketStatus, TicketPriority
from helpdesk.tickets.application.dto import DashboardSummary, TicketDTO
from helpdesk.tickets.application.services import ITicketRepository, IUserDirectory
from helpdesk.tickets.domain import Ticket, Comment, visible_tickets

RECENT_TICKETS_LIMIT = 5


@dataclass(frozen=True)
class ContactHandoff:
    """What the messaging collaborator needs to build its deep link."""
    recipient_id: str
    handle: str
    text: str


class TicketQueryService:
    """Read-only access to tickets, filtered by the requester's role."""

    def __init__(self, repository: ITicketRepository, users: IUserDirectory):
        self._repo = repository
        self._users = users

    def list_visible_tickets(self, user_id: str) -> List[Ticket]:
        requester = self._users.get(user_id)
        return visible_tickets(requester, self._repo.list_tickets())

    def get_ticket(self, ticket_id: str) -> Ticket:
        return self._repo.get(ticket_id)

    def list_comments(self, ticket_id: str) -> List[Comment]:
        return self._repo.list_comments(ticket_id)

    def dashboard(self, user_id: str) -> DashboardSummary:
        """
        Counters over the user's visible tickets plus the most recently
        created ones.
        """
        requester = self._users.get(user_id)
        tickets = visible_tickets(requester, self._repo.list_tickets())
        recent = sorted(tickets, key=lambda t: t.created_at, reverse=True)[:RECENT_TICKETS_LIMIT]

        return DashboardSummary(
            role=requester.role,
            total_tickets=len(tickets),
            open_count=sum(1 for t in tickets if t.status == TicketStatus.OPEN),
            in_progress_count=sum(1 for t in tickets if t.status == TicketStatus.IN_PROGRESS),
            resolved_count=sum(1 for t in tickets if t.status == TicketStatus.RESOLVED),
            urgent_count=sum(1 for t in tickets if t.priority == TicketPriority.URGENT),
            recent_tickets=[TicketDTO.model_validate(t) for t in recent],
        )

    def contact_handoff(self, ticket_id: str, requester_id: str) -> Optional[ContactHandoff]:
        """
        Counterpart contact handle and pre-filled text for a ticket.

        A client is pointed at the assignee, staff at the creator. Returns
        None when there is no counterpart or it has no contact handle.
        """
        requester = self._users.get(requester_id)
        ticket = self._repo.get(ticket_id)

        if requester.role == UserRole.CLIENT:
            counterpart_id = ticket.assigned_to
        else:
            counterpart_id = ticket.creator_id

        counterpart = self._users.find(counterpart_id)
        if counterpart is None or not counterpart.contact_handle:
            return None

        text = (
            f"Hello {counterpart.name}, this is {requester.name} regarding ticket "
            f"{ticket.id} \"{ticket.title}\" (status: {ticket.status.value})."
        )
        return ContactHandoff(
            recipient_id=counterpart.id,
            handle=counterpart.contact_handle,
            text=text,
        )
