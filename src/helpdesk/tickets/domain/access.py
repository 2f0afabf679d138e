"""
Role-Based Ticket Visibility
=============================

Pure function deciding which tickets a user may see.
"""

from typing import Iterable, List

from helpdesk.config import UserRole
from helpdesk.tickets.domain.entities import Ticket, User


def visible_tickets(requester: User, tickets: Iterable[Ticket]) -> List[Ticket]:
    """
    Filter ``tickets`` down to what ``requester`` is allowed to see.

    - ADMIN: every ticket
    - PIC: tickets assigned to the requester
    - CLIENT: tickets created by the requester

    Order of the input is preserved. No side effects.
    """
    if requester.role == UserRole.ADMIN:
        return list(tickets)
    if requester.role == UserRole.PIC:
        return [t for t in tickets if t.assigned_to == requester.id]
    if requester.role == UserRole.CLIENT:
        return [t for t in tickets if t.creator_id == requester.id]
    raise ValueError(f"Unknown role: {requester.role!r}")
