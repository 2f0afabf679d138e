"""
Ticket Domain Layer
===================

Contains:
- Entities: User, Ticket, Comment
- Access rules: role-based visibility (visible_tickets)

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from helpdesk.tickets.domain.entities import User, Ticket, Comment
from helpdesk.tickets.domain.access import visible_tickets

__all__ = [
    "User",
    "Ticket",
    "Comment",
    "visible_tickets",
]
