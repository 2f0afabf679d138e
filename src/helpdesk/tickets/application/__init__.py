"""
Ticket Application Layer
========================

Application layer for the ticket module.

Contains:
- Services: TicketLifecycle (mutations), TicketQueryService (reads)
- DTOs: Pydantic models for the presentation boundary
- Repository interfaces

This layer depends on the domain layer and repository interfaces,
but not on concrete infrastructure implementations.
"""

from helpdesk.tickets.application.dto import (
    TicketCreateDTO,
    CommentCreateDTO,
    TicketDTO,
    DashboardSummary,
)
from helpdesk.tickets.application.services import (
    TicketLifecycle,
    ITicketRepository,
    IUserDirectory,
)
from helpdesk.tickets.application.queries import (
    TicketQueryService,
    ContactHandoff,
)

__all__ = [
    # DTOs
    "TicketCreateDTO",
    "CommentCreateDTO",
    "TicketDTO",
    "DashboardSummary",
    # Services
    "TicketLifecycle",
    "TicketQueryService",
    "ContactHandoff",
    # Repository Interfaces
    "ITicketRepository",
    "IUserDirectory",
]
