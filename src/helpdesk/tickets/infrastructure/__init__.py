"""
Ticket Infrastructure Layer
===========================

Contains:
- Repositories: in-memory ticket/comment store and user directory
- Seed: YAML fixture loader for demo instances
"""

from helpdesk.tickets.infrastructure.repositories import (
    InMemoryTicketRepository,
    InMemoryUserDirectory,
)
from helpdesk.tickets.infrastructure.seed import SeedLoader

__all__ = [
    "InMemoryTicketRepository",
    "InMemoryUserDirectory",
    "SeedLoader",
]
