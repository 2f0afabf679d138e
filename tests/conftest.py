# tests/conftest.py

from datetime import datetime, timedelta, timezone

import pytest

from helpdesk.config import UserRole, TicketStatus, TicketPriority
from helpdesk.notifications.application import NotificationEngine
from helpdesk.notifications.infrastructure import InMemoryNotificationStore
from helpdesk.sla.application import StalenessMonitor
from helpdesk.tickets.application import TicketLifecycle, TicketQueryService
from helpdesk.tickets.domain import User, Ticket
from helpdesk.tickets.infrastructure import InMemoryTicketRepository, InMemoryUserDirectory

NOW = datetime(2024, 5, 20, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable time source."""

    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def users():
    return InMemoryUserDirectory([
        User(id="u1", name="Alice Admin", role=UserRole.ADMIN, phone="6281234567890"),
        User(id="u2", name="Bob Tech", role=UserRole.PIC, phone="6289876543210"),
        User(id="u3", name="Charlie Client", role=UserRole.CLIENT, phone="6281122334455"),
        User(id="u4", name="Diana Tech", role=UserRole.PIC),
    ])


@pytest.fixture
def repository(users, clock):
    return InMemoryTicketRepository(users, clock)


@pytest.fixture
def engine(clock):
    return NotificationEngine(InMemoryNotificationStore(), clock)


@pytest.fixture
def lifecycle(repository, users, engine, clock):
    return TicketLifecycle(repository, users, engine, clock)


@pytest.fixture
def queries(repository, users):
    return TicketQueryService(repository, users)


@pytest.fixture
def monitor(repository, users, engine, clock):
    return StalenessMonitor(repository, users, engine, clock=clock)


def make_ticket(ticket_id="T-1", creator_id="u3", age=timedelta(0), now=NOW, **overrides):
    created_at = now - age
    fields = dict(
        id=ticket_id,
        title=f"Issue {ticket_id}",
        description="Something is broken",
        status=TicketStatus.OPEN,
        priority=TicketPriority.MEDIUM,
        category="Software",
        creator_id=creator_id,
        created_at=created_at,
        updated_at=created_at,
    )
    fields.update(overrides)
    return Ticket(**fields)
