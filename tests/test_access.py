# tests/test_access.py

from helpdesk.config import UserRole
from helpdesk.tickets.domain import User, visible_tickets

from conftest import make_ticket

ADMIN = User(id="u1", name="Alice Admin", role=UserRole.ADMIN)
PIC = User(id="u2", name="Bob Tech", role=UserRole.PIC)
CLIENT = User(id="u3", name="Charlie Client", role=UserRole.CLIENT)


def _tickets():
    return [
        make_ticket("T-1", creator_id="u3", assigned_to="u2"),
        make_ticket("T-2", creator_id="u3"),
        make_ticket("T-3", creator_id="u5", assigned_to="u2"),
        make_ticket("T-4", creator_id="u5", assigned_to="u4"),
    ]


def test_admin_sees_everything():
    assert [t.id for t in visible_tickets(ADMIN, _tickets())] == ["T-1", "T-2", "T-3", "T-4"]


def test_pic_sees_assigned_only():
    assert [t.id for t in visible_tickets(PIC, _tickets())] == ["T-1", "T-3"]


def test_client_sees_own_only():
    assert [t.id for t in visible_tickets(CLIENT, _tickets())] == ["T-1", "T-2"]


def test_empty_collection():
    for user in (ADMIN, PIC, CLIENT):
        assert visible_tickets(user, []) == []


def test_each_ticket_visible_to_its_participants_only():
    people = [
        PIC, CLIENT,
        User(id="u4", name="Diana Tech", role=UserRole.PIC),
        User(id="u5", name="Erin Client", role=UserRole.CLIENT),
    ]

    for ticket in _tickets():
        seen_by = {p.id for p in people if ticket in visible_tickets(p, _tickets())}
        expected = {ticket.creator_id} | ({ticket.assigned_to} if ticket.assigned_to else set())
        assert seen_by == expected


def test_unassigned_ticket_invisible_to_pics():
    tickets = [make_ticket("T-1", creator_id="u3")]

    assert visible_tickets(PIC, tickets) == []
