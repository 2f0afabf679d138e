# tests/test_repository.py

from datetime import timedelta

import pytest

from helpdesk.config import UserRole, TicketStatus
from helpdesk.core import ResourceNotFoundException, ValidationException
from helpdesk.tickets.domain import User, Comment

from conftest import NOW, make_ticket


def test_create_and_get(repository):
    repository.create(make_ticket("T-1"))

    ticket = repository.get("T-1")
    assert ticket.status == TicketStatus.OPEN
    assert ticket.creator_id == "u3"


def test_duplicate_id_rejected(repository):
    repository.create(make_ticket("T-1"))

    with pytest.raises(ValidationException):
        repository.create(make_ticket("T-1", title="Another"))
    assert len(repository.list_tickets()) == 1


def test_get_unknown_ticket(repository):
    with pytest.raises(ResourceNotFoundException):
        repository.get("T-404")


def test_update_status_refreshes_updated_at(repository, clock):
    repository.create(make_ticket("T-1"))
    clock.advance(hours=2)

    updated = repository.update_status("T-1", TicketStatus.IN_PROGRESS)

    assert updated.status == TicketStatus.IN_PROGRESS
    assert updated.updated_at == NOW + timedelta(hours=2)
    assert updated.created_at == NOW


def test_update_status_unknown_ticket(repository):
    with pytest.raises(ResourceNotFoundException):
        repository.update_status("T-404", TicketStatus.RESOLVED)


def test_assign_to_pic(repository):
    repository.create(make_ticket("T-1"))

    assert repository.assign("T-1", "u2").assigned_to == "u2"


def test_assign_to_client_leaves_ticket_unchanged(repository):
    repository.create(make_ticket("T-1"))
    repository.assign("T-1", "u2")

    with pytest.raises(ValidationException):
        repository.assign("T-1", "u3")
    assert repository.get("T-1").assigned_to == "u2"


def test_assign_to_unknown_user(repository):
    repository.create(make_ticket("T-1"))

    with pytest.raises(ResourceNotFoundException):
        repository.assign("T-1", "ghost")
    assert repository.get("T-1").assigned_to is None


def test_create_with_non_pic_assignee_rejected(repository):
    with pytest.raises(ValidationException):
        repository.create(make_ticket("T-1", assigned_to="u1"))


def test_snapshots_are_isolated(repository):
    repository.create(make_ticket("T-1"))

    snapshot = repository.get("T-1")
    snapshot.status = TicketStatus.CLOSED
    snapshot.attachments.append("x.png")

    stored = repository.get("T-1")
    assert stored.status == TicketStatus.OPEN
    assert stored.attachments == []


def test_comments_in_creation_order(repository, clock):
    repository.create(make_ticket("T-1"))
    repository.create(make_ticket("T-2"))
    for i, ticket_id in enumerate(["T-1", "T-2", "T-1"]):
        repository.add_comment(Comment(
            id=f"c{i}", ticket_id=ticket_id, author_id="u3",
            content=f"msg {i}", created_at=clock()
        ))

    assert [c.id for c in repository.list_comments("T-1")] == ["c0", "c2"]


def test_comment_on_unknown_ticket(repository, clock):
    with pytest.raises(ResourceNotFoundException):
        repository.add_comment(Comment(
            id="c1", ticket_id="T-404", author_id="u3", content="hi", created_at=clock()
        ))


def test_next_ticket_id_skips_taken(repository):
    repository.create(make_ticket("T-1001"))

    assert repository.next_ticket_id() == "T-1002"
    assert repository.next_ticket_id() == "T-1003"


def test_user_directory(users):
    assert users.get("u2").role == UserRole.PIC
    assert users.find("nobody") is None
    assert [u.id for u in users.list_by_role(UserRole.PIC)] == ["u2", "u4"]

    with pytest.raises(ResourceNotFoundException):
        users.get("nobody")
    with pytest.raises(ValidationException):
        users.add(User(id="u1", name="Clone", role=UserRole.ADMIN))
    with pytest.raises(ValidationException):
        users.add(User(id="u9", name="Mallory", role="ROOT"))


def test_ticket_requires_title():
    with pytest.raises(ValueError):
        make_ticket("T-1", title="  ")


def test_status_changes_count_real_transitions(repository):
    repository.create(make_ticket("T-1"))

    repository.update_status("T-1", TicketStatus.OPEN)
    repository.update_status("T-1", TicketStatus.RESOLVED)
    repository.update_status("T-1", TicketStatus.OPEN)

    assert repository.get("T-1").status_changes == 2


def test_naive_comment_time_is_utc(repository):
    repository.create(make_ticket("T-1"))
    comment = Comment(
        id="c1", ticket_id="T-1", author_id="u3", content="hi",
        created_at=NOW.replace(tzinfo=None),
    )

    assert repository.add_comment(comment).created_at == NOW
