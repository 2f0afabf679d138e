# tests/test_app.py

from pathlib import Path

import pytest

from helpdesk.assistant.infrastructure import MockLLMClient
from helpdesk.config import Settings, TicketStatus, TicketPriority, UserRole
from helpdesk.core import ValidationException
from helpdesk.main import HelpdeskApp, lifespan
from helpdesk.sla.domain import LATE_ACTION_TITLE, DELAYED_ACTION_TITLE

from conftest import FakeClock, NOW, make_ticket


@pytest.fixture
def app(clock, users):
    settings = Settings(mock_llm=True, monitor_enabled=False)
    app = HelpdeskApp.from_settings(settings, clock=clock)
    for user in users.all():
        app.users.add(user)
    yield app
    app.shutdown()


def test_full_ticket_flow(app, clock):
    ticket = app.create_ticket("u3", {
        "id": "T-2001", "title": "Laptop screen flickers",
        "description": "Since yesterday", "priority": "HIGH", "category": "Hardware",
    })
    assert [n.title for n in app.list_notifications("u1")] == ["New Ticket Submitted"]

    app.assign_ticket("T-2001", "u2", "u1")
    assert app.list_notifications("u2")[0].title == "New Ticket Assigned"

    app.post_comment("T-2001", "u3", "Still flickering")
    assert app.list_notifications("u2")[0].title == "New reply from Charlie Client on T-2001 (#1)"

    app.post_comment("T-2001", "u2", "Replacing the cable")
    app.update_status("T-2001", "RESOLVED", "u2")
    titles = [n.title for n in app.list_notifications("u3")]
    assert titles == ["Ticket Resolved", "New reply from Bob Tech on T-2001 (#2)"]

    assert app.unread_count("u3") == 2
    assert app.mark_notification_read(app.list_notifications("u3")[0].id) is True
    assert app.unread_count("u3") == 1

    stored = app.get_ticket(ticket.id)
    assert stored.status == TicketStatus.RESOLVED
    assert stored.priority == TicketPriority.HIGH
    assert [c.author_id for c in app.list_comments("T-2001")] == ["u3", "u2"]


def test_urgent_ticket_scenario(app, clock):
    app.create_ticket("u3", {"id": "T-2001", "title": "Production down", "priority": "URGENT"})
    admin_notes = app.list_notifications("u1")
    assert [(n.ticket_id, n.kind.value) for n in admin_notes] == [("T-2001", "urgent")]

    app.assign_ticket("T-2001", "u2", "u1")
    pic_notes = app.list_notifications("u2")
    assert [(n.ticket_id, n.kind.value) for n in pic_notes] == [("T-2001", "warning")]

    app.update_status("T-2001", TicketStatus.RESOLVED, "u2")
    client_notes = app.list_notifications("u3")
    assert len(client_notes) == 1
    assert client_notes[0].kind.value == "success"
    assert "RESOLVED" in client_notes[0].message

    clock.advance(days=30)
    summary = app.run_staleness_scan()
    assert summary.notifications_raised == 0
    assert len(app.list_notifications("u1")) == 1
    assert len(app.list_notifications("u2")) == 1


def test_visibility_through_app(app):
    app.create_ticket("u3", {"title": "Mine"})
    app.repository.create(make_ticket("T-9", creator_id="u5"))
    app.assign_ticket("T-9", "u4", "u1")

    assert [t.id for t in app.list_visible_tickets("u3")] == ["T-1001"]
    assert [t.id for t in app.list_visible_tickets("u4")] == ["T-9"]
    assert app.list_visible_tickets("u2") == []
    assert len(app.list_visible_tickets("u1")) == 2


def test_stale_ticket_escalated_once(app, clock):
    app.create_ticket("u3", {"title": "Forgotten"})
    app.assign_ticket("T-1001", "u2", "u1")
    clock.advance(days=16)

    for _ in range(3):
        app.run_staleness_scan()

    assert [n.title for n in app.list_notifications("u1")].count(LATE_ACTION_TITLE) == 1
    assert [n.title for n in app.list_notifications("u2")].count(DELAYED_ACTION_TITLE) == 1


def test_dashboard(app, clock):
    app.create_ticket("u3", {"title": "First", "priority": "URGENT"})
    for i in range(6):
        clock.advance(minutes=1)
        app.create_ticket("u3", {"title": f"Ticket {i}"})
    app.update_status("T-1001", TicketStatus.IN_PROGRESS, "u1")
    app.update_status("T-1002", TicketStatus.RESOLVED, "u1")

    summary = app.dashboard("u3")

    assert summary.role == UserRole.CLIENT
    assert summary.total_tickets == 7
    assert summary.open_count == 5
    assert summary.in_progress_count == 1
    assert summary.resolved_count == 1
    assert summary.urgent_count == 1
    assert [t.id for t in summary.recent_tickets] == ["T-1007", "T-1006", "T-1005", "T-1004", "T-1003"]
    assert app.dashboard("u2").total_tickets == 0


def test_contact_handoff(app):
    app.create_ticket("u3", {"title": "Printer offline"})

    assert app.contact_handoff("T-1001", "u3") is None

    app.assign_ticket("T-1001", "u2", "u1")
    to_pic = app.contact_handoff("T-1001", "u3")
    assert to_pic.recipient_id == "u2"
    assert to_pic.handle == "6289876543210"
    assert "T-1001" in to_pic.text

    to_client = app.contact_handoff("T-1001", "u2")
    assert to_client.recipient_id == "u3"

    app.repository.create(make_ticket("T-5", creator_id="u3", assigned_to="u4"))
    assert app.contact_handoff("T-5", "u3") is None


@pytest.mark.asyncio
async def test_assistant_through_app(app):
    app.create_ticket("u3", {"title": "App crashes"})
    app.post_comment("T-1001", "u3", "Crash on save")

    result = await app.classify_draft("App crashes", "On save")
    assert result.category == "Software"
    assert (await app.summarize_ticket("T-1001")).startswith("Mock summary")
    assert await app.suggest_reply("T-1001")


@pytest.mark.asyncio
async def test_assistant_disabled():
    app = HelpdeskApp.from_settings(Settings(monitor_enabled=False), llm_client=None)

    result = await app.classify_draft("t", "d")

    assert result.is_fallback is True
    assert app.assistant.is_available is False


def test_start_and_stop_monitor(app):
    handle = app.start_monitor(period_seconds=0.05, threshold_days=1)

    assert handle.is_running
    app.stop_monitor(handle)
    assert handle.cancelled
    app.stop_monitor(handle)


@pytest.mark.parametrize("kwargs", [
    {"threshold_days": 0},
    {"threshold_days": -3},
    {"period_seconds": 0},
    {"period_seconds": -1},
])
def test_start_monitor_rejects_non_positive_arguments(app, kwargs):
    with pytest.raises(ValidationException):
        app.start_monitor(**kwargs)

    assert app._handles == []


def test_lifespan_with_missing_seed(tmp_path):
    settings = Settings(
        mock_llm=True,
        monitor_enabled=True,
        monitor_period_seconds=30,
        seed_data_path=tmp_path / "missing.yaml",
    )

    with lifespan(settings, configure_logging=False) as app:
        assert isinstance(app, HelpdeskApp)
        assert isinstance(app.assistant._llm, MockLLMClient)
        assert app.users.all() == []

    assert app._handles == []


def test_from_settings_loads_seed():
    clock = FakeClock(NOW)
    seed = Path(__file__).resolve().parent.parent / "seed_data.yaml"
    app = HelpdeskApp.from_settings(
        Settings(monitor_enabled=False, seed_data_path=seed), llm_client=None, clock=clock
    )

    assert len(app.list_visible_tickets("u1")) == 3
    assert app.list_notifications("u1") == []

    clock.advance(days=16)
    summary = app.run_staleness_scan()
    assert summary.stale_ticket_ids == ["T-1001", "T-1002"]
