"""
Helpdesk Core - Main Application
================================

Composition root for the support ticket tracker.

Builds one set of stores and services per running instance and exposes
the operations the presentation layer calls:

- Tickets: create_ticket, update_status, assign_ticket, post_comment
- Reads: list_visible_tickets, get_ticket, list_comments, dashboard
- Notifications: list_notifications, unread_count, mark_notification_read
- Monitor: start_monitor, stop_monitor, run_staleness_scan
- Assistant: classify_draft, summarize_ticket, suggest_reply
- Messaging: contact_handoff

Layers:
- Application: lifecycle, queries, notification engine, monitor, assistant
- Domain: entities and value objects
- Infrastructure: in-memory stores, APScheduler, LLM adapters
"""

import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional, Sequence, Union

from pydantic import ValidationError

from helpdesk.assistant.application import AssistantService
from helpdesk.assistant.domain import ClassificationResult
from helpdesk.assistant.infrastructure import build_llm_client
from helpdesk.config import Settings, TicketStatus, get_settings
from helpdesk.core import ValidationException
from helpdesk.notifications.application import NotificationEngine
from helpdesk.notifications.domain import Notification
from helpdesk.notifications.infrastructure import InMemoryNotificationStore
from helpdesk.shared.clock import Clock, utc_now
from helpdesk.shared.infrastructure.logging import setup_logging, get_logger
from helpdesk.sla.application import StalenessMonitor, ScanSummary
from helpdesk.sla.domain import StalenessPolicy
from helpdesk.sla.infrastructure import MonitorScheduler, MonitorHandle
from helpdesk.tickets.application import (
    TicketLifecycle,
    TicketQueryService,
    TicketCreateDTO,
    DashboardSummary,
    ContactHandoff,
)
from helpdesk.tickets.domain import Ticket, Comment
from helpdesk.tickets.infrastructure import (
    InMemoryTicketRepository,
    InMemoryUserDirectory,
    SeedLoader,
)

logger = get_logger(__name__)

_UNSET = object()


class HelpdeskApp:
    """
    One running helpdesk instance.

    Owns its repository, user directory and notification log explicitly;
    there is no module-level state. ``shutdown()`` stops every monitor the
    instance started.
    """

    def __init__(
        self,
        settings: Settings,
        users: InMemoryUserDirectory,
        repository: InMemoryTicketRepository,
        notifications: NotificationEngine,
        assistant: AssistantService,
        clock: Clock = utc_now
    ):
        self.settings = settings
        self.users = users
        self.repository = repository
        self.notifications = notifications
        self.assistant = assistant
        self._clock = clock

        self.lifecycle = TicketLifecycle(repository, users, notifications, clock)
        self.queries = TicketQueryService(repository, users)
        self.monitor = self._build_monitor(settings.staleness_threshold_days)

        self._handles: List[MonitorHandle] = []
        self._handles_lock = threading.Lock()

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        llm_client=_UNSET,
        clock: Clock = utc_now
    ) -> "HelpdeskApp":
        """
        Build an instance from settings.

        Args:
            settings: Settings to use (defaults to the cached global settings)
            llm_client: Explicit ILLMClient (or None to disable the assistant);
                picked from settings when omitted
            clock: Time source shared by all services
        """
        settings = settings or get_settings()

        users = InMemoryUserDirectory()
        repository = InMemoryTicketRepository(users, clock)
        notifications = NotificationEngine(InMemoryNotificationStore(), clock)

        if llm_client is _UNSET:
            llm_client = build_llm_client(settings)
        assistant = AssistantService(
            llm_client,
            timeout_seconds=settings.llm_timeout_seconds,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
        )

        if settings.seed_data_path is not None:
            SeedLoader(clock).load(settings.seed_data_path, users, repository)

        return cls(settings, users, repository, notifications, assistant, clock)

    # ========== Ticket lifecycle ==========

    def create_ticket(self, creator_id: str, fields: Union[TicketCreateDTO, dict]) -> Ticket:
        return self.lifecycle.create_ticket(creator_id, fields)

    def update_status(
        self,
        ticket_id: str,
        new_status: Union[TicketStatus, str],
        actor_id: str
    ) -> Ticket:
        return self.lifecycle.update_status(ticket_id, new_status, actor_id)

    def assign_ticket(self, ticket_id: str, assignee_id: str, actor_id: str) -> Ticket:
        return self.lifecycle.assign_ticket(ticket_id, assignee_id, actor_id)

    def post_comment(
        self,
        ticket_id: str,
        author_id: str,
        text: str,
        attachments: Optional[Sequence[str]] = None
    ) -> Comment:
        return self.lifecycle.post_comment(ticket_id, author_id, text, attachments)

    # ========== Reads ==========

    def list_visible_tickets(self, user_id: str) -> List[Ticket]:
        return self.queries.list_visible_tickets(user_id)

    def get_ticket(self, ticket_id: str) -> Ticket:
        return self.queries.get_ticket(ticket_id)

    def list_comments(self, ticket_id: str) -> List[Comment]:
        return self.queries.list_comments(ticket_id)

    def dashboard(self, user_id: str) -> DashboardSummary:
        return self.queries.dashboard(user_id)

    def contact_handoff(self, ticket_id: str, requester_id: str) -> Optional[ContactHandoff]:
        return self.queries.contact_handoff(ticket_id, requester_id)

    # ========== Notifications ==========

    def list_notifications(self, user_id: str) -> List[Notification]:
        return self.notifications.for_recipient(user_id)

    def unread_count(self, user_id: str) -> int:
        return self.notifications.unread_count(user_id)

    def mark_notification_read(self, notification_id: str) -> bool:
        return self.notifications.mark_read(notification_id)

    # ========== Staleness monitor ==========

    def start_monitor(
        self,
        period_seconds: Optional[float] = None,
        threshold_days: Optional[float] = None
    ) -> MonitorHandle:
        """
        Start a recurring staleness scan.

        Defaults come from settings (60 seconds / 15 days).

        Raises:
            ValidationException: non-positive period or threshold
        """
        period = (
            self.settings.monitor_period_seconds if period_seconds is None
            else period_seconds
        )
        if period <= 0:
            raise ValidationException(
                "Monitor period must be positive",
                {"period_seconds": period}
            )

        if threshold_days is None:
            monitor = self.monitor
        else:
            try:
                monitor = self._build_monitor(threshold_days)
            except ValidationError as e:
                raise ValidationException(
                    "Invalid staleness threshold",
                    {"threshold_days": threshold_days, "errors": e.errors(include_url=False)}
                ) from e

        handle = MonitorScheduler(monitor).start(period)
        with self._handles_lock:
            self._handles.append(handle)
        return handle

    def stop_monitor(self, handle: MonitorHandle) -> None:
        handle.cancel()
        with self._handles_lock:
            if handle in self._handles:
                self._handles.remove(handle)

    def run_staleness_scan(self, now: Optional[datetime] = None) -> ScanSummary:
        """Run a single scan pass synchronously."""
        return self.monitor.scan(now)

    # ========== Assistant ==========

    async def classify_draft(
        self,
        title: str,
        description: str,
        attachments: Optional[Sequence[str]] = None
    ) -> ClassificationResult:
        return await self.assistant.classify(title, description, attachments)

    async def summarize_ticket(self, ticket_id: str) -> str:
        ticket = self.queries.get_ticket(ticket_id)
        return await self.assistant.summarize(ticket, self.queries.list_comments(ticket_id))

    async def suggest_reply(self, ticket_id: str) -> str:
        ticket = self.queries.get_ticket(ticket_id)
        return await self.assistant.suggest_reply(ticket, self.queries.list_comments(ticket_id))

    # ========== Lifecycle ==========

    def shutdown(self) -> None:
        with self._handles_lock:
            handles, self._handles = self._handles, []
        for handle in handles:
            handle.cancel()
        logger.info("Helpdesk shutdown complete")

    def _build_monitor(self, threshold_days: float) -> StalenessMonitor:
        return StalenessMonitor(
            self.repository,
            self.users,
            self.notifications,
            StalenessPolicy(threshold_days=threshold_days),
            self._clock,
        )


@contextmanager
def lifespan(
    settings: Optional[Settings] = None,
    configure_logging: bool = True
) -> Iterator[HelpdeskApp]:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Build stores and services (loading seed data if configured)
    3. Start the staleness monitor

    SHUTDOWN:
    1. Stop every monitor started by the instance
    """
    settings = settings or get_settings()

    if configure_logging:
        setup_logging(settings.log_level, settings.environment)
    logger.info("Starting Helpdesk", extra={
        "version": settings.app_version,
        "environment": settings.environment
    })

    app = HelpdeskApp.from_settings(settings)
    if settings.monitor_enabled:
        app.start_monitor()

    logger.info("Helpdesk started successfully")
    try:
        yield app
    finally:
        logger.info("Shutting down Helpdesk")
        app.shutdown()


def main() -> None:
    """Run an instance until interrupted."""
    stop = threading.Event()
    with lifespan():
        try:
            stop.wait()
        except KeyboardInterrupt:
            pass


# === Development Entry Point ===

if __name__ == "__main__":
    main()
