"""
SLA Application Services
=========================

The staleness monitor scans all tickets and escalates the overdue ones.

It only ever raises notifications; it never changes ticket state (no
auto-close, no priority bump).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from helpdesk.config import UserRole, NotificationKind
from helpdesk.notifications.application import NotificationEngine
from helpdesk.shared.clock import Clock, as_utc, utc_now
from helpdesk.shared.infrastructure.logging import get_logger, log_latency
from helpdesk.sla.domain import StalenessPolicy, StalenessCalculator
from helpdesk.tickets.application import ITicketRepository, IUserDirectory
from helpdesk.tickets.domain import Ticket

logger = get_logger(__name__)


@dataclass
class ScanSummary:
    """Outcome of one full pass over the repository."""
    scanned_at: datetime
    tickets_evaluated: int = 0
    stale_ticket_ids: List[str] = field(default_factory=list)
    notifications_raised: int = 0


class StalenessMonitor:
    """
    Evaluates every ticket against the staleness policy.

    For each stale ticket:
    1. Every ADMIN receives "Late Action Alert"
    2. The assignee, if any, receives "URGENT: Delayed Action"

    Both carry a fixed title, so repeated scans alert each recipient at most
    once per ticket.
    """

    def __init__(
        self,
        repository: ITicketRepository,
        users: IUserDirectory,
        notifications: NotificationEngine,
        policy: Optional[StalenessPolicy] = None,
        clock: Clock = utc_now
    ):
        self._repo = repository
        self._users = users
        self._notifications = notifications
        self._policy = policy or StalenessPolicy()
        self._clock = clock

    @property
    def policy(self) -> StalenessPolicy:
        return self._policy

    def scan(self, now: Optional[datetime] = None) -> ScanSummary:
        """
        Run one full pass over the current tickets.

        Args:
            now: Evaluation time (defaults to the clock)

        Returns:
            ScanSummary for the pass
        """
        current_time = as_utc(now) if now is not None else self._clock()
        tickets = self._repo.list_tickets()
        summary = ScanSummary(scanned_at=current_time, tickets_evaluated=len(tickets))

        with log_latency(logger, "staleness_scan", tickets=len(tickets)):
            admins = self._users.list_by_role(UserRole.ADMIN)
            for ticket in tickets:
                try:
                    if not StalenessCalculator.is_stale(ticket, current_time, self._policy.threshold):
                        continue
                    summary.stale_ticket_ids.append(ticket.id)
                    summary.notifications_raised += self._escalate(ticket, admins, current_time)
                except Exception:
                    logger.error(
                        "Escalation failed",
                        extra={"ticket_id": ticket.id},
                        exc_info=True
                    )

        if summary.notifications_raised:
            logger.warning(
                "Overdue tickets escalated",
                extra={
                    "stale_tickets": len(summary.stale_ticket_ids),
                    "notifications_raised": summary.notifications_raised
                }
            )
        return summary

    def _escalate(self, ticket: Ticket, admins, current_time: datetime) -> int:
        raised = 0
        overdue = StalenessCalculator.overdue_by(ticket, current_time, self._policy.threshold)
        age_days = int(ticket.age_at(current_time) // 86400)

        for admin in admins:
            created = self._notifications.raise_notification(
                admin.id,
                self._policy.admin_alert_title,
                f"Ticket {ticket.id} ({ticket.title}) has been {ticket.status.value} "
                f"for {age_days} days without resolution.",
                ticket.id,
                NotificationKind.URGENT,
            )
            raised += created is not None

        if ticket.assigned_to:
            created = self._notifications.raise_notification(
                ticket.assigned_to,
                self._policy.assignee_alert_title,
                f"Ticket {ticket.id} ({ticket.title}) is {overdue.days} day(s) past the "
                f"{self._policy.threshold_days:g}-day action window. Please act now.",
                ticket.id,
                NotificationKind.URGENT,
            )
            raised += created is not None

        return raised
