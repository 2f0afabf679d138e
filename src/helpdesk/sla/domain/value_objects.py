"""
SLA Value Objects
==================

Immutable value objects for staleness escalation.

Value objects are defined by their attributes rather than an identity.
"""

from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field

from helpdesk.config import TERMINAL_STATUSES
from helpdesk.tickets.domain import Ticket

LATE_ACTION_TITLE = "Late Action Alert"
DELAYED_ACTION_TITLE = "URGENT: Delayed Action"


class StalenessPolicy(BaseModel):
    """
    When a ticket counts as overdue and how the alerts are titled.

    Titles are fixed per (recipient, ticket) so the notification log's
    deduplication turns repeated scans into at-most-once alerts.
    """
    model_config = ConfigDict(frozen=True)

    threshold_days: float = Field(
        default=15.0,
        gt=0,
        description="Age after which a non-terminal ticket is overdue"
    )
    admin_alert_title: str = Field(default=LATE_ACTION_TITLE, min_length=1)
    assignee_alert_title: str = Field(default=DELAYED_ACTION_TITLE, min_length=1)

    @property
    def threshold(self) -> timedelta:
        return timedelta(days=self.threshold_days)


class StalenessCalculator:
    """
    Pure functions for staleness checks.

    Stateless utility class - all staleness logic in one place.
    """

    @staticmethod
    def is_stale(ticket: Ticket, current_time: datetime, threshold: timedelta) -> bool:
        """
        A ticket is stale when it is not RESOLVED/CLOSED and strictly older
        than ``threshold``.
        """
        if ticket.status in TERMINAL_STATUSES:
            return False
        return current_time - ticket.created_at > threshold

    @staticmethod
    def overdue_by(ticket: Ticket, current_time: datetime, threshold: timedelta) -> timedelta:
        """How far past the threshold the ticket is (zero if not yet)."""
        return max(timedelta(0), current_time - ticket.created_at - threshold)
