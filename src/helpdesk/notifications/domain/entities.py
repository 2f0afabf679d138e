"""
Notification Domain Entities
============================

A notification is created once and afterwards only its read flag may change.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from helpdesk.config import NotificationKind

DedupKey = Tuple[str, Optional[str], str]


@dataclass
class Notification:
    """
    Notification entity addressed to a single recipient.

    No two notifications in a log share the same ``dedup_key``.
    """

    id: str
    recipient_id: str
    title: str
    message: str
    kind: NotificationKind
    created_at: datetime
    ticket_id: Optional[str] = None
    read: bool = False

    @property
    def dedup_key(self) -> DedupKey:
        """(recipient, ticket id, title) - the uniqueness key of the log."""
        return (self.recipient_id, self.ticket_id, self.title)

    def mark_read(self) -> None:
        self.read = True
