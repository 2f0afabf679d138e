"""
Notification Application Services
=================================

The notification engine owns the per-user notification log and exposes a
single deduplicated raise operation plus mark-read.

The engine never raises. Blank recipients, duplicates and unknown ids are
no-ops.
"""

import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Callable, List, Optional
from uuid import uuid4

from helpdesk.config import NotificationKind
from helpdesk.notifications.domain import Notification, DedupKey
from helpdesk.shared.clock import Clock, utc_now
from helpdesk.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


# ========== Repository Interfaces (Dependency Inversion) ==========

class INotificationStore(ABC):
    """Interface for notification log storage."""

    @abstractmethod
    def contains_key(self, key: DedupKey) -> bool:
        """Check whether a notification with this dedup key exists (read or not)."""

    @abstractmethod
    def prepend(self, notification: Notification) -> None:
        """Insert at the head of the recipient's log."""

    @abstractmethod
    def get(self, notification_id: str) -> Optional[Notification]:
        """Get notification by ID."""

    @abstractmethod
    def list_for_recipient(self, recipient_id: str) -> List[Notification]:
        """Recipient's notifications, newest first."""


# ========== Application Services ==========

class NotificationEngine:
    """
    Deduplicating notification log.

    Check-and-insert runs under one lock so concurrent raises (a monitor
    tick racing a user action) cannot both pass the duplicate check.
    """

    def __init__(
        self,
        store: INotificationStore,
        clock: Clock = utc_now,
        id_factory: Callable[[], str] = lambda: f"n-{uuid4().hex[:12]}"
    ):
        self._store = store
        self._clock = clock
        self._id_factory = id_factory
        self._lock = threading.RLock()

    def raise_notification(
        self,
        recipient_id: str,
        title: str,
        message: str,
        ticket_id: Optional[str] = None,
        kind: NotificationKind = NotificationKind.INFO
    ) -> Optional[Notification]:
        """
        Add a notification to the head of the recipient's log.

        A notification with the same (recipient, ticket id, title) suppresses
        the call, regardless of its read flag.

        Returns:
            A snapshot of the new notification, or None if nothing was inserted.
        """
        if not recipient_id:
            logger.debug("Notification without recipient ignored", extra={"title": title})
            return None

        try:
            kind = NotificationKind(kind)
        except ValueError:
            logger.warning(
                "Unknown notification kind, using info",
                extra={"kind": str(kind), "title": title}
            )
            kind = NotificationKind.INFO

        key: DedupKey = (recipient_id, ticket_id, title)

        with self._lock:
            if self._store.contains_key(key):
                logger.debug(
                    "Duplicate notification suppressed",
                    extra={"recipient_id": recipient_id, "ticket_id": ticket_id, "title": title}
                )
                return None

            notification = Notification(
                id=self._id_factory(),
                recipient_id=recipient_id,
                title=title,
                message=message,
                kind=kind,
                created_at=self._clock(),
                ticket_id=ticket_id,
            )
            self._store.prepend(notification)

        logger.info(
            "Notification raised",
            extra={
                "notification_id": notification.id,
                "recipient_id": recipient_id,
                "ticket_id": ticket_id,
                "kind": kind.value
            }
        )
        return replace(notification)

    def mark_read(self, notification_id: str) -> bool:
        """
        Set the read flag. Idempotent; unknown ids are ignored.

        Returns:
            True if the flag changed on this call.
        """
        with self._lock:
            notification = self._store.get(notification_id)
            if notification is None or notification.read:
                return False
            notification.mark_read()
            return True

    def mark_all_read(self, recipient_id: str) -> int:
        """Mark every notification of a recipient as read, returning how many changed."""
        with self._lock:
            changed = 0
            for notification in self._store.list_for_recipient(recipient_id):
                if not notification.read:
                    notification.mark_read()
                    changed += 1
            return changed

    def for_recipient(self, recipient_id: str) -> List[Notification]:
        """Snapshot of the recipient's notifications, newest first."""
        with self._lock:
            return [replace(n) for n in self._store.list_for_recipient(recipient_id)]

    def unread_count(self, recipient_id: str) -> int:
        with self._lock:
            return sum(1 for n in self._store.list_for_recipient(recipient_id) if not n.read)
