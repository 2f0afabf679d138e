"""
Notification Infrastructure Repositories
========================================

In-memory notification log. One instance per running application.
"""

import threading
from collections import defaultdict
from typing import Dict, List, Optional, Set

from helpdesk.notifications.application import INotificationStore
from helpdesk.notifications.domain import Notification, DedupKey


class InMemoryNotificationStore(INotificationStore):
    """
    Per-recipient lists kept newest first, plus an id index and a key set
    for constant-time duplicate checks.
    """

    def __init__(self):
        self._by_recipient: Dict[str, List[Notification]] = defaultdict(list)
        self._by_id: Dict[str, Notification] = {}
        self._keys: Set[DedupKey] = set()
        self._lock = threading.RLock()

    def contains_key(self, key: DedupKey) -> bool:
        with self._lock:
            return key in self._keys

    def prepend(self, notification: Notification) -> None:
        with self._lock:
            self._by_recipient[notification.recipient_id].insert(0, notification)
            self._by_id[notification.id] = notification
            self._keys.add(notification.dedup_key)

    def get(self, notification_id: str) -> Optional[Notification]:
        with self._lock:
            return self._by_id.get(notification_id)

    def list_for_recipient(self, recipient_id: str) -> List[Notification]:
        with self._lock:
            return list(self._by_recipient.get(recipient_id, []))

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)
