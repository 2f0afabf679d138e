"""
Notification Domain Layer
=========================

Contains the Notification entity and its deduplication key.
"""

from helpdesk.notifications.domain.entities import Notification, DedupKey

__all__ = ["Notification", "DedupKey"]
