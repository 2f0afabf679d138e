"""
Notification Infrastructure Layer
=================================
"""

from helpdesk.notifications.infrastructure.repositories import InMemoryNotificationStore

__all__ = ["InMemoryNotificationStore"]
