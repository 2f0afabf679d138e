"""
Notification Application Layer
==============================

Contains:
- Services: NotificationEngine
- Store interface: INotificationStore
"""

from helpdesk.notifications.application.services import (
    NotificationEngine,
    INotificationStore,
)

__all__ = ["NotificationEngine", "INotificationStore"]
