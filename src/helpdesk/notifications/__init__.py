"""
Notifications Module
====================

Bounded Context for cross-role notifications.

Responsibilities:
- Keep one newest-first notification log per user
- Suppress repeats of the same (recipient, ticket, title) alert
- Track read state and unread counts
"""
