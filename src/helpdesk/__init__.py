"""
Helpdesk Core
=============

Role-based support ticket tracker core.

Modules:
- Tickets: repository, role-based visibility and the ticket lifecycle
- Notifications: per-user, deduplicated notification log
- SLA: background staleness monitor raising escalation alerts
- Assistant: best-effort classification, summaries and reply suggestions
"""

__version__ = "1.0.0"
