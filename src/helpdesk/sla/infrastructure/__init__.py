"""
SLA Infrastructure Layer
========================

Contains:
- External: APScheduler-backed MonitorScheduler and its MonitorHandle
"""

from helpdesk.sla.infrastructure.external import MonitorScheduler, MonitorHandle

__all__ = ["MonitorScheduler", "MonitorHandle"]
