"""
SLA Application Layer
======================

Contains:
- Services: StalenessMonitor (one scan pass) and its ScanSummary
"""

from helpdesk.sla.application.services import StalenessMonitor, ScanSummary

__all__ = ["StalenessMonitor", "ScanSummary"]
