"""
SLA Domain Layer
================

Contains:
- Value Objects: StalenessPolicy
- Domain Services: StalenessCalculator

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from helpdesk.sla.domain.value_objects import (
    StalenessPolicy,
    StalenessCalculator,
    LATE_ACTION_TITLE,
    DELAYED_ACTION_TITLE,
)

__all__ = [
    "StalenessPolicy",
    "StalenessCalculator",
    "LATE_ACTION_TITLE",
    "DELAYED_ACTION_TITLE",
]
