"""
Infrastructure Layer
=====================

Low-level technical concerns shared across modules:
- Logging setup
"""

from helpdesk.shared.infrastructure.logging import (
    setup_logging,
    get_logger,
    log_latency,
)

__all__ = ["setup_logging", "get_logger", "log_latency"]
