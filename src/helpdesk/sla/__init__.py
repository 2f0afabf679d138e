"""
SLA Monitoring Module
=====================

Bounded Context for service level escalation.

Responsibilities:
- Detect tickets left unresolved beyond the staleness threshold
- Escalate to every admin and to the assignee, at most once per ticket
- Run the scan on a cancellable recurring schedule
"""
