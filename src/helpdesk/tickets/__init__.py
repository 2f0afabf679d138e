"""
Tickets Module
==============

Bounded Context for the ticket lifecycle.

Responsibilities:
- Own the authoritative ticket and comment collections
- Validate assignments (assignees are always PICs)
- Apply status changes, assignments and comments with notification fan-out
- Filter what each role may see
- Dashboard counters and the messaging contact hand-off
"""
