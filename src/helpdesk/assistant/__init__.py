"""
Assistant Module
================

Bounded Context for AI-assisted helpdesk features.

Responsibilities:
- Suggest category and priority for a draft ticket
- Summarize a ticket conversation
- Suggest a staff reply

All output is ephemeral and every failure degrades to a fixed default.
"""
