"""
Shared Kernel Module
====================

Generic infrastructure shared by all bounded contexts (tickets,
notifications, SLA, assistant).

DO NOT add ticket or notification business logic to the shared kernel.
"""
