# Services package init
"""
MiEspejo Backend - Services Layer
=================================

What:  Business logic between routes (HTTP) and the row store (persistence).

Service Inventory:
    - HabitService: habit type listing/creation, event logging, session start/end
"""
