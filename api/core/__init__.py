"""
Shared, cross-cutting code for the API.

`core/` holds the building blocks every feature uses (DB pool wiring and
environment settings). Feature-specific SQL and business logic live in the
feature packages (`analytics/`, `images/`).
"""
