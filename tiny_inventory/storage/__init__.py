"""Data storage for persistence.

Storage handles:
- PostgreSQL: engine, DB sessions, schema helpers

No business logic in storage - that belongs in services.
"""
