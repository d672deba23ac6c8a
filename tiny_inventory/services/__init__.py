"""Business logic services.

Routes and web pages call these; each operation opens its own session and
returns Pydantic schemas, never ORM objects.
"""
