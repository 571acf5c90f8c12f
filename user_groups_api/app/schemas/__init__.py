"""
Pydantic schema definitions for API payloads.

Each domain (users, groups) defines its own request and response
models.  Schemas are kept apart from the SQL in ``services`` so the
API representation can change without touching persistence.
"""
