"""
Pydantic schema definitions for API payloads.

Schemas are separated from the store so the API representation
(camelCase JSON) stays decoupled from persistence (snake_case columns).
"""
