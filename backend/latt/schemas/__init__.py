"""Pydantic Schemas: response contracts for API endpoints.

Invariants:
    - Schemas describe the API boundary; ORM models describe persistence
    - Money serialised from Decimal (JSON string), never float

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
