"""Infrastructure Layer: database access and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All store calls are bounded and error-mapped

Design Decisions:
    - Resilient wrappers over raw clients (single responsibility)
"""
